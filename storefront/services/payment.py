import json
import time

import stripe

from storefront.errors.exceptions import BadRequest
from storefront.lib.logger import logger

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"
CHARGE_REFUNDED = "charge.refunded"

PLACEHOLDER_NOTE = "Stripe not configured - using placeholder mode"


def to_minor_units(amount):
    return int(round(amount * 100))


class PaymentGateway:
    """Stripe adapter.

    Without ``STRIPE_SECRET_KEY`` every call answers with a placeholder
    response shaped like the live one, so checkout can be exercised without a
    payment backend.
    """

    def __init__(self, secret_key="", webhook_secret=""):
        self.secret_key = secret_key
        self.webhook_secret = webhook_secret

    def init_app(self, app):
        self.secret_key = app.config.get("STRIPE_SECRET_KEY") or ""
        self.webhook_secret = app.config.get("STRIPE_WEBHOOK_SECRET") or ""
        if not self.secret_key:
            logger.warning(PLACEHOLDER_NOTE)
        app.extensions["payment_gateway"] = self

    @property
    def is_configured(self):
        return bool(self.secret_key)

    def create_payment_intent(self, amount, currency="INR"):
        if not amount or amount <= 0:
            raise BadRequest(message="Amount must be greater than 0")
        currency = (currency or "INR").upper()

        if self.is_configured:
            try:
                payment_intent = stripe.PaymentIntent.create(
                    amount=to_minor_units(amount),
                    currency=currency.lower(),
                    automatic_payment_methods={"enabled": True},
                    api_key=self.secret_key,
                )
            except Exception as e:
                logger.error(f"Payment intent creation failed: {e}")
                raise BadRequest(message=f"Payment intent creation failed: {e}")
            return {
                "client_secret": payment_intent["client_secret"],
                "payment_intent_id": payment_intent["id"],
                "amount": amount,
                "currency": currency,
            }

        stamp = int(time.time() * 1000)
        return {
            "client_secret": f"placeholder_secret_{stamp}",
            "payment_intent_id": f"pi_placeholder_{stamp}",
            "amount": amount,
            "currency": currency,
            "note": PLACEHOLDER_NOTE,
        }

    def confirm_payment(self, payment_intent_id):
        if not payment_intent_id:
            raise BadRequest(message="Payment intent ID is required")

        if self.is_configured:
            try:
                payment_intent = stripe.PaymentIntent.retrieve(
                    payment_intent_id, api_key=self.secret_key
                )
            except Exception as e:
                logger.error(f"Payment confirmation failed: {e}")
                raise BadRequest(message=f"Payment confirmation failed: {e}")

            status = payment_intent["status"]
            if status != "succeeded":
                raise BadRequest(
                    message=f"Payment confirmation failed: Payment not completed. Status: {status}"
                )
            return {
                "message": "Payment confirmed",
                "payment_intent_id": payment_intent_id,
                "status": status,
                "amount": payment_intent["amount"] / 100,
                "currency": str(payment_intent["currency"]).upper(),
            }

        return {
            "message": "Payment confirmed (placeholder mode)",
            "payment_intent_id": payment_intent_id,
            "status": "succeeded",
            "note": PLACEHOLDER_NOTE,
        }

    def process_refund(self, payment_intent_id, amount=None, reason=None):
        if not payment_intent_id:
            raise BadRequest(message="Payment intent ID is required")

        if self.is_configured:
            params = {"payment_intent": payment_intent_id}
            if amount:
                params["amount"] = to_minor_units(amount)
            if reason:
                params["reason"] = reason
            try:
                refund = stripe.Refund.create(api_key=self.secret_key, **params)
            except Exception as e:
                logger.error(f"Refund processing failed: {e}")
                raise BadRequest(message=f"Refund processing failed: {e}")
            return {
                "refund_id": refund["id"],
                "amount": refund["amount"] / 100,
                "status": refund["status"],
                "payment_intent_id": payment_intent_id,
            }

        return {
            "message": "Refund processed (placeholder mode)",
            "refund_id": f"re_placeholder_{int(time.time() * 1000)}",
            "status": "succeeded",
            "payment_intent_id": payment_intent_id,
            "amount": amount,
            "note": PLACEHOLDER_NOTE,
        }

    def verify_webhook_signature(self, payload, signature_header):
        """Return the webhook event as a plain dict, or raise BadRequest."""
        if not signature_header:
            raise BadRequest(message="Missing stripe-signature header")
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")

        if self.webhook_secret:
            try:
                stripe.Webhook.construct_event(
                    payload, signature_header, self.webhook_secret
                )
            except Exception as e:
                logger.warning(f"Webhook signature verification failed: {e}")
                raise BadRequest(message=f"Webhook error: {e}")
        else:
            logger.warning("Webhook signing secret not configured, skipping verification")

        try:
            event = json.loads(payload)
        except ValueError as e:
            raise BadRequest(message=f"Webhook error: invalid payload ({e})")
        if not isinstance(event, dict) or "type" not in event:
            raise BadRequest(message="Webhook error: invalid event")
        return event

    @staticmethod
    def translate_event(event):
        """Map a gateway event onto an order update, None for unhandled types."""
        event_type = event.get("type")
        data_object = (event.get("data") or {}).get("object") or {}

        if event_type == PAYMENT_SUCCEEDED:
            return {
                "payment_intent_id": data_object.get("id"),
                "payment_status": "paid",
                "status": None,
            }
        if event_type == PAYMENT_FAILED:
            return {
                "payment_intent_id": data_object.get("id"),
                "payment_status": "failed",
                "status": None,
            }
        if event_type == CHARGE_REFUNDED:
            return {
                "payment_intent_id": data_object.get("payment_intent")
                or data_object.get("id"),
                "payment_status": "refunded",
                "status": "refunded",
            }
        return None
