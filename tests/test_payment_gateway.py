"""Tests for the Stripe payment gateway adapter."""

import hashlib
import hmac
import json
import time
from unittest import mock

import pytest

from storefront.errors.exceptions import BadRequest
from storefront.services.payment import (
    CHARGE_REFUNDED,
    PAYMENT_FAILED,
    PAYMENT_SUCCEEDED,
    PaymentGateway,
    to_minor_units,
)

WEBHOOK_SECRET = "whsec_test_secret"


def sign(payload, secret=WEBHOOK_SECRET, timestamp=None):
    timestamp = timestamp or int(time.time())
    signed_payload = f"{timestamp}.{payload}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed_payload, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def event_payload(event_type, obj):
    return json.dumps(
        {"id": "evt_1", "object": "event", "type": event_type, "data": {"object": obj}}
    )


@pytest.fixture
def placeholder():
    return PaymentGateway()


@pytest.fixture
def live():
    return PaymentGateway(secret_key="sk_test_123", webhook_secret=WEBHOOK_SECRET)


class TestMinorUnits:
    def test_rounds_to_cents(self):
        assert to_minor_units(24.99) == 2499
        assert to_minor_units(100) == 10000


class TestPlaceholderMode:
    def test_not_configured(self, placeholder):
        assert placeholder.is_configured is False

    def test_create_intent_shape(self, placeholder):
        intent = placeholder.create_payment_intent(12.5, "usd")
        assert intent["client_secret"].startswith("placeholder_secret_")
        assert intent["payment_intent_id"].startswith("pi_placeholder_")
        assert intent["amount"] == 12.5
        assert intent["currency"] == "USD"
        assert "note" in intent

    @pytest.mark.parametrize("amount", [0, -5, None])
    def test_amount_must_be_positive(self, placeholder, amount):
        with pytest.raises(BadRequest, match="greater than 0"):
            placeholder.create_payment_intent(amount, "USD")

    def test_confirm_succeeds(self, placeholder):
        result = placeholder.confirm_payment("pi_placeholder_1")
        assert result["status"] == "succeeded"
        assert result["payment_intent_id"] == "pi_placeholder_1"

    def test_confirm_requires_intent(self, placeholder):
        with pytest.raises(BadRequest):
            placeholder.confirm_payment("")

    def test_refund(self, placeholder):
        result = placeholder.process_refund("pi_placeholder_1", amount=5)
        assert result["refund_id"].startswith("re_placeholder_")
        assert result["status"] == "succeeded"
        assert result["amount"] == 5


class TestLiveMode:
    def test_create_intent_sends_minor_units(self, live):
        with mock.patch(
            "storefront.services.payment.stripe.PaymentIntent.create",
            return_value={"id": "pi_live", "client_secret": "pi_live_secret"},
        ) as create:
            intent = live.create_payment_intent(24.99, "EUR")

        create.assert_called_once_with(
            amount=2499,
            currency="eur",
            automatic_payment_methods={"enabled": True},
            api_key="sk_test_123",
        )
        assert intent == {
            "client_secret": "pi_live_secret",
            "payment_intent_id": "pi_live",
            "amount": 24.99,
            "currency": "EUR",
        }

    def test_gateway_error_becomes_bad_request(self, live):
        with mock.patch(
            "storefront.services.payment.stripe.PaymentIntent.create",
            side_effect=Exception("Invalid currency"),
        ):
            with pytest.raises(BadRequest, match="Invalid currency"):
                live.create_payment_intent(10, "USD")

    def test_confirm_incomplete_payment(self, live):
        with mock.patch(
            "storefront.services.payment.stripe.PaymentIntent.retrieve",
            return_value={"status": "requires_payment_method", "amount": 1000, "currency": "usd"},
        ):
            with pytest.raises(BadRequest, match="requires_payment_method"):
                live.confirm_payment("pi_live")

    def test_confirm_succeeded(self, live):
        with mock.patch(
            "storefront.services.payment.stripe.PaymentIntent.retrieve",
            return_value={"status": "succeeded", "amount": 1050, "currency": "usd"},
        ):
            result = live.confirm_payment("pi_live")
        assert result["amount"] == 10.5
        assert result["currency"] == "USD"

    def test_refund_passes_reason(self, live):
        with mock.patch(
            "storefront.services.payment.stripe.Refund.create",
            return_value={"id": "re_1", "amount": 500, "status": "succeeded"},
        ) as create:
            result = live.process_refund("pi_live", amount=5, reason="duplicate")

        create.assert_called_once_with(
            api_key="sk_test_123", payment_intent="pi_live", amount=500, reason="duplicate"
        )
        assert result["refund_id"] == "re_1"
        assert result["amount"] == 5


class TestWebhookSignature:
    def test_missing_header(self, live):
        with pytest.raises(BadRequest, match="stripe-signature"):
            live.verify_webhook_signature(b"{}", None)

    def test_valid_signature(self, live):
        payload = event_payload(PAYMENT_SUCCEEDED, {"id": "pi_1"})
        event = live.verify_webhook_signature(payload.encode("utf-8"), sign(payload))
        assert event["type"] == PAYMENT_SUCCEEDED
        assert event["data"]["object"]["id"] == "pi_1"

    def test_wrong_secret_rejected(self, live):
        payload = event_payload(PAYMENT_SUCCEEDED, {"id": "pi_1"})
        with pytest.raises(BadRequest, match="Webhook error"):
            live.verify_webhook_signature(payload, sign(payload, secret="whsec_other"))

    def test_tampered_payload_rejected(self, live):
        payload = event_payload(PAYMENT_SUCCEEDED, {"id": "pi_1"})
        header = sign(payload)
        tampered = payload.replace("pi_1", "pi_2")
        with pytest.raises(BadRequest):
            live.verify_webhook_signature(tampered, header)

    def test_unverified_without_secret(self, placeholder):
        payload = event_payload(PAYMENT_FAILED, {"id": "pi_1"})
        event = placeholder.verify_webhook_signature(payload, "t=1,v1=ignored")
        assert event["type"] == PAYMENT_FAILED

    def test_garbage_payload_rejected(self, placeholder):
        with pytest.raises(BadRequest, match="invalid"):
            placeholder.verify_webhook_signature("not json", "t=1,v1=ignored")


class TestTranslateEvent:
    def test_succeeded(self):
        update = PaymentGateway.translate_event(
            json.loads(event_payload(PAYMENT_SUCCEEDED, {"id": "pi_1"}))
        )
        assert update == {"payment_intent_id": "pi_1", "payment_status": "paid", "status": None}

    def test_failed(self):
        update = PaymentGateway.translate_event(
            json.loads(event_payload(PAYMENT_FAILED, {"id": "pi_1"}))
        )
        assert update == {"payment_intent_id": "pi_1", "payment_status": "failed", "status": None}

    def test_charge_refunded_uses_payment_intent(self):
        update = PaymentGateway.translate_event(
            json.loads(event_payload(CHARGE_REFUNDED, {"id": "ch_1", "payment_intent": "pi_1"}))
        )
        assert update == {
            "payment_intent_id": "pi_1",
            "payment_status": "refunded",
            "status": "refunded",
        }

    def test_unhandled_event(self):
        assert PaymentGateway.translate_event({"type": "customer.created"}) is None
