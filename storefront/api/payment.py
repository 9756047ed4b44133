# coding: utf8
from flask import request
from flask_jwt_extended import jwt_required
from flask_restx import Namespace, Resource

from storefront.decorators import parameters
from storefront.enums.order import PaymentStatus
from storefront.errors.exceptions import BadRequest
from storefront.extensions import payment_gateway
from storefront.lib.currency import resolve_request_currency
from storefront.lib.logger import logger
from storefront.lib.response import Response
from storefront.services.auth import AuthService
from storefront.services.order import OrderService

ns = Namespace(name="payments", description="Payment API")


@ns.route("/create-intent")
class APICreatePaymentIntent(Resource):

    @jwt_required()
    @parameters(
        type="object",
        properties={
            "amount": {"type": "number"},
            "currency": {"type": "string"},
            "orderId": {"type": "string"},
        },
    )
    def post(self, args):
        current_user = AuthService.get_current_identity()

        order = None
        if args.get("orderId"):
            order = OrderService.ensure_payable(args["orderId"], current_user)
            amount = order.total_in_currency
            currency = order.currency
        else:
            amount = args.get("amount")
            if amount is None:
                raise BadRequest(message="amount or orderId is required")
            currency = resolve_request_currency(fallback=args.get("currency"))

        intent = payment_gateway.create_payment_intent(amount, currency)
        if order is not None:
            OrderService.attach_payment_intent(order, intent["payment_intent_id"])
            intent["order_id"] = str(order.id)

        return Response(data=intent, message="Payment intent created").to_dict()


@ns.route("/confirm")
class APIConfirmPayment(Resource):

    @jwt_required()
    @parameters(
        type="object",
        properties={
            "paymentId": {"type": "string", "name": "Payment ID"},
            "orderId": {"type": "string"},
        },
        required=["paymentId"],
    )
    def post(self, args):
        current_user = AuthService.get_current_identity()

        order = None
        if args.get("orderId"):
            order = OrderService.find_order_or_fail(args["orderId"])
            AuthService.ensure_owner_or_admin(current_user, order.customer_id)
            if order.payment_intent_id and order.payment_intent_id != args["paymentId"]:
                raise BadRequest(message="Payment does not belong to this order")

        result = payment_gateway.confirm_payment(args["paymentId"])

        if order is not None:
            if not order.payment_intent_id:
                order.payment_intent_id = args["paymentId"]
            OrderService.update_payment_status(order, PaymentStatus.PAID.value)
            result["order"] = OrderService.to_json(order)

        return Response(data=result, message=result["message"]).to_dict()


@ns.route("/webhook")
class APIPaymentWebhook(Resource):

    def post(self):
        event = payment_gateway.verify_webhook_signature(
            request.get_data(), request.headers.get("stripe-signature")
        )
        update = payment_gateway.translate_event(event)
        if update is None:
            logger.info(f"Unhandled webhook event type: {event.get('type')}")
            return Response(data={"received": True}, message="Ignored").to_dict()

        order = OrderService.update_payment_status_by_intent_id(
            update["payment_intent_id"],
            update["payment_status"],
            update["status"],
        )
        return Response(
            data={"received": True, "order_id": str(order.id)},
            message="Webhook processed",
        ).to_dict()
