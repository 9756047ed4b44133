# coding: utf8
from flask import request
from flask_jwt_extended import jwt_required
from flask_restx import Namespace, Resource

import const
from storefront.decorators import parameters, required_admin
from storefront.enums.order import OrderStatus
from storefront.errors.exceptions import BadRequest
from storefront.lib.currency import resolve_request_currency
from storefront.lib.response import Response
from storefront.services.auth import AuthService
from storefront.services.order import OrderService

ns = Namespace(name="orders", description="Order API")


@ns.route("")
class APIOrders(Resource):

    @jwt_required()
    def get(self):
        current_user = AuthService.get_current_identity()
        page = request.args.get("page", const.DEFAULT_PAGE, type=int)
        per_page = request.args.get(
            "limit",
            request.args.get("per_page", const.DEFAULT_PER_PAGE, type=int),
            type=int,
        )
        status = request.args.get("status", "", type=str)

        result = OrderService.list_orders(current_user, page, per_page, status)
        return Response(
            data={
                "orders": [OrderService.to_json(order) for order in result["items"]],
                "pagination": {
                    "page": result["page"],
                    "limit": result["per_page"],
                    "total": result["total"],
                    "pages": result["pages"],
                },
            },
            message="Success",
        ).to_dict()

    @jwt_required()
    def post(self):
        # raw body: exchangeRate must be seen to be rejected
        order_data = request.get_json(silent=True)
        if not isinstance(order_data, dict):
            raise BadRequest(message="Request body must be a JSON object")

        current_user = AuthService.get_current_identity()
        currency = resolve_request_currency(fallback=order_data.get("currency"))
        order = OrderService.create_order(current_user, order_data, currency)
        return Response(
            data={"order": OrderService.to_json(order)},
            message="Order created",
            code=201,
            status=201,
        ).to_dict()


@ns.route("/<string:order_id>")
class APIOrderDetail(Resource):

    @jwt_required()
    def get(self, order_id):
        current_user = AuthService.get_current_identity()
        order = OrderService.get_order(order_id, current_user)
        return Response(data={"order": order}, message="Success").to_dict()


@ns.route("/<string:order_id>/cancel")
class APICancelOrder(Resource):

    @jwt_required()
    def put(self, order_id):
        current_user = AuthService.get_current_identity()
        order = OrderService.cancel_order(order_id, current_user)
        return Response(
            data={"order": OrderService.to_json(order)}, message="Order cancelled"
        ).to_dict()


@ns.route("/<string:order_id>/track")
class APITrackOrder(Resource):

    @jwt_required()
    def get(self, order_id):
        current_user = AuthService.get_current_identity()
        tracking = OrderService.track_order(order_id, current_user)
        return Response(data=tracking, message="Success").to_dict()


@ns.route("/<string:order_id>/invoice")
class APIOrderInvoice(Resource):

    @jwt_required()
    def get(self, order_id):
        current_user = AuthService.get_current_identity()
        invoice = OrderService.generate_invoice(order_id, current_user)
        return Response(data=invoice, message="Success").to_dict()


@ns.route("/<string:order_id>/shipping-label")
class APIOrderShippingLabel(Resource):

    @jwt_required()
    def get(self, order_id):
        current_user = AuthService.get_current_identity()
        label = OrderService.generate_shipping_label(order_id, current_user)
        return Response(
            data=label, message="Shipping label generated successfully"
        ).to_dict()


@ns.route("/<string:order_id>/status")
class APIOrderStatus(Resource):

    @jwt_required()
    @required_admin
    @parameters(
        type="object",
        properties={
            "status": {
                "type": "string",
                "enum": [status.value for status in OrderStatus],
            },
            "trackingNumber": {"type": ["string", "null"]},
            "carrier": {"type": ["string", "null"]},
            "estimatedDelivery": {"type": ["string", "null"]},
        },
        required=["status"],
    )
    def put(self, args, order_id):
        order = OrderService.update_status(
            order_id,
            args["status"],
            tracking_number=args.get("trackingNumber"),
            carrier=args.get("carrier"),
            estimated_delivery=args.get("estimatedDelivery"),
        )
        return Response(
            data={"order": OrderService.to_json(order)}, message="Order status updated"
        ).to_dict()


@ns.route("/<string:order_id>/return")
class APIOrderReturn(Resource):

    @jwt_required()
    @parameters(
        type="object",
        properties={
            "reason": {"type": ["string", "null"]},
        },
    )
    def post(self, args, order_id):
        current_user = AuthService.get_current_identity()
        order = OrderService.request_return(order_id, current_user, args.get("reason"))
        return Response(
            data={"order": OrderService.to_json(order)},
            message="Return request submitted successfully",
        ).to_dict()


@ns.route("/<string:order_id>/refund")
class APIOrderRefund(Resource):

    @jwt_required()
    @required_admin
    @parameters(
        type="object",
        properties={
            "amount": {"type": ["number", "null"], "minimum": 0},
            "reason": {"type": ["string", "null"]},
        },
    )
    def post(self, args, order_id):
        order, refund = OrderService.refund_order(
            order_id, amount=args.get("amount"), reason=args.get("reason")
        )
        return Response(
            data={"order": OrderService.to_json(order), "refund": refund},
            message="Order refunded",
        ).to_dict()
