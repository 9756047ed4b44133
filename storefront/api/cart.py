# coding: utf8
from flask_jwt_extended import jwt_required
from flask_restx import Namespace, Resource

from storefront.decorators import parameters
from storefront.lib.currency import resolve_request_currency
from storefront.lib.response import Response
from storefront.services.auth import AuthService
from storefront.services.cart import CartService

ns = Namespace(name="cart", description="Cart API")


@ns.route("")
class APICart(Resource):

    @jwt_required()
    def get(self):
        current_user = AuthService.get_current_identity()
        cart = CartService.get_cart(current_user.id, resolve_request_currency())
        return Response(data={"cart": cart}, message="Success").to_dict()

    @jwt_required()
    @parameters(
        type="object",
        properties={
            "productId": {"type": "string"},
            "quantity": {"type": "integer"},
            "variants": {"type": ["object", "null"]},
            "variant": {"type": ["string", "null"]},
        },
        required=["productId"],
    )
    def post(self, args):
        current_user = AuthService.get_current_identity()
        variants = args.get("variants") or {}
        if not variants and args.get("variant"):
            variants = {"variant": args["variant"]}

        cart = CartService.add_item(
            current_user.id,
            args["productId"],
            args.get("quantity", 1),
            variants,
            currency=resolve_request_currency(),
        )
        return Response(data={"cart": cart}, message="Item added to cart").to_dict()

    @jwt_required()
    def delete(self):
        current_user = AuthService.get_current_identity()
        CartService.clear_cart(current_user.id)
        return Response(message="Cart cleared").to_dict()


@ns.route("/coupon")
class APICartCoupon(Resource):

    @jwt_required()
    @parameters(
        type="object",
        properties={
            "code": {"type": "string", "name": "Coupon code"},
        },
        required=["code"],
    )
    def post(self, args):
        current_user = AuthService.get_current_identity()
        cart = CartService.apply_coupon(
            current_user.id, args["code"], currency=resolve_request_currency()
        )
        return Response(
            data={"cart": cart, "coupon": cart["coupon"]},
            message="Coupon applied successfully",
        ).to_dict()

    @jwt_required()
    def delete(self):
        current_user = AuthService.get_current_identity()
        cart = CartService.remove_coupon(
            current_user.id, currency=resolve_request_currency()
        )
        return Response(data={"cart": cart}, message="Coupon removed").to_dict()


@ns.route("/<string:item_id>")
class APICartItem(Resource):

    @jwt_required()
    @parameters(
        type="object",
        properties={
            "quantity": {"type": "integer"},
        },
        required=["quantity"],
    )
    def put(self, args, item_id):
        current_user = AuthService.get_current_identity()
        cart = CartService.update_item(
            current_user.id,
            item_id,
            args["quantity"],
            currency=resolve_request_currency(),
        )
        return Response(data={"cart": cart}, message="Cart updated").to_dict()

    @jwt_required()
    def delete(self, item_id):
        current_user = AuthService.get_current_identity()
        cart = CartService.remove_item(
            current_user.id, item_id, currency=resolve_request_currency()
        )
        return Response(data={"cart": cart}, message="Item removed").to_dict()
