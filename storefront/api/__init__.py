# coding: utf8
from flask import Blueprint
from flask_restx import Api

from storefront.api.address import ns as address_ns
from storefront.api.cart import ns as cart_ns
from storefront.api.coupon import ns as coupon_ns
from storefront.api.currency import ns as currency_ns
from storefront.api.order import ns as order_ns
from storefront.api.payment import ns as payment_ns
from storefront.api.product import ns as product_ns
from storefront.errors.exceptions import ApiException
from storefront.errors.handler import api_error_handler

bp = Blueprint("api", __name__, url_prefix="/api")

api = Api(
    bp,
    version="1.0",
    title="Storefront API",
    description="Storefront checkout API",
    doc="/docs/",
)


@api.errorhandler(ApiException)
def handle_api_exception(error):
    return api_error_handler(error)


api.add_namespace(ns=cart_ns, path="/cart")
api.add_namespace(ns=order_ns, path="/orders")
api.add_namespace(ns=payment_ns, path="/payments")
api.add_namespace(ns=coupon_ns, path="/coupons")
api.add_namespace(ns=product_ns, path="/products")
api.add_namespace(ns=currency_ns, path="/currencies")
api.add_namespace(ns=address_ns, path="/addresses")
