# coding: utf8
from flask import request
from flask_restx import Namespace, Resource

import const
from storefront.errors.exceptions import NotFound
from storefront.lib.currency import resolve_request_currency
from storefront.lib.response import Response
from storefront.services.auth import AuthService
from storefront.services.product import ProductService

ns = Namespace(name="products", description="Product API")


@ns.route("")
class APIProducts(Resource):

    def get(self):
        current_user = AuthService.get_optional_identity()
        currency = resolve_request_currency()
        page = request.args.get("page", const.DEFAULT_PAGE, type=int)
        per_page = request.args.get(
            "per_page", const.DEFAULT_PRODUCT_PER_PAGE, type=int
        )
        data_search = {
            "page": page,
            "per_page": per_page,
            "status": request.args.get("status", "", type=str),
            "search_key": request.args.get("search", "", type=str),
        }
        products = ProductService.get_products(data_search, current_user)
        return Response(
            data={
                "total": products["total"],
                "page": products["page"],
                "per_page": products["per_page"],
                "total_pages": products["pages"],
                "currency": currency,
                "products": [
                    ProductService.to_json(product, currency)
                    for product in products["items"]
                ],
            },
            message="Success",
        ).to_dict()


@ns.route("/<string:product_id>")
class APIProductDetail(Resource):

    def get(self, product_id):
        current_user = AuthService.get_optional_identity()
        product = ProductService.find_product(product_id)
        if not product or not ProductService.is_visible_to(product, current_user):
            raise NotFound(message="Product not found")
        return Response(
            data={"product": ProductService.to_json(product, resolve_request_currency())},
            message="Success",
        ).to_dict()
