# coding: utf8
from flask import request
from flask_jwt_extended import jwt_required
from flask_restx import Namespace, Resource

import const
from storefront.decorators import parameters, required_admin
from storefront.enums.order import CouponType
from storefront.errors.exceptions import NotFound
from storefront.lib.response import Response
from storefront.services.coupon import CouponService

ns = Namespace(name="coupons", description="Coupon API")

COUPON_PROPERTIES = {
    "code": {"type": "string", "name": "Coupon code"},
    "type": {"type": "string", "enum": [coupon_type.value for coupon_type in CouponType]},
    "value": {"type": "number", "minimum": 0},
    "minPurchase": {"type": ["number", "null"], "minimum": 0},
    "maxDiscount": {"type": ["number", "null"], "minimum": 0},
    "usageLimit": {"type": ["integer", "null"], "minimum": 1},
    "validFrom": {"type": "string"},
    "validUntil": {"type": "string"},
    "status": {"type": "string", "enum": [const.COUPON_ACTIVE, const.COUPON_INACTIVE]},
}

# request body (camelCase) -> document field
COUPON_FIELD_MAP = {
    "code": "code",
    "type": "type",
    "value": "value",
    "minPurchase": "min_purchase",
    "maxDiscount": "max_discount",
    "usageLimit": "usage_limit",
    "validFrom": "valid_from",
    "validUntil": "valid_until",
    "status": "status",
}


def to_coupon_fields(args):
    return {COUPON_FIELD_MAP[key]: value for key, value in args.items() if key in COUPON_FIELD_MAP}


@ns.route("")
class APICoupons(Resource):

    @jwt_required()
    @required_admin
    def get(self):
        page = request.args.get("page", const.DEFAULT_PAGE, type=int)
        per_page = request.args.get("per_page", const.DEFAULT_PER_PAGE, type=int)
        query_params = {
            "page": page,
            "per_page": per_page,
            "status": request.args.get("status", "", type=str),
            "search": request.args.get("search", "", type=str),
        }
        coupons = CouponService.get_coupons(query_params)
        return Response(
            data={
                "total": coupons["total"],
                "page": coupons["page"],
                "per_page": coupons["per_page"],
                "total_pages": coupons["pages"],
                "coupons": [coupon.to_json() for coupon in coupons["items"]],
            },
            message="Success",
        ).to_dict()

    @jwt_required()
    @required_admin
    @parameters(
        type="object",
        properties=COUPON_PROPERTIES,
        required=["code", "type", "value", "validFrom", "validUntil"],
    )
    def post(self, args):
        coupon = CouponService.create_coupon(to_coupon_fields(args))
        return Response(
            data={"coupon": coupon.to_json()},
            message="Coupon created",
            code=201,
            status=201,
        ).to_dict()


@ns.route("/code/<string:code>")
class APICouponByCode(Resource):

    @jwt_required()
    def get(self, code):
        coupon = CouponService.find_valid_by_code(code)
        return Response(
            data={
                "coupon": {
                    "code": coupon.code,
                    "type": coupon.type,
                    "value": coupon.value,
                    "min_purchase": coupon.min_purchase,
                    "max_discount": coupon.max_discount,
                }
            },
            message="Coupon is valid",
        ).to_dict()


@ns.route("/<string:coupon_id>")
class APICouponDetail(Resource):

    @jwt_required()
    @required_admin
    def get(self, coupon_id):
        coupon = CouponService.find_coupon(coupon_id)
        if not coupon:
            raise NotFound(message="Coupon not found")
        return Response(data={"coupon": coupon.to_json()}, message="Success").to_dict()

    @jwt_required()
    @required_admin
    @parameters(type="object", properties=COUPON_PROPERTIES)
    def put(self, args, coupon_id):
        coupon = CouponService.update_coupon(coupon_id, to_coupon_fields(args))
        return Response(data={"coupon": coupon.to_json()}, message="Coupon updated").to_dict()

    @jwt_required()
    @required_admin
    def delete(self, coupon_id):
        CouponService.delete_coupon(coupon_id)
        return Response(message="Coupon deleted").to_dict()
