import datetime

from mongoengine import Q
from mongoengine.errors import NotUniqueError

import const
from storefront.enums.order import CouponType
from storefront.errors.exceptions import BadRequest, NotFound
from storefront.lib.query_mongo import select_with_pagination_mongo
from storefront.lib.string import parse_datetime
from storefront.models.coupon import Coupon

COUPON_FIELDS = (
    "code",
    "type",
    "value",
    "min_purchase",
    "max_discount",
    "usage_limit",
    "valid_from",
    "valid_until",
    "status",
)


class CouponService:

    @staticmethod
    def normalize_code(code):
        return str(code or "").strip().upper()

    @staticmethod
    def find_coupon(id):
        return Coupon.find_by_id(id)

    @staticmethod
    def find_coupon_by_code(code):
        code = CouponService.normalize_code(code)
        if not code:
            return None
        return Coupon.objects(code=code).first()

    @staticmethod
    def find_active_coupon_by_code(code):
        code = CouponService.normalize_code(code)
        if not code:
            return None
        return Coupon.objects(code=code, status=const.COUPON_ACTIVE).first()

    @staticmethod
    def check_validity(coupon, now=None):
        now = now or datetime.datetime.utcnow()
        if coupon.valid_from and now < coupon.valid_from:
            raise BadRequest(message="Coupon is not yet valid")
        if coupon.valid_until and now > coupon.valid_until:
            raise BadRequest(message="Coupon has expired")
        if coupon.is_exhausted:
            raise BadRequest(message="Coupon usage limit reached")

    @staticmethod
    def find_valid_by_code(code):
        coupon = CouponService.find_active_coupon_by_code(code)
        if not coupon:
            raise NotFound(message="Coupon not found")
        CouponService.check_validity(coupon)
        return coupon

    @staticmethod
    def calculate_discount(coupon, subtotal):
        """Percentage is capped by max_discount; a fixed amount is never capped."""
        if coupon.type == CouponType.PERCENTAGE.value:
            discount = subtotal * coupon.value / 100
            if coupon.max_discount:
                discount = min(discount, coupon.max_discount)
            return discount
        return coupon.value

    @staticmethod
    def redeem(code):
        """Count one use of a coupon at checkout.

        The limit check and the increment are a single update, so two orders
        can never both take the last use.
        """
        coupon = CouponService.find_active_coupon_by_code(code)
        if not coupon:
            raise BadRequest(message="Invalid coupon code")
        CouponService.check_validity(coupon)

        query = Coupon.objects(id=coupon.id)
        if coupon.usage_limit:
            query = query.filter(used_count__lt=coupon.usage_limit)
        if not query.update_one(inc__used_count=1):
            raise BadRequest(message="Coupon usage limit reached")
        return coupon

    @staticmethod
    def release(code):
        code = CouponService.normalize_code(code)
        if not code:
            return 0
        return Coupon.objects(code=code, used_count__gt=0).update_one(dec__used_count=1)

    @staticmethod
    def _clean_payload(data, coupon=None):
        payload = {key: data[key] for key in COUPON_FIELDS if key in data}

        if "code" in payload:
            payload["code"] = CouponService.normalize_code(payload["code"])
            if not payload["code"]:
                raise BadRequest(message="Coupon code is required")
            existing = CouponService.find_coupon_by_code(payload["code"])
            if existing and (coupon is None or existing.id != coupon.id):
                raise BadRequest(message="Coupon code already exists")

        if "type" in payload and payload["type"] not in [
            coupon_type.value for coupon_type in CouponType
        ]:
            raise BadRequest(message="Invalid coupon type")

        for key in ("valid_from", "valid_until"):
            if key in payload:
                payload[key] = parse_datetime(payload[key])

        coupon_type = payload.get("type", coupon.type if coupon else None)
        value = payload.get("value", coupon.value if coupon else None)
        if value is not None and value < 0:
            raise BadRequest(message="Coupon value must not be negative")
        if coupon_type == CouponType.PERCENTAGE.value and value is not None and value > 100:
            raise BadRequest(message="Percentage discount cannot exceed 100")

        valid_from = payload.get("valid_from", coupon.valid_from if coupon else None)
        valid_until = payload.get("valid_until", coupon.valid_until if coupon else None)
        if valid_from and valid_until and valid_from >= valid_until:
            raise BadRequest(message="valid_from must be before valid_until")

        return payload

    @staticmethod
    def create_coupon(data):
        payload = CouponService._clean_payload(data)
        for key in ("code", "type", "value", "valid_from", "valid_until"):
            if payload.get(key) is None:
                raise BadRequest(message=f"{key} is required")
        coupon = Coupon(**payload)
        try:
            coupon.save()
        except NotUniqueError:
            raise BadRequest(message="Coupon code already exists")
        return coupon

    @staticmethod
    def update_coupon(id, data):
        coupon = Coupon.find_by_id(id)
        if not coupon:
            raise NotFound(message="Coupon not found")
        payload = CouponService._clean_payload(data, coupon)
        for key, value in payload.items():
            setattr(coupon, key, value)
        coupon.save()
        return coupon

    @staticmethod
    def delete_coupon(id):
        coupon = Coupon.find_by_id(id)
        if not coupon:
            raise NotFound(message="Coupon not found")
        coupon.delete()
        return True

    @staticmethod
    def get_coupons(query_params):
        filters = []
        if query_params.get("status"):
            filters.append(Q(status=query_params["status"]))
        if query_params.get("search"):
            filters.append(Q(code__icontains=query_params["search"]))
        return select_with_pagination_mongo(
            Coupon,
            page=query_params["page"],
            per_page=query_params["per_page"],
            filters=filters,
            order_by=["-created_at"],
        )
