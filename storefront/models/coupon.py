from mongoengine import DateTimeField, FloatField, IntField, StringField

import const
from storefront.enums.order import CouponType
from storefront.models.base_mongo import BaseDocument


class Coupon(BaseDocument):
    meta = {
        "collection": "coupons",
        "indexes": [
            {"fields": ["code"], "name": "idx_coupon_code_001", "unique": True},
            {
                "fields": ["status", "valid_from", "valid_until"],
                "name": "idx_coupon_validity_001",
            },
        ],
    }

    code = StringField(required=True, max_length=50)
    type = StringField(
        required=True, choices=[coupon_type.value for coupon_type in CouponType]
    )
    value = FloatField(required=True, min_value=0)
    min_purchase = FloatField(min_value=0)
    max_discount = FloatField(min_value=0)
    usage_limit = IntField(min_value=1)
    used_count = IntField(default=0, min_value=0)
    valid_from = DateTimeField(required=True)
    valid_until = DateTimeField(required=True)
    status = StringField(
        default=const.COUPON_ACTIVE,
        choices=(const.COUPON_ACTIVE, const.COUPON_INACTIVE),
    )

    def clean(self):
        if self.code:
            self.code = self.code.strip().upper()

    @property
    def is_exhausted(self):
        return bool(self.usage_limit) and self.used_count >= self.usage_limit
