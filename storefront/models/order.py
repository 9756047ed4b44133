from mongoengine import (
    DateTimeField,
    DictField,
    EmbeddedDocument,
    EmbeddedDocumentListField,
    FloatField,
    IntField,
    StringField,
)

import const
from storefront.enums.order import OrderStatus, PaymentStatus
from storefront.models.base_mongo import BaseDocument


class OrderItem(EmbeddedDocument):
    product_id = StringField(required=True, max_length=50)
    name = StringField(required=True)
    quantity = IntField(required=True, min_value=1)
    price = FloatField(required=True)
    image = StringField(default="")
    variants = DictField(default=dict)


class Order(BaseDocument):
    meta = {
        "collection": "orders",
        "indexes": [
            {
                "fields": ["order_number"],
                "name": "idx_order_number_001",
                "unique": True,
            },
            {"fields": ["customer_id", "-created_at"], "name": "idx_order_customer_001"},
            {"fields": ["status"], "name": "idx_order_status_001"},
            {"fields": ["payment_intent_id"], "name": "idx_order_intent_001"},
        ],
    }

    order_number = StringField(required=True, max_length=50)
    customer_id = StringField(required=True, max_length=50)
    items = EmbeddedDocumentListField(OrderItem, default=list)
    shipping_address_id = StringField(required=True, max_length=50)
    billing_address_id = StringField(max_length=50)
    payment_method = StringField(
        required=True, choices=tuple(const.SUPPORTED_PAYMENT_METHODS)
    )
    payment_status = StringField(
        default=PaymentStatus.PENDING.value,
        choices=[status.value for status in PaymentStatus],
    )
    payment_intent_id = StringField(max_length=255)
    currency = StringField(
        required=True,
        default=const.FALLBACK_CURRENCY,
        choices=tuple(const.SUPPORTED_CURRENCIES),
    )
    exchange_rate = FloatField(default=1.0)
    subtotal = FloatField(required=True)
    tax = FloatField(default=0)
    shipping = FloatField(default=0)
    discount = FloatField(default=0)
    total = FloatField(required=True)
    status = StringField(
        default=OrderStatus.PENDING.value,
        choices=[status.value for status in OrderStatus],
    )
    tracking_number = StringField(max_length=255)
    carrier = StringField(max_length=255)
    estimated_delivery = DateTimeField()
    coupon_code = StringField(max_length=50)
    notes = StringField()

    @property
    def total_in_currency(self):
        return self.total * (self.exchange_rate or 1.0)
