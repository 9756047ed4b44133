from bson import ObjectId
from mongoengine import (
    DictField,
    EmbeddedDocument,
    EmbeddedDocumentListField,
    FloatField,
    IntField,
    ObjectIdField,
    StringField,
)

from storefront.models.base_mongo import BaseDocument, serialize_value


class CartItem(EmbeddedDocument):
    item_id = ObjectIdField(default=ObjectId)
    product_id = StringField(required=True, max_length=50)
    quantity = IntField(required=True, min_value=1, default=1)
    variants = DictField(default=dict)

    def same_line(self, product_id, variants):
        return self.product_id == str(product_id) and dict(self.variants or {}) == dict(
            variants or {}
        )

    def to_json(self):
        return serialize_value(self.to_mongo().to_dict())


class Cart(BaseDocument):
    meta = {
        "collection": "carts",
        "indexes": [
            {"fields": ["user_id"], "name": "idx_cart_user_001", "unique": True},
        ],
    }

    user_id = StringField(required=True, max_length=50)
    items = EmbeddedDocumentListField(CartItem, default=list)
    coupon_code = StringField(max_length=50)
    coupon_discount = FloatField(default=0)

    def find_item(self, item_id):
        for item in self.items:
            if str(item.item_id) == str(item_id):
                return item
        return None
