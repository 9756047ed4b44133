from mongoengine import FloatField, IntField, ListField, StringField

from storefront.models.base_mongo import BaseDocument


class Product(BaseDocument):
    meta = {
        "collection": "products",
        "indexes": [
            {"fields": ["status"], "name": "idx_product_status_001"},
            {"fields": ["seller_id"], "name": "idx_product_seller_001"},
        ],
    }

    name = StringField(required=True, max_length=500)
    description = StringField(default="")
    price = FloatField(required=True, min_value=0)
    compare_at_price = FloatField(min_value=0)
    images = ListField(StringField(max_length=1000), default=list)
    inventory = IntField(default=0, min_value=0)
    status = StringField(
        default="pending", choices=("pending", "approved", "rejected")
    )
    seller_id = StringField(max_length=50)

    @property
    def main_image(self):
        return self.images[0] if self.images else ""
