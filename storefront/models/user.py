from mongoengine import StringField

import const
from storefront.models.base_mongo import BaseDocument


class User(BaseDocument):
    meta = {
        "collection": "users",
        "indexes": [
            {"fields": ["email"], "name": "idx_user_email_001", "unique": True},
        ],
    }

    email = StringField(required=True, max_length=255)
    name = StringField(max_length=255, default="")
    phone = StringField(max_length=50, default="")
    role = StringField(
        default=const.ROLE_CUSTOMER,
        choices=(const.ROLE_CUSTOMER, const.ROLE_SELLER, const.ROLE_ADMIN),
    )

    @property
    def is_admin(self):
        return self.role == const.ROLE_ADMIN

    @property
    def is_seller(self):
        return self.role == const.ROLE_SELLER
