from mongoengine import BooleanField, StringField

import const
from storefront.models.base_mongo import BaseDocument


class Address(BaseDocument):
    meta = {
        "collection": "addresses",
        "indexes": [
            {"fields": ["user_id"], "name": "idx_address_user_001"},
        ],
    }

    user_id = StringField(required=True, max_length=50)
    type = StringField(required=True, choices=("shipping", "billing", "both"))
    first_name = StringField(required=True, max_length=255)
    last_name = StringField(required=True, max_length=255)
    address_line1 = StringField(default="")
    address_line2 = StringField(default="")
    city = StringField(default="")
    state = StringField(default="")
    zip_code = StringField(default="")
    country = StringField(default=const.DEFAULT_COUNTRY)
    phone = StringField(default=const.DEFAULT_PHONE)
    is_default = BooleanField(default=False)
