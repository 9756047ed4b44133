from bson import ObjectId
from mongoengine import Q

import const
from storefront.extensions import exchange_rates
from storefront.lib.query_mongo import select_with_pagination_mongo
from storefront.models.product import Product


class ProductService:

    @staticmethod
    def find_product(id):
        return Product.find_by_id(id)

    @staticmethod
    def find_products_by_ids(ids):
        valid_ids = [id for id in ids if ObjectId.is_valid(id)]
        products = Product.objects(id__in=valid_ids) if valid_ids else []
        return {str(product.id): product for product in products}

    @staticmethod
    def is_available(product):
        return product is not None and product.status == const.PRODUCT_APPROVED

    @staticmethod
    def is_visible_to(product, user=None):
        if product.status == const.PRODUCT_APPROVED:
            return True
        if user is None:
            return False
        return user.is_admin or (user.is_seller and product.seller_id == str(user.id))

    @staticmethod
    def get_product_ids_by_seller(seller_id):
        return {str(product.id) for product in Product.objects(seller_id=str(seller_id)).only("id")}

    @staticmethod
    def get_products(data_search, user=None):
        filters = []
        if user is not None and user.is_admin:
            if data_search.get("status"):
                filters.append(Q(status=data_search["status"]))
        elif user is not None and user.is_seller:
            filters.append(Q(seller_id=str(user.id)))
            if data_search.get("status"):
                filters.append(Q(status=data_search["status"]))
        else:
            filters.append(Q(status=const.PRODUCT_APPROVED))

        search_key = data_search.get("search_key", "")
        if search_key:
            filters.append(Q(name__icontains=search_key) | Q(description__icontains=search_key))

        return select_with_pagination_mongo(
            Product,
            page=data_search["page"],
            per_page=data_search["per_page"],
            filters=filters,
            order_by=["-created_at"],
        )

    @staticmethod
    def to_json(product, currency):
        data = product.to_json()
        data["price"] = exchange_rates.convert_to_currency(product.price, currency)
        if product.compare_at_price:
            data["compare_at_price"] = exchange_rates.convert_to_currency(
                product.compare_at_price, currency
            )
        data["base_price"] = product.price
        data["base_currency"] = exchange_rates.get_base_currency()
        data["currency"] = currency
        return data
