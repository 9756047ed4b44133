"""Tests for the mongo pagination helper."""

import pytest
from mongoengine import Q

import const
from storefront.lib.query_mongo import clamp_paging, select_with_pagination_mongo
from storefront.models.product import Product


@pytest.fixture
def products(seller):
    for index in range(5):
        Product(
            name=f"Product {index}",
            price=10.0 + index,
            inventory=1,
            status=const.PRODUCT_APPROVED,
            seller_id=str(seller.id),
        ).save()


class TestClampPaging:
    @pytest.mark.parametrize(
        "page, per_page, expected",
        [
            (0, 10, (1, 10)),
            (-3, 10, (1, 10)),
            (None, None, (const.DEFAULT_PAGE, const.DEFAULT_PER_PAGE)),
            (2, 5000, (2, const.MAX_PER_PAGE)),
            (1, -1, (1, 1)),
        ],
    )
    def test_bounds(self, page, per_page, expected):
        assert clamp_paging(page, per_page) == expected


class TestSelectWithPagination:
    def test_pages(self, products):
        result = select_with_pagination_mongo(
            Product, page=2, per_page=2, order_by=["price"]
        )
        assert result["total"] == 5
        assert result["pages"] == 3
        assert [product.name for product in result["items"]] == ["Product 2", "Product 3"]

    def test_echoes_the_page_it_served(self, products):
        result = select_with_pagination_mongo(Product, page=0, per_page=2, order_by=["price"])
        assert result["page"] == 1
        assert [product.name for product in result["items"]] == ["Product 0", "Product 1"]

    def test_filters(self, products):
        result = select_with_pagination_mongo(
            Product, page=1, per_page=10, filters=[Q(price__gte=13)]
        )
        assert result["total"] == 2
