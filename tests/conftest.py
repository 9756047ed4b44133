"""Pytest fixtures for storefront tests."""

import datetime

import pytest
from flask_jwt_extended import create_access_token

import const
from storefront import create_app
from storefront.config import TestingConfig
from storefront.models import DOCUMENTS
from storefront.models.coupon import Coupon
from storefront.models.product import Product
from storefront.models.user import User


@pytest.fixture
def app():
    """App bound to an in-memory mongomock database, emptied after each test."""
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        for document in DOCUMENTS:
            document.drop_collection()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def customer(app):
    user = User(email="buyer@example.com", name="Jane Buyer", role=const.ROLE_CUSTOMER)
    user.save()
    return user


@pytest.fixture
def other_customer(app):
    user = User(email="other@example.com", name="Other Buyer", role=const.ROLE_CUSTOMER)
    user.save()
    return user


@pytest.fixture
def admin(app):
    user = User(email="admin@example.com", name="Admin", role=const.ROLE_ADMIN)
    user.save()
    return user


@pytest.fixture
def seller(app):
    user = User(email="seller@example.com", name="Seller", role=const.ROLE_SELLER)
    user.save()
    return user


@pytest.fixture
def auth_headers(app):
    """Build bearer headers for a user, as the external auth service would issue them."""

    def _headers(user, **extra):
        token = create_access_token(identity=str(user.id))
        headers = {"Authorization": f"Bearer {token}"}
        headers.update(extra)
        return headers

    return _headers


@pytest.fixture
def mouse(seller):
    product = Product(
        name="Wireless Mouse",
        description="Two-button mouse",
        price=24.99,
        images=["https://cdn.example.com/mouse.png"],
        inventory=10,
        status=const.PRODUCT_APPROVED,
        seller_id=str(seller.id),
    )
    product.save()
    return product


@pytest.fixture
def keyboard(seller):
    product = Product(
        name="Mechanical Keyboard",
        price=50.0,
        images=["https://cdn.example.com/keyboard.png"],
        inventory=5,
        status=const.PRODUCT_APPROVED,
        seller_id=str(seller.id),
    )
    product.save()
    return product


@pytest.fixture
def pending_product(seller):
    product = Product(
        name="Unreviewed Lamp",
        price=15.0,
        inventory=3,
        status="pending",
        seller_id=str(seller.id),
    )
    product.save()
    return product


@pytest.fixture
def welcome_coupon(app):
    now = datetime.datetime.utcnow()
    coupon = Coupon(
        code="welcome10",
        type="percentage",
        value=10,
        max_discount=20,
        min_purchase=50,
        usage_limit=100,
        valid_from=now - datetime.timedelta(days=1),
        valid_until=now + datetime.timedelta(days=30),
    )
    coupon.save()
    return coupon


@pytest.fixture
def shipping_address():
    return {
        "fullName": "Jane Q Buyer",
        "address": "221B Baker Street",
        "city": "London",
        "state": "Greater London",
        "postalCode": "NW1 6XE",
        "country": "United Kingdom",
        "phone": "+44 20 7946 0000",
    }
