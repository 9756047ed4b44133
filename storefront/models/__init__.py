from storefront.models.address import Address
from storefront.models.cart import Cart
from storefront.models.coupon import Coupon
from storefront.models.order import Order
from storefront.models.product import Product
from storefront.models.user import User

DOCUMENTS = (User, Product, Address, Cart, Coupon, Order)
