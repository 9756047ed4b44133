import const
from storefront.errors.exceptions import BadRequest, NotFound
from storefront.extensions import exchange_rates
from storefront.models.cart import Cart, CartItem
from storefront.services.coupon import CouponService
from storefront.services.product import ProductService


def calculate_totals(subtotal, discount=0):
    """Price breakdown in base currency: 10% tax, flat shipping on a non-empty cart."""
    tax = subtotal * const.TAX_RATE
    shipping = const.FLAT_SHIPPING_FEE if subtotal > 0 else 0
    total = subtotal + tax + shipping - discount
    return {
        "subtotal": subtotal,
        "tax": tax,
        "shipping": shipping,
        "discount": discount,
        "total": total,
    }


def cart_subtotal(items, products):
    subtotal = 0
    for item in items:
        product = products.get(item.product_id)
        if not product:
            continue
        subtotal += product.price * item.quantity
    return subtotal


class CartService:

    @staticmethod
    def find_cart(user_id):
        return Cart.objects(user_id=str(user_id)).first()

    @staticmethod
    def get_or_create_cart(user_id):
        cart = CartService.find_cart(user_id)
        if not cart:
            cart = Cart(user_id=str(user_id), items=[])
            cart.save()
        return cart

    @staticmethod
    def find_cart_or_fail(user_id):
        cart = CartService.find_cart(user_id)
        if not cart:
            raise NotFound(message="Cart not found")
        return cart

    @staticmethod
    def get_cart_products(cart):
        return ProductService.find_products_by_ids(
            list({item.product_id for item in cart.items})
        )

    @staticmethod
    def build_cart_summary(cart, currency=None):
        """Serialize the cart with totals recomputed from current product prices.

        Every money field is converted from base currency to ``currency``.
        """
        currency = (currency or exchange_rates.get_base_currency()).upper()
        products = CartService.get_cart_products(cart)

        totals = calculate_totals(
            cart_subtotal(cart.items, products), cart.coupon_discount or 0
        )

        items = []
        for item in cart.items:
            product = products.get(item.product_id)
            items.append(
                {
                    "id": str(item.item_id),
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "variants": dict(item.variants or {}),
                    "product": ProductService.to_json(product, currency)
                    if product
                    else None,
                }
            )

        summary = {
            "id": str(cart.id),
            "user_id": cart.user_id,
            "items": items,
            "currency": currency,
        }
        for key, value in totals.items():
            summary[key] = exchange_rates.convert_to_currency(value, currency)

        if cart.coupon_code and cart.coupon_discount:
            summary["coupon"] = {
                "code": cart.coupon_code,
                "discount": summary["discount"],
            }
        return summary

    @staticmethod
    def get_cart(user_id, currency=None):
        cart = CartService.get_or_create_cart(user_id)
        return CartService.build_cart_summary(cart, currency)

    @staticmethod
    def add_item(user_id, product_id, quantity=1, variants=None, currency=None):
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise BadRequest(message="Quantity must be a positive integer")

        product = ProductService.find_product(product_id)
        if not ProductService.is_available(product):
            raise BadRequest(message="Product not available")
        if product.inventory < quantity:
            raise BadRequest(message="Insufficient inventory")

        variants = dict(variants or {})
        cart = CartService.get_or_create_cart(user_id)
        existing = next(
            (item for item in cart.items if item.same_line(product.id, variants)),
            None,
        )
        if existing:
            existing.quantity += quantity
        else:
            cart.items.append(
                CartItem(product_id=str(product.id), quantity=quantity, variants=variants)
            )
        cart.save()
        return CartService.build_cart_summary(cart, currency)

    @staticmethod
    def update_item(user_id, item_id, quantity, currency=None):
        """Overwrite the quantity; zero or less drops the line.

        Inventory is not re-checked here.
        """
        cart = CartService.find_cart_or_fail(user_id)
        item = cart.find_item(item_id)
        if not item:
            raise NotFound(message="Item not found in cart")

        if quantity <= 0:
            cart.items = [line for line in cart.items if line.item_id != item.item_id]
        else:
            item.quantity = quantity
        cart.save()
        return CartService.build_cart_summary(cart, currency)

    @staticmethod
    def remove_item(user_id, item_id, currency=None):
        cart = CartService.find_cart_or_fail(user_id)
        cart.items = [line for line in cart.items if str(line.item_id) != str(item_id)]
        cart.save()
        return CartService.build_cart_summary(cart, currency)

    @staticmethod
    def clear_cart(user_id):
        cart = CartService.find_cart_or_fail(user_id)
        cart.items = []
        cart.coupon_code = None
        cart.coupon_discount = 0
        cart.save()
        return cart

    @staticmethod
    def apply_coupon(user_id, code, currency=None):
        if not code or not str(code).strip():
            raise BadRequest(message="Coupon code is required")

        coupon = CouponService.find_active_coupon_by_code(code)
        if not coupon:
            raise BadRequest(message="Invalid coupon code")
        CouponService.check_validity(coupon)

        cart = CartService.find_cart(user_id)
        if not cart or not cart.items:
            raise BadRequest(message="Cart is empty")

        subtotal = cart_subtotal(cart.items, CartService.get_cart_products(cart))
        if coupon.min_purchase and subtotal < coupon.min_purchase:
            raise BadRequest(
                message=f"Minimum purchase of {coupon.min_purchase:g} required"
            )

        discount = CouponService.calculate_discount(coupon, subtotal)
        cart.coupon_code = coupon.code
        cart.coupon_discount = discount
        cart.save()

        summary = CartService.build_cart_summary(cart, currency)
        summary["coupon"] = {
            "code": coupon.code,
            "discount": summary["discount"],
            "type": coupon.type,
        }
        return summary

    @staticmethod
    def remove_coupon(user_id, currency=None):
        cart = CartService.find_cart_or_fail(user_id)
        cart.coupon_code = None
        cart.coupon_discount = 0
        cart.save()
        return CartService.build_cart_summary(cart, currency)
