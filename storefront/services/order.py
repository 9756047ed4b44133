from mongoengine import Q

import const
from storefront.enums.order import (
    CANCELLABLE_STATUSES,
    RETURNABLE_STATUSES,
    OrderStatus,
    PaymentStatus,
    can_transition,
    can_transition_payment,
)
from storefront.errors.exceptions import ApiException, BadRequest, Forbidden, NotFound
from storefront.extensions import exchange_rates, payment_gateway
from storefront.lib.logger import logger
from storefront.lib.query_mongo import select_with_pagination_mongo
from storefront.lib.string import generate_order_number, parse_datetime
from storefront.models.base_mongo import serialize_value
from storefront.models.order import Order, OrderItem
from storefront.models.user import User
from storefront.services.address import AddressService
from storefront.services.auth import AuthService
from storefront.services.cart import CartService, calculate_totals
from storefront.services.coupon import CouponService
from storefront.services.notification import NotificationServices
from storefront.services.product import ProductService

CLIENT_RATE_FIELDS = ("exchangeRate", "exchange_rate")


def normalize_payment_method(payment_method):
    method = str(payment_method or "").strip().lower()
    method = const.PAYMENT_METHOD_ALIASES.get(method, method)
    if method not in const.SUPPORTED_PAYMENT_METHODS:
        raise BadRequest(message=f"Invalid payment method: {payment_method}")
    return method


def validate_order_currency(currency):
    currency = str(currency or "").strip().upper()
    if not exchange_rates.is_supported(currency):
        supported = exchange_rates.get_supported_currencies()
        raise BadRequest(
            message=f"Unsupported currency: {currency}. "
            f"Supported currencies: {', '.join(supported)}"
        )
    return currency


def serialize_order_item(item):
    return {
        "product_id": item.product_id,
        "name": item.name,
        "quantity": item.quantity,
        "price": item.price,
        "image": item.image or "",
        "variants": dict(item.variants or {}),
    }


class OrderService:

    @staticmethod
    def find_order(id):
        return Order.find_by_id(id)

    @staticmethod
    def find_order_or_fail(id):
        order = OrderService.find_order(id)
        if not order:
            raise NotFound(message="Order not found")
        return order

    @staticmethod
    def to_json(order):
        data = order.to_json()
        data["items"] = [serialize_order_item(item) for item in order.items]
        data["total_in_currency"] = order.total_in_currency
        return data

    @staticmethod
    def resolve_line_items(user_id, items_payload):
        """Explicit items win; otherwise the buyer's cart must hold something.

        Returns ``(lines, cart)`` where ``cart`` is None for explicit items.
        """
        if items_payload:
            if not isinstance(items_payload, list):
                raise BadRequest(message="items must be a list")
            lines = []
            for raw in items_payload:
                if not isinstance(raw, dict):
                    raise BadRequest(message="Invalid order item")
                quantity = raw.get("quantity", 1)
                if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
                    raise BadRequest(message="Quantity must be a positive integer")
                lines.append(
                    {
                        "product_id": str(raw.get("productId") or raw.get("product_id") or ""),
                        "quantity": quantity,
                        "variants": dict(raw.get("variants") or {}),
                    }
                )
            return lines, None

        cart = CartService.find_cart(user_id)
        if not cart or not cart.items:
            raise BadRequest(message="Cart is empty")
        lines = [
            {
                "product_id": item.product_id,
                "quantity": item.quantity,
                "variants": dict(item.variants or {}),
            }
            for item in cart.items
        ]
        return lines, cart

    @staticmethod
    def build_order_items(lines):
        """Re-check each product and snapshot it; any failure rejects the whole order."""
        products = ProductService.find_products_by_ids([line["product_id"] for line in lines])
        order_items = []
        subtotal = 0
        for line in lines:
            product = products.get(line["product_id"])
            if not ProductService.is_available(product):
                name = product.name if product else "Unknown"
                raise BadRequest(message=f"Product {name} is not available")
            if product.inventory < line["quantity"]:
                raise BadRequest(message=f"Insufficient inventory for {product.name}")

            subtotal += product.price * line["quantity"]
            order_items.append(
                OrderItem(
                    product_id=str(product.id),
                    name=product.name,
                    quantity=line["quantity"],
                    price=product.price,
                    image=product.main_image,
                    variants=line["variants"],
                )
            )
        return order_items, subtotal

    @staticmethod
    def create_order(user, order_data, currency=None):
        order_data = order_data or {}
        if any(field in order_data for field in CLIENT_RATE_FIELDS):
            raise BadRequest(
                message="Exchange rate cannot be set by client. "
                "It is calculated server-side based on currency."
            )

        payment_method = normalize_payment_method(order_data.get("paymentMethod"))
        currency = validate_order_currency(
            currency or order_data.get("currency") or exchange_rates.get_base_currency()
        )
        shipping_payload = AddressService.validate_shipping_payload(
            order_data.get("shippingAddress")
        )

        user_id = str(user.id)
        lines, cart = OrderService.resolve_line_items(user_id, order_data.get("items"))
        order_items, subtotal = OrderService.build_order_items(lines)

        discount = (cart.coupon_discount or 0) if cart else 0
        coupon_code = cart.coupon_code if cart and cart.coupon_discount else None
        totals = calculate_totals(subtotal, discount)
        exchange_rate = exchange_rates.get_exchange_rate(currency)

        if coupon_code:
            CouponService.redeem(coupon_code)

        try:
            address = AddressService.create_from_shipping_payload(user_id, shipping_payload)
            order = Order(
                order_number=generate_order_number(Order.objects.count()),
                customer_id=user_id,
                items=order_items,
                shipping_address_id=str(address.id),
                payment_method=payment_method,
                currency=currency,
                exchange_rate=exchange_rate,
                coupon_code=coupon_code,
                notes=order_data.get("notes"),
                status=OrderStatus.PENDING.value,
                payment_status=PaymentStatus.PENDING.value,
                **totals,
            )
            order.save()
        except Exception:
            if coupon_code:
                CouponService.release(coupon_code)
            raise

        logger.info(f"Order {order.order_number} created for user {user_id}")

        if cart:
            CartService.clear_cart(user_id)

        NotificationServices.send_order_confirmation(order)
        return order

    @staticmethod
    def list_orders(user, page, per_page, status=None):
        filters = []
        if not user.is_admin:
            filters.append(Q(customer_id=str(user.id)))
        if status:
            filters.append(Q(status=status))
        return select_with_pagination_mongo(
            Order,
            page=page,
            per_page=per_page,
            filters=filters,
            order_by=["-created_at"],
        )

    @staticmethod
    def get_order(id, user):
        order = OrderService.find_order_or_fail(id)
        AuthService.ensure_owner_or_admin(user, order.customer_id)

        data = OrderService.to_json(order)
        address = AddressService.find_address(order.shipping_address_id)
        data["shipping_address"] = address.to_json() if address else None
        data["items"] = [
            dict(
                item,
                product={
                    "id": item["product_id"],
                    "name": item["name"],
                    "images": [item["image"]],
                    "price": item["price"],
                },
            )
            for item in data["items"]
        ]
        return data

    @staticmethod
    def cancel_order(id, user):
        order = OrderService.find_order_or_fail(id)
        AuthService.ensure_owner_or_admin(user, order.customer_id)

        if order.status not in CANCELLABLE_STATUSES:
            raise BadRequest(message="Cannot cancel this order")

        order.status = OrderStatus.CANCELLED.value
        order.save()
        NotificationServices.send_order_status_update(order)
        return order

    @staticmethod
    def request_return(id, user, reason=None):
        order = OrderService.find_order_or_fail(id)
        if str(user.id) != order.customer_id:
            raise Forbidden(message="Not authorized")

        if order.status not in RETURNABLE_STATUSES:
            raise BadRequest(message="Order is not eligible for return")

        order.status = OrderStatus.REFUNDED.value
        if reason:
            order.notes = reason
        order.save()

        NotificationServices.notify_admins(
            f"Return requested - #{order.order_number}",
            "admin_return_request.html",
            {
                "order_number": order.order_number,
                "total": order.total_in_currency,
                "currency": order.currency,
                "payment_status": order.payment_status,
                "reason": reason or "",
            },
        )
        return order

    @staticmethod
    def track_order(id, user):
        """Timeline synthesized from the current status; there is no event log."""
        order = OrderService.find_order_or_fail(id)
        AuthService.ensure_owner_or_admin(user, order.customer_id)

        created_at = order.created_at
        updated_at = order.updated_at or created_at
        events = [
            {
                "status": OrderStatus.PENDING.value,
                "description": "Order placed",
                "timestamp": created_at,
                "location": "Order placed",
            }
        ]

        if order.status != OrderStatus.PENDING.value:
            events.append(
                {
                    "status": OrderStatus.PROCESSING.value,
                    "description": "Order confirmed and processing",
                    "timestamp": updated_at,
                    "location": "Processing center",
                }
            )

        if order.status in (OrderStatus.SHIPPED.value, OrderStatus.DELIVERED.value):
            if order.tracking_number:
                description = (
                    f"Order shipped via {order.carrier or 'carrier'}"
                    f" - Tracking: {order.tracking_number}"
                )
            else:
                description = "Order shipped"
            events.append(
                {
                    "status": OrderStatus.SHIPPED.value,
                    "description": description,
                    "timestamp": updated_at,
                    "location": order.carrier or "Shipping facility",
                }
            )

        if order.status == OrderStatus.DELIVERED.value:
            events.append(
                {
                    "status": OrderStatus.DELIVERED.value,
                    "description": "Order delivered",
                    "timestamp": updated_at,
                    "location": "Delivered",
                }
            )

        return {
            "tracking": serialize_value(events),
            "order": {
                "order_number": order.order_number,
                "status": order.status,
                "tracking_number": order.tracking_number,
                "carrier": order.carrier,
            },
        }

    @staticmethod
    def update_status(id, status, tracking_number=None, carrier=None, estimated_delivery=None):
        order = OrderService.find_order_or_fail(id)

        if status and status != order.status:
            if status not in [order_status.value for order_status in OrderStatus]:
                raise BadRequest(message=f"Invalid order status: {status}")
            if not can_transition(order.status, status):
                raise BadRequest(
                    message=f"Cannot change order status from {order.status} to {status}"
                )
            order.status = status

        if tracking_number is not None:
            order.tracking_number = tracking_number
        if carrier is not None:
            order.carrier = carrier
        if estimated_delivery:
            order.estimated_delivery = parse_datetime(estimated_delivery)
        order.save()

        NotificationServices.send_order_status_update(order)
        return order

    @staticmethod
    def refund_order(id, amount=None, reason=None):
        """Admin refund. A failing gateway call is logged and the order still commits."""
        order = OrderService.find_order_or_fail(id)
        if order.status != OrderStatus.REFUNDED.value and not can_transition(
            order.status, OrderStatus.REFUNDED.value
        ):
            raise BadRequest(message=f"Cannot refund an order in {order.status} status")

        refund = None
        if (
            order.payment_status == PaymentStatus.PAID.value
            and order.payment_intent_id
        ):
            try:
                refund = payment_gateway.process_refund(
                    order.payment_intent_id, amount=amount, reason=reason
                )
            except ApiException as e:
                logger.error(f"Refund for order {order.order_number} failed at gateway: {e}")

        order.status = OrderStatus.REFUNDED.value
        if order.payment_status == PaymentStatus.PAID.value:
            order.payment_status = PaymentStatus.REFUNDED.value
        order.save()

        NotificationServices.send_order_status_update(order)
        return order, refund

    @staticmethod
    def _ensure_document_access(order, user):
        if user.is_admin or str(user.id) == order.customer_id:
            return
        if user.is_seller:
            seller_products = ProductService.get_product_ids_by_seller(user.id)
            if any(item.product_id in seller_products for item in order.items):
                return
            raise Forbidden(message="Not authorized to view this order")
        raise Forbidden(message="Not authorized")

    @staticmethod
    def generate_invoice(id, user):
        order = OrderService.find_order_or_fail(id)
        OrderService._ensure_document_access(order, user)

        customer = User.find_by_id(order.customer_id)
        address = AddressService.find_address(order.shipping_address_id)
        invoice = {
            "invoice_number": f"{const.INVOICE_NUMBER_PREFIX}-{order.order_number}",
            "order_number": order.order_number,
            "date": serialize_value(order.created_at),
            "customer": {
                "name": customer.name if customer else "N/A",
                "email": customer.email if customer else "N/A",
                "phone": customer.phone if customer else "N/A",
            },
            "shipping_address": address.to_json() if address else None,
            "items": [serialize_order_item(item) for item in order.items],
            "subtotal": order.subtotal,
            "tax": order.tax,
            "shipping": order.shipping,
            "discount": order.discount,
            "total": order.total,
            "currency": order.currency,
            "exchange_rate": order.exchange_rate,
            "payment_method": order.payment_method,
            "payment_status": order.payment_status,
            "status": order.status,
        }
        return {"invoice": invoice, "pdf_url": None}

    @staticmethod
    def generate_shipping_label(id, user):
        order = OrderService.find_order_or_fail(id)
        OrderService._ensure_document_access(order, user)

        address = AddressService.find_address(order.shipping_address_id)
        label = {
            "order_number": order.order_number,
            "tracking_number": order.tracking_number,
            "carrier": order.carrier,
            "ship_to": address.to_json() if address else None,
            "items": [
                {"name": item.name, "quantity": item.quantity} for item in order.items
            ],
        }
        return {"label": label, "pdf_url": None}

    @staticmethod
    def ensure_payable(id, user):
        order = OrderService.find_order_or_fail(id)
        AuthService.ensure_owner_or_admin(user, order.customer_id)
        if order.payment_status == PaymentStatus.PAID.value:
            raise BadRequest(message="Order is already paid")
        if order.status in (OrderStatus.CANCELLED.value, OrderStatus.REFUNDED.value):
            raise BadRequest(message=f"Cannot pay for a {order.status} order")
        return order

    @staticmethod
    def attach_payment_intent(order, payment_intent_id):
        order.payment_intent_id = payment_intent_id
        order.save()
        return order

    @staticmethod
    def update_payment_status(order, payment_status, order_status=None):
        """Apply a payment outcome; a paid order moves to processing when allowed.

        Re-applying the current payment status changes nothing.
        """
        if not can_transition_payment(order.payment_status, payment_status):
            raise BadRequest(
                message=f"Cannot change payment status from {order.payment_status} "
                f"to {payment_status}"
            )

        target_status = order_status
        if payment_status == PaymentStatus.PAID.value and not order_status:
            target_status = OrderStatus.PROCESSING.value

        status_changed = False
        order.payment_status = payment_status
        if target_status and target_status != order.status:
            if can_transition(order.status, target_status):
                order.status = target_status
                status_changed = True
            else:
                logger.warning(
                    f"Order {order.order_number}: skipped status {order.status} -> {target_status}"
                )
        order.save()

        if status_changed:
            NotificationServices.send_order_status_update(order)
        return order

    @staticmethod
    def update_payment_status_by_intent_id(payment_intent_id, payment_status, order_status=None):
        order = None
        if payment_intent_id:
            order = Order.objects(payment_intent_id=payment_intent_id).first()
        if not order:
            raise NotFound(message="Order not found for payment intent")
        return OrderService.update_payment_status(order, payment_status, order_status)
