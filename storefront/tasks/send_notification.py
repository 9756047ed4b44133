from celery import shared_task

from storefront.lib.logger import logger
from storefront.models.order import Order
from storefront.models.user import User
from storefront.third_parties.email import send_email

ORDER_EMAILS = {
    "confirmation": ("Order Confirmation - #{order_number}", "order_confirmation.html"),
    "status_update": ("Order Update - #{order_number}", "order_status_update.html"),
}


def build_order_email_context(order, user):
    exchange_rate = order.exchange_rate or 1.0
    return {
        "name": user.name if user else "",
        "order_number": order.order_number,
        "status": order.status,
        "tracking_number": order.tracking_number,
        "carrier": order.carrier,
        "currency": order.currency,
        "exchange_rate": exchange_rate,
        "total": order.total * exchange_rate,
        "items": [
            {"name": item.name, "quantity": item.quantity, "price": item.price}
            for item in order.items
        ],
    }


@shared_task(name="send_order_email")
def send_order_email(order_id, kind="confirmation"):
    """
    kind: "confirmation" | "status_update"
    """
    order = Order.find_by_id(order_id)
    if not order:
        logger.warning(f"send_order_email: order {order_id} not found")
        return False

    user = User.find_by_id(order.customer_id)
    if not user or not user.email:
        logger.warning(f"send_order_email: no email for customer {order.customer_id}")
        return False

    subject, template_name = ORDER_EMAILS[kind]
    send_email(
        user.email,
        subject.format(order_number=order.order_number),
        template_name,
        build_order_email_context(order, user),
    )
    return True
