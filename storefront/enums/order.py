from enum import Enum


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class CouponType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


ORDER_STATUS_TRANSITIONS = {
    OrderStatus.PENDING.value: {
        OrderStatus.PROCESSING.value,
        OrderStatus.CANCELLED.value,
    },
    OrderStatus.PROCESSING.value: {
        OrderStatus.SHIPPED.value,
        OrderStatus.CANCELLED.value,
        OrderStatus.REFUNDED.value,
    },
    OrderStatus.SHIPPED.value: {
        OrderStatus.DELIVERED.value,
        OrderStatus.CANCELLED.value,
        OrderStatus.REFUNDED.value,
    },
    OrderStatus.DELIVERED.value: {OrderStatus.REFUNDED.value},
    OrderStatus.CANCELLED.value: set(),
    OrderStatus.REFUNDED.value: set(),
}

PAYMENT_STATUS_TRANSITIONS = {
    PaymentStatus.PENDING.value: {PaymentStatus.PAID.value, PaymentStatus.FAILED.value},
    PaymentStatus.FAILED.value: {PaymentStatus.PAID.value},
    PaymentStatus.PAID.value: {PaymentStatus.REFUNDED.value},
    PaymentStatus.REFUNDED.value: set(),
}

CANCELLABLE_STATUSES = {
    OrderStatus.PENDING.value,
    OrderStatus.PROCESSING.value,
    OrderStatus.SHIPPED.value,
}

RETURNABLE_STATUSES = {OrderStatus.SHIPPED.value, OrderStatus.DELIVERED.value}


def can_transition(current, target):
    return target in ORDER_STATUS_TRANSITIONS.get(current, set())


def can_transition_payment(current, target):
    if current == target:
        return True
    return target in PAYMENT_STATUS_TRANSITIONS.get(current, set())
