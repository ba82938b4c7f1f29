"""Domain enumerations for the storefront client."""

from enum import StrEnum


class OrderStatus(StrEnum):
    """Order lifecycle states reported by the backend."""

    PENDING = "pending"
    PAID = "paid"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"
    CANCELLED = "cancelled"


class SenderKind(StrEnum):
    """Who authored a message: a registered user or an unauthenticated guest."""

    USER = "user"
    GUEST = "guest"


class StatusTone(StrEnum):
    """Visual tone used to render an order status badge."""

    WARNING = "warning"
    SUCCESS = "success"
    INFO = "info"
    NEUTRAL = "neutral"
    DANGER = "danger"
    CAUTION = "caution"


# Statuses for which the refund action is disabled.
NON_REFUNDABLE_STATUSES: frozenset[OrderStatus] = frozenset(
    {OrderStatus.REFUNDED, OrderStatus.CANCELLED}
)
