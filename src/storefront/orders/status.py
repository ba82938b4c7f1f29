"""Order status display lookup.

A fixed table maps every known ``OrderStatus`` to its badge and dot colors.
Unknown status strings fall back to the neutral style instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.models import Order
from storefront.domain.types import NON_REFUNDABLE_STATUSES, OrderStatus, StatusTone


@dataclass(frozen=True)
class StatusStyle:
    """Colors used to render a status badge and its leading dot."""

    tone: StatusTone
    badge: str
    dot: str


NEUTRAL_STYLE = StatusStyle(tone=StatusTone.NEUTRAL, badge="bg-gray-100 text-gray-800", dot="bg-gray-400")

STATUS_STYLES: dict[OrderStatus, StatusStyle] = {
    OrderStatus.PENDING: StatusStyle(
        tone=StatusTone.WARNING, badge="bg-yellow-100 text-yellow-800", dot="bg-yellow-500"
    ),
    OrderStatus.PAID: StatusStyle(
        tone=StatusTone.SUCCESS, badge="bg-green-100 text-green-800", dot="bg-green-500"
    ),
    OrderStatus.SHIPPED: StatusStyle(
        tone=StatusTone.INFO, badge="bg-blue-100 text-blue-800", dot="bg-blue-500"
    ),
    OrderStatus.COMPLETED: NEUTRAL_STYLE,
    OrderStatus.REFUNDED: StatusStyle(
        tone=StatusTone.DANGER, badge="bg-red-100 text-red-800", dot="bg-red-500"
    ),
    OrderStatus.PARTIALLY_REFUNDED: StatusStyle(
        tone=StatusTone.CAUTION, badge="bg-orange-100 text-orange-800", dot="bg-orange-500"
    ),
    OrderStatus.CANCELLED: NEUTRAL_STYLE,
}


def status_style(status: str) -> StatusStyle:
    """Return the display style for *status*, neutral if unrecognized."""
    try:
        return STATUS_STYLES[OrderStatus(status)]
    except ValueError:
        return NEUTRAL_STYLE


def status_label(status: str) -> str:
    """Return a human label, e.g. ``partially_refunded`` -> ``Partially refunded``."""
    text = status.replace("_", " ").strip()
    if not text:
        return "Unknown"
    return text[0].upper() + text[1:]


def can_refund(order: Order) -> bool:
    """Return ``True`` if the refund action is available for *order*."""
    return order.known_status not in NON_REFUNDABLE_STATUSES


def refund_action_label(order: Order) -> str:
    """Return the label for the refund action on *order*."""
    if order.status == OrderStatus.REFUNDED:
        return "Already Refunded"
    if order.status == OrderStatus.PARTIALLY_REFUNDED:
        return "Issue Additional Refund"
    return "Issue Refund"
