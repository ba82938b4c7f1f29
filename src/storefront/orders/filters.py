"""Order filtering and pagination for the orders and dashboard views."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict, field_validator

from storefront.domain.models import Order, ensure_aware

ALL_STATUSES = "all"
ALL_STORES = "all"


class OrderFilter(BaseModel):
    """Filter criteria for an order list.  All criteria combine with AND.

    ``status`` and ``store_id`` accept ``"all"`` to disable that criterion.
    """

    model_config = ConfigDict(frozen=True)

    status: str = ALL_STATUSES
    search_text: str | None = None
    date_window_days: int | None = None
    store_id: str | None = None

    @field_validator("date_window_days")
    @classmethod
    def window_must_be_positive(cls, v: int | None) -> int | None:
        """Ensure the date window, when given, is at least one day."""
        if v is not None and v < 1:
            raise ValueError("date_window_days must be at least 1")
        return v


def _search_fields(order: Order) -> list[str]:
    fields = [order.item.name, order.buyer_email, order.id]
    if order.buyer_name:
        fields.append(order.buyer_name)
    if order.shipping_address is not None and order.shipping_address.name:
        fields.append(order.shipping_address.name)
    return fields


def matches_search(order: Order, search_text: str) -> bool:
    """Case-insensitive substring match across the searchable order fields."""
    needle = search_text.strip().lower()
    if not needle:
        return True
    return any(needle in field.lower() for field in _search_fields(order))


def filter_orders(
    orders: Sequence[Order],
    order_filter: OrderFilter,
    now: datetime | None = None,
) -> list[Order]:
    """Return the orders matching every criterion of *order_filter*.

    Args:
        orders: Orders as returned by the backend.
        order_filter: The criteria to apply.
        now: Reference time for the date window.  Defaults to the current
            UTC time; a naive value is taken as UTC.

    Returns:
        Matching orders, in input order.
    """
    reference = ensure_aware(now) if now is not None else datetime.now(tz=UTC)
    cutoff = None
    if order_filter.date_window_days is not None:
        cutoff = reference - timedelta(days=order_filter.date_window_days)

    result: list[Order] = []
    for order in orders:
        if order_filter.status != ALL_STATUSES and order.status != order_filter.status:
            continue
        if order_filter.search_text and not matches_search(order, order_filter.search_text):
            continue
        if cutoff is not None and order.created_at < cutoff:
            continue
        if (
            order_filter.store_id is not None
            and order_filter.store_id != ALL_STORES
            and order.store_id != order_filter.store_id
        ):
            continue
        result.append(order)
    return result


def paginate(orders: Sequence[Order], page: int, page_size: int) -> list[Order]:
    """Return one 1-indexed page of *orders*.

    Out-of-range pages (below 1 or past the end) are empty rather than an
    error.

    Raises:
        ValueError: If *page_size* is less than 1.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    if page < 1:
        return []
    start = (page - 1) * page_size
    return list(orders[start : start + page_size])


def page_count(total: int, page_size: int) -> int:
    """Return the number of pages needed for *total* items (at least 1)."""
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    return max(1, -(-total // page_size))
