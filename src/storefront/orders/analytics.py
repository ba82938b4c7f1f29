"""Aggregate figures for the seller dashboard and orders page.

All monetary results are Decimal, quantized to cents with ROUND_HALF_UP.
Revenue figures count ``paid`` orders only; the orders-page summary counts
every order and nets out refunds.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from storefront.domain.models import Order, ensure_aware
from storefront.domain.types import OrderStatus

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")

# Paid orders older than this still need seller action (shipping).
NEEDS_ATTENTION_AGE = timedelta(days=3)
# Paid orders newer than this are highlighted as recent.
RECENT_AGE = timedelta(days=1)


def _money(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def _paid(orders: Sequence[Order]) -> list[Order]:
    return [order for order in orders if order.status == OrderStatus.PAID]


@dataclass(frozen=True)
class OrderKpis:
    """Headline dashboard figures over paid orders."""

    total_revenue: Decimal
    total_orders: int
    platform_revenue: Decimal
    avg_order_value: Decimal


@dataclass(frozen=True)
class ActionBuckets:
    """Orders grouped by the action they call for.

    Buckets are computed independently; an order may sit in several or none.
    """

    needs_attention: list[Order]
    recent_orders: list[Order]
    pending_orders: list[Order]


@dataclass(frozen=True)
class OrderSummary:
    """Totals across every order, net of refunds."""

    count: int
    gross: Decimal
    refunded: Decimal
    net: Decimal


@dataclass(frozen=True)
class DailyRevenue:
    date: str
    revenue: Decimal
    orders: int


@dataclass(frozen=True)
class StatusShare:
    status: str
    count: int
    percentage: int


@dataclass(frozen=True)
class ProductSales:
    name: str
    sales: int
    revenue: Decimal
    image_url: str | None


@dataclass(frozen=True)
class DestinationCount:
    label: str
    count: int


def compute_kpis(orders: Sequence[Order]) -> OrderKpis:
    """Compute revenue, order count, platform revenue and average order value.

    Only ``paid`` orders count.  The average is zero when there are no paid
    orders.
    """
    paid = _paid(orders)
    total_revenue = sum((order.amount for order in paid), ZERO)
    platform_revenue = sum((order.platform_fee for order in paid), ZERO)
    total_orders = len(paid)
    avg_order_value = total_revenue / total_orders if total_orders else ZERO

    return OrderKpis(
        total_revenue=_money(total_revenue),
        total_orders=total_orders,
        platform_revenue=_money(platform_revenue),
        avg_order_value=_money(avg_order_value),
    )


def compute_action_buckets(orders: Sequence[Order], now: datetime) -> ActionBuckets:
    """Group orders into needs-attention, recent and pending buckets.

    Args:
        orders: Orders to classify.
        now: Reference time.  A naive value is taken as UTC.

    Returns:
        ``needs_attention``: paid orders older than three days.
        ``recent_orders``: paid orders newer than one day.
        ``pending_orders``: orders with status ``pending``.
    """
    now = ensure_aware(now)
    paid = _paid(orders)
    return ActionBuckets(
        needs_attention=[o for o in paid if now - o.created_at > NEEDS_ATTENTION_AGE],
        recent_orders=[o for o in paid if now - o.created_at < RECENT_AGE],
        pending_orders=[o for o in orders if o.status == OrderStatus.PENDING],
    )


def summarize_orders(orders: Sequence[Order]) -> OrderSummary:
    """Count all orders and total their gross, refunded and net amounts."""
    gross = sum((order.amount for order in orders), ZERO)
    refunded = sum((order.refund_amount or ZERO for order in orders), ZERO)
    return OrderSummary(
        count=len(orders),
        gross=_money(gross),
        refunded=_money(refunded),
        net=_money(gross - refunded),
    )


def revenue_by_day(orders: Sequence[Order], limit: int = 14) -> list[DailyRevenue]:
    """Total paid revenue per calendar day, keeping the latest *limit* days."""
    totals: dict[str, tuple[Decimal, int]] = {}
    for order in sorted(_paid(orders), key=lambda o: o.created_at):
        day = order.created_at.date().isoformat()
        revenue, count = totals.get(day, (ZERO, 0))
        totals[day] = (revenue + order.amount, count + 1)

    rows = [
        DailyRevenue(date=day, revenue=_money(revenue), orders=count)
        for day, (revenue, count) in totals.items()
    ]
    return rows[-limit:] if limit > 0 else []


def orders_by_status(orders: Sequence[Order]) -> list[StatusShare]:
    """Count orders per status with whole-number percentages of the total."""
    if not orders:
        return []
    counts = Counter(order.status for order in orders)
    total = len(orders)
    return [
        StatusShare(
            status=status,
            count=count,
            percentage=int(
                (Decimal(count) * 100 / total).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
            ),
        )
        for status, count in counts.items()
    ]


def top_products(orders: Sequence[Order], limit: int = 5) -> list[ProductSales]:
    """Rank items by paid revenue, highest first."""
    counts: Counter[str] = Counter()
    revenue: dict[str, Decimal] = {}
    images: dict[str, str | None] = {}
    for order in _paid(orders):
        name = order.item.name
        counts[name] += 1
        revenue[name] = revenue.get(name, ZERO) + order.amount
        if images.get(name) is None:
            images[name] = order.item.cover_image_url

    ranked = sorted(
        (
            ProductSales(
                name=name,
                sales=count,
                revenue=_money(revenue[name]),
                image_url=images.get(name),
            )
            for name, count in counts.items()
        ),
        key=lambda product: product.revenue,
        reverse=True,
    )
    return ranked[:limit]


def shipping_destinations(orders: Sequence[Order], limit: int = 6) -> list[DestinationCount]:
    """Count paid orders per shipping destination (city, state, country)."""
    counts: Counter[str] = Counter()
    for order in _paid(orders):
        shipping = order.shipping_address
        if shipping is None or shipping.address is None or not shipping.address.city:
            continue
        address = shipping.address
        label = ", ".join(part for part in (address.city, address.state, address.country) if part)
        counts[label or "Unknown destination"] += 1

    return [DestinationCount(label=label, count=count) for label, count in counts.most_common(limit)]
