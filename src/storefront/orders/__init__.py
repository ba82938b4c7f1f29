"""Order filtering, aggregation, status display, and refunds."""

from storefront.orders.analytics import (
    ActionBuckets,
    OrderKpis,
    OrderSummary,
    compute_action_buckets,
    compute_kpis,
    orders_by_status,
    revenue_by_day,
    shipping_destinations,
    summarize_orders,
    top_products,
)
from storefront.orders.filters import OrderFilter, filter_orders, page_count, paginate
from storefront.orders.refunds import (
    RefundRequest,
    RefundService,
    default_refund_amount,
    validate_refund_amount,
)
from storefront.orders.service import OrderService
from storefront.orders.status import (
    STATUS_STYLES,
    StatusStyle,
    can_refund,
    refund_action_label,
    status_label,
    status_style,
)

__all__ = [
    "STATUS_STYLES",
    "ActionBuckets",
    "OrderFilter",
    "OrderKpis",
    "OrderService",
    "OrderSummary",
    "RefundRequest",
    "RefundService",
    "StatusStyle",
    "can_refund",
    "compute_action_buckets",
    "compute_kpis",
    "default_refund_amount",
    "filter_orders",
    "orders_by_status",
    "page_count",
    "paginate",
    "refund_action_label",
    "revenue_by_day",
    "shipping_destinations",
    "status_label",
    "status_style",
    "summarize_orders",
    "top_products",
    "validate_refund_amount",
]
