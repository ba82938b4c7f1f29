"""Command-line interface for a seller's storefront.

Provides an argparse-based tool over the storefront services: browse and
filter orders, show dashboard figures, list the inbox, print the unread
count, and issue refunds.  The bearer credential comes from
``STOREFRONT_API_TOKEN``.

Usage::

    storefront orders --status paid --last-days 7 --format json
    storefront kpis
    storefront inbox --unread-only
    storefront refund ord_123 --amount 12.50 --reason "Damaged in transit"
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

import structlog

from storefront.api.client import ApiClient
from storefront.config import Settings, check_configuration, get_settings
from storefront.domain.errors import StorefrontError, ValidationError
from storefront.domain.models import Order
from storefront.inbox.preview import ConversationPreview, compute_preview, format_badge
from storefront.inbox.service import InboxService
from storefront.observability import configure_logging, init_sentry
from storefront.orders.analytics import compute_action_buckets, compute_kpis, summarize_orders
from storefront.orders.filters import OrderFilter, filter_orders, page_count, paginate
from storefront.orders.refunds import RefundService
from storefront.orders.service import OrderService
from storefront.orders.status import can_refund, status_label

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with one subcommand per view.

    Returns:
        A configured :class:`argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(prog="storefront", description="Manage a storefront")
    commands = parser.add_subparsers(dest="command", required=True)

    orders = commands.add_parser("orders", help="List and filter orders")
    orders.add_argument("--status", type=str, default="all", help="Order status, or 'all'")
    orders.add_argument("--search", type=str, help="Match item, buyer, or order id")
    orders.add_argument("--last-days", type=int, help="Only orders from the last N days")
    orders.add_argument("--store", type=str, help="Only orders for this store id")
    orders.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    orders.add_argument("--page-size", type=int, default=20, help="Orders per page (default: 20)")
    orders.add_argument(
        "--format",
        type=str,
        choices=["table", "json"],
        default="table",
        dest="output_format",
        help="Output format (default: table)",
    )

    commands.add_parser("kpis", help="Show dashboard figures")

    inbox = commands.add_parser("inbox", help="List conversations")
    inbox.add_argument("--unread-only", action="store_true", help="Hide read conversations")

    commands.add_parser("unread", help="Print the unread conversation count")

    refund = commands.add_parser("refund", help="Refund an order")
    refund.add_argument("order_id", type=str, help="Order id")
    refund.add_argument("--amount", type=str, help="Amount to refund (default: full amount)")
    refund.add_argument("--reason", type=str, default="", help="Reason shown to the buyer")
    refund.add_argument(
        "--keep-platform-fee",
        action="store_true",
        help="Do not refund the platform fee",
    )

    return parser


def _truncate(value: Any, width: int) -> str:
    s = str(value or "")
    if len(s) > width:
        return s[: width - 3] + "..."
    return s


def _rows(headers: list[str], widths: list[int], rows: list[list[Any]]) -> str:
    lines: list[str] = []
    header_line = "  ".join(h.ljust(w) for h, w in zip(headers, widths, strict=True))
    lines.append(header_line)
    lines.append("-" * len(header_line))
    for row in rows:
        lines.append(
            "  ".join(_truncate(c, w).ljust(w) for c, w in zip(row, widths, strict=True))
        )
    return "\n".join(lines)


def format_orders_table(orders: Sequence[Order]) -> str:
    """Format orders as a human-readable table.

    Columns: Date, Order, Item, Buyer, Amount, Status.
    """
    if not orders:
        return "No orders found."
    rows = [
        [
            order.created_at.strftime("%Y-%m-%d %H:%M"),
            order.id,
            order.item.name,
            order.buyer_name or order.buyer_email,
            f"${order.amount:,.2f}",
            status_label(order.status),
        ]
        for order in orders
    ]
    return _rows(["Date", "Order", "Item", "Buyer", "Amount", "Status"], [16, 14, 24, 24, 10, 20], rows)


def format_orders_json(orders: Sequence[Order]) -> str:
    """Format orders as pretty-printed JSON in the backend's field names."""
    return json.dumps(
        [order.model_dump(mode="json", by_alias=True, exclude_none=True) for order in orders],
        indent=2,
    )


def format_inbox(previews: Sequence[tuple[str, ConversationPreview]]) -> str:
    """Format conversation previews, marking unread rows with ``*``."""
    if not previews:
        return "No conversations yet."
    rows = [
        [
            "*" if preview.is_unread else "",
            preview.timestamp.strftime("%Y-%m-%d %H:%M") if preview.timestamp else "",
            conversation_id,
            preview.sender_label,
            preview.excerpt,
        ]
        for conversation_id, preview in previews
    ]
    return _rows(["", "Time", "Conversation", "From", "Message"], [1, 16, 14, 24, 40], rows)


async def _orders(args: argparse.Namespace, api: ApiClient, token: str | None) -> str:
    order_filter = OrderFilter(
        status=args.status,
        search_text=args.search,
        date_window_days=args.last_days,
        store_id=args.store,
    )
    orders = filter_orders(await OrderService(api).fetch_orders(token), order_filter)
    page = paginate(orders, args.page, args.page_size)
    if args.output_format == "json":
        return format_orders_json(page)
    footer = f"Page {args.page} of {page_count(len(orders), args.page_size)} ({len(orders)} orders)"
    return f"{format_orders_table(page)}\n\n{footer}"


async def _kpis(api: ApiClient, token: str | None) -> str:
    orders = await OrderService(api).fetch_orders(token)
    kpis = compute_kpis(orders)
    buckets = compute_action_buckets(orders, datetime.now(tz=UTC))
    summary = summarize_orders(orders)
    lines = [
        f"Total revenue:      ${kpis.total_revenue:,.2f}",
        f"Paid orders:        {kpis.total_orders}",
        f"Platform revenue:   ${kpis.platform_revenue:,.2f}",
        f"Avg order value:    ${kpis.avg_order_value:,.2f}",
        f"Needs attention:    {len(buckets.needs_attention)}",
        f"Recent (24h):       {len(buckets.recent_orders)}",
        f"Pending:            {len(buckets.pending_orders)}",
        f"All orders:         {summary.count} (net ${summary.net:,.2f} after ${summary.refunded:,.2f} refunded)",
    ]
    return "\n".join(lines)


async def _inbox(args: argparse.Namespace, api: ApiClient, token: str | None, settings: Settings) -> str:
    listing = await InboxService(api, max_message_length=settings.message_max_length).fetch_all(token)
    previews = [
        (conversation.id, compute_preview(conversation, listing.viewer_user_id))
        for conversation in listing.conversations
    ]
    if args.unread_only:
        previews = [row for row in previews if row[1].is_unread]
    return format_inbox(previews)


async def _unread(api: ApiClient, token: str | None) -> str:
    count = await InboxService(api).get_unread_count(token)
    badge = format_badge(count)
    return f"{count} unread" + (f" [{badge}]" if badge and badge != str(count) else "")


async def _refund(args: argparse.Namespace, api: ApiClient, token: str | None) -> str:
    orders = await OrderService(api).fetch_orders(token)
    order = next((o for o in orders if o.id == args.order_id), None)
    if order is None:
        raise ValidationError(f"Order {args.order_id} not found")
    if not can_refund(order):
        raise ValidationError(f"Order {order.id} is {status_label(order.status).lower()} and cannot be refunded")

    result = await RefundService(api).refund_order(
        token,
        order,
        args.amount if args.amount is not None else order.amount,
        reason=args.reason,
        refund_platform_fee=not args.keep_platform_fee,
    )
    # Re-fetch rather than trusting the local copy; the backend decides the new status.
    refreshed = await OrderService(api).fetch_orders(token)
    updated = next((o for o in refreshed if o.id == order.id), order)
    return f"Refund submitted for {order.id}. Status: {status_label(updated.status)}" + (
        f" (refund {result.refund_id})" if result.refund_id else ""
    )


async def run(args: argparse.Namespace, settings: Settings, api: ApiClient) -> str:
    """Execute the parsed subcommand and return the text to print."""
    token = settings.api_token.get_secret_value() or None
    if args.command == "orders":
        return await _orders(args, api, token)
    if args.command == "kpis":
        return await _kpis(api, token)
    if args.command == "inbox":
        return await _inbox(args, api, token, settings)
    if args.command == "unread":
        return await _unread(api, token)
    if args.command == "refund":
        return await _refund(args, api, token)
    msg = f"Unknown command: {args.command}"
    raise ValueError(msg)


async def _run_with_client(args: argparse.Namespace, settings: Settings) -> str:
    async with ApiClient.from_settings(settings) as api:
        return await run(args, settings, api)


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, run the subcommand, and print its output.

    Returns:
        Process exit code: ``0`` on success, ``1`` when the command failed.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    init_sentry(settings.sentry_dsn, production=settings.production)
    configure_logging(production=settings.production, sentry_enabled=bool(settings.sentry_dsn))
    check_configuration(settings)

    try:
        output = asyncio.run(_run_with_client(args, settings))
    except (StorefrontError, ValueError) as exc:
        message = getattr(exc, "message", None) or str(exc)
        logger.error("command_failed", command=args.command, error=message)
        print(f"Error: {message}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
