"""Order list retrieval for the seller's orders and dashboard views."""

from __future__ import annotations

import structlog
from pydantic import TypeAdapter

from storefront.api.client import ApiClient
from storefront.domain.models import Order

logger = structlog.get_logger()

_ORDER_LIST = TypeAdapter(list[Order])


class OrderService:
    """Fetch the signed-in seller's orders.

    The client never patches an order after a write; it calls
    ``fetch_orders`` again.

    Args:
        api: The shared ``ApiClient``.
    """

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def fetch_orders(self, token: str | None) -> list[Order]:
        """Return every order across the seller's stores."""
        data = await self._api.request(
            "GET",
            "/orders",
            token=token,
            require_auth=True,
            fallback="Failed to fetch orders",
        )
        orders = _ORDER_LIST.validate_python(data or [])
        logger.debug("orders_fetched", count=len(orders))
        return orders
