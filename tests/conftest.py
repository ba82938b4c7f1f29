"""Shared pytest fixtures for the storefront client test suite."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import httpx
import pytest

from storefront.api.client import ApiClient
from storefront.domain.models import Conversation, Order

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def anyio_backend() -> str:
    """Run async tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def now() -> datetime:
    """A fixed reference time for time-window tests."""
    return NOW


@pytest.fixture
def make_order() -> Callable[..., Order]:
    """Factory for orders built from backend-shaped (camelCase) payloads."""

    def _make(
        order_id: str = "ord_1",
        amount: str = "100.00",
        status: str = "paid",
        created_at: datetime = NOW,
        item_name: str = "Ceramic Mug",
        buyer_email: str = "buyer@example.com",
        store_id: str = "store_1",
        **extra: Any,
    ) -> Order:
        payload: dict[str, Any] = {
            "id": order_id,
            "amount": amount,
            "platformFee": extra.pop("platform_fee", "5.00"),
            "status": status,
            "buyerEmail": buyer_email,
            "createdAt": created_at.isoformat(),
            "item": {
                "id": f"item_{item_name.lower().replace(' ', '_')}",
                "name": item_name,
                "images": extra.pop("images", []),
                "store": {"id": store_id, "name": "Clay Studio", "slug": "clay-studio"},
            },
        }
        payload.update(extra)
        return Order.model_validate(payload)

    return _make


@pytest.fixture
def make_conversation() -> Callable[..., Conversation]:
    """Factory for a two-party conversation seen by seller ``u_seller``.

    ``messages`` is a list of ``(sender_id_or_guest_email, created_at)`` pairs,
    newest first.  Sender values containing ``@`` are treated as guests.
    """

    def _make(
        messages: list[tuple[str, datetime]] | None = None,
        last_read_at: datetime | None = None,
        conversation_id: str = "conv_1",
    ) -> Conversation:
        rendered = []
        for index, (sender, created_at) in enumerate(messages or []):
            message: dict[str, Any] = {
                "id": f"msg_{index}",
                "content": f"message {index}",
                "createdAt": created_at.isoformat(),
            }
            if "@" in sender:
                message["senderGuest"] = {"email": sender, "name": "Gina Guest"}
            else:
                message["senderUser"] = {
                    "id": sender,
                    "email": f"{sender}@example.com",
                    "name": sender.replace("u_", "").title(),
                }
            rendered.append(message)

        seller: dict[str, Any] = {
            "user": {"id": "u_seller", "email": "seller@example.com", "name": "Sam Seller"}
        }
        if last_read_at is not None:
            seller["lastReadAt"] = last_read_at.isoformat()

        return Conversation.model_validate(
            {
                "id": conversation_id,
                "updatedAt": NOW.isoformat(),
                "participants": [
                    seller,
                    {"user": {"id": "u_buyer", "email": "buyer@example.com", "name": "Bea Buyer"}},
                ],
                "messages": rendered,
            }
        )

    return _make


@pytest.fixture
def mock_api() -> Callable[[Handler], ApiClient]:
    """Factory for an ``ApiClient`` backed by an ``httpx.MockTransport``.

    The handler receives every request; tests record them to assert on the
    method, path, headers and body that were sent.
    """

    def _make(handler: Handler) -> ApiClient:
        return ApiClient("http://api.test/api", transport=httpx.MockTransport(handler))

    return _make

