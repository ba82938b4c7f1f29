"""Seller notification endpoints."""

from __future__ import annotations

from urllib.parse import quote

import structlog
from pydantic import TypeAdapter

from storefront.api.client import ApiClient, read_count
from storefront.domain.models import Notification

logger = structlog.get_logger()

_NOTIFICATION_LIST = TypeAdapter(list[Notification])


class NotificationService:
    """List notifications and manage their read flags.

    ``unread_count`` has the same shape as the inbox count, so an
    ``UnreadCountPoller`` can drive the notification badge too.
    """

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def list(self, token: str | None) -> list[Notification]:
        data = await self._api.request(
            "GET",
            "/notifications",
            token=token,
            require_auth=True,
            fallback="Failed to fetch notifications",
        )
        return _NOTIFICATION_LIST.validate_python(data or [])

    async def unread_count(self, token: str | None) -> int:
        data = await self._api.request(
            "GET",
            "/notifications/unread-count",
            token=token,
            require_auth=True,
            fallback="Failed to fetch unread count",
        )
        return read_count(data, "Failed to fetch unread count")

    async def mark_read(self, token: str | None, notification_id: str) -> None:
        await self._api.request(
            "POST",
            f"/notifications/{quote(notification_id, safe='')}/read",
            token=token,
            require_auth=True,
            fallback="Failed to mark notification as read",
        )
        logger.debug("notification_marked_read", notification_id=notification_id)

    async def mark_all_read(self, token: str | None) -> None:
        await self._api.request(
            "POST",
            "/notifications/mark-all-read",
            token=token,
            require_auth=True,
            fallback="Failed to mark notifications as read",
        )
