"""Tests for NotificationService and UserService."""

from __future__ import annotations

import json

import httpx
import pytest

from storefront.domain.errors import NetworkError, ValidationError
from storefront.inbox.poller import UnreadCountPoller
from storefront.notifications import NotificationService
from storefront.users import UserService

NOTIFICATION = {
    "id": "n1",
    "type": "new_order",
    "title": "New order",
    "message": "Bea bought a Mug",
    "read": False,
    "createdAt": "2026-03-01T10:00:00Z",
}


class TestNotificationService:
    @pytest.mark.anyio()
    async def test_list(self, mock_api):
        async with mock_api(lambda request: httpx.Response(200, json=[NOTIFICATION])) as api:
            notifications = await NotificationService(api).list("tok")
        assert notifications[0].title == "New order"

    @pytest.mark.anyio()
    async def test_unread_count_drives_poller(self, mock_api):
        async with mock_api(lambda request: httpx.Response(200, json={"count": 4})) as api:
            service = NotificationService(api)
            poller = UnreadCountPoller(lambda: service.unread_count("tok"), name="notifications")
            assert await poller.refresh() == 4

    @pytest.mark.anyio()
    async def test_unread_count_list_body_is_zero(self, mock_api):
        async with mock_api(lambda request: httpx.Response(200, json=[])) as api:
            assert await NotificationService(api).unread_count("tok") == 0

    @pytest.mark.anyio()
    async def test_malformed_count_is_network_error(self, mock_api):
        async with mock_api(lambda request: httpx.Response(200, json={"count": "n/a"})) as api:
            with pytest.raises(NetworkError, match="Failed to fetch unread count"):
                await NotificationService(api).unread_count("tok")

    @pytest.mark.anyio()
    async def test_mark_read_paths(self, mock_api):
        paths: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, json={"success": True})

        async with mock_api(handler) as api:
            service = NotificationService(api)
            await service.mark_read("tok", "n1")
            await service.mark_all_read("tok")

        assert paths == ["/api/notifications/n1/read", "/api/notifications/mark-all-read"]


class TestUserService:
    @pytest.mark.anyio()
    async def test_sync_sends_identity(self, mock_api):
        sent: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(json.loads(request.content))
            return httpx.Response(200, json={"id": "u1", "email": "sam@example.com", "name": "Sam"})

        async with mock_api(handler) as api:
            user = await UserService(api).sync("user_abc", "sam@example.com", "Sam")

        assert sent == [{"clerkUserId": "user_abc", "email": "sam@example.com", "name": "Sam"}]
        assert user is not None
        assert user.id == "u1"

    @pytest.mark.anyio()
    async def test_sync_without_user_body(self, mock_api):
        async with mock_api(lambda request: httpx.Response(200, json={"success": True})) as api:
            assert await UserService(api).sync("user_abc", "sam@example.com") is None

    @pytest.mark.anyio()
    async def test_sync_failure(self, mock_api):
        async with mock_api(lambda request: httpx.Response(500, content=b"")) as api:
            with pytest.raises(NetworkError, match="Failed to sync user"):
                await UserService(api).sync("user_abc", "sam@example.com")

    @pytest.mark.anyio()
    async def test_sync_requires_email(self, mock_api):
        async with mock_api(lambda request: httpx.Response(200, json={})) as api:
            with pytest.raises(ValidationError):
                await UserService(api).sync("user_abc", "")
