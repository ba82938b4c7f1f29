"""Tests for StoreService store and item endpoints."""

from __future__ import annotations

import json
from decimal import Decimal

import httpx
import pytest

from storefront.catalog import StoreService
from storefront.domain.errors import AuthError, ValidationError

STORE = {"id": "s1", "name": "Clay Studio", "slug": "clay-studio", "isActive": True, "viewCount": 12}
ITEMS = [
    {"id": "i1", "name": "Mug", "price": 18.5, "images": [{"url": "b.jpg", "position": 1}, {"url": "a.jpg", "position": 0}]},
    {"id": "i2", "name": "Bowl", "price": "24.00"},
]


class TestPublicStorefront:
    @pytest.mark.anyio()
    async def test_get_store_by_slug(self, mock_api):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/stores/clay-studio"
            return httpx.Response(200, json=STORE)

        async with mock_api(handler) as api:
            store = await StoreService(api).get_store("clay-studio")

        assert store.name == "Clay Studio"
        assert store.view_count == 12

    @pytest.mark.anyio()
    async def test_find_item(self, mock_api):
        async with mock_api(lambda request: httpx.Response(200, json=ITEMS)) as api:
            service = StoreService(api)
            mug = await service.find_item("clay-studio", "i1")
            missing = await service.find_item("clay-studio", "nope")

        assert mug is not None
        assert mug.price == Decimal("18.5")
        assert [img.url for img in mug.sorted_images()] == ["a.jpg", "b.jpg"]
        assert missing is None

    @pytest.mark.anyio()
    async def test_record_view_failure_is_swallowed(self, mock_api):
        async with mock_api(lambda request: httpx.Response(500, json={"error": "db down"})) as api:
            await StoreService(api).record_view("clay-studio")


class TestSellerManagement:
    @pytest.mark.anyio()
    async def test_list_stores_requires_token(self, mock_api):
        async with mock_api(lambda request: httpx.Response(200, json=[STORE])) as api:
            with pytest.raises(AuthError):
                await StoreService(api).list_stores(None)

    @pytest.mark.anyio()
    async def test_create_store(self, mock_api):
        sent: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(json.loads(request.content))
            return httpx.Response(201, json=STORE)

        async with mock_api(handler) as api:
            store = await StoreService(api).create_store("tok", "  Clay Studio ", "Handmade")

        assert sent == [{"name": "Clay Studio", "description": "Handmade"}]
        assert store.slug == "clay-studio"

    @pytest.mark.anyio()
    async def test_update_store_maps_field_names(self, mock_api):
        sent: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(request)
            return httpx.Response(200, json={**STORE, "isActive": False})

        async with mock_api(handler) as api:
            store = await StoreService(api).update_store("tok", "s1", is_active=False, primary_color="#111")

        assert sent[0].method == "PATCH"
        assert json.loads(sent[0].content) == {"isActive": False, "primaryColor": "#111"}
        assert store.is_active is False

    @pytest.mark.anyio()
    async def test_update_store_rejects_unknown_fields(self, mock_api):
        async with mock_api(lambda request: httpx.Response(200, json=STORE)) as api:
            with pytest.raises(ValidationError, match="Unknown store fields: colour"):
                await StoreService(api).update_store("tok", "s1", colour="red")

    @pytest.mark.anyio()
    async def test_list_items_for_store(self, mock_api):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/items/store/s1"
            return httpx.Response(200, json=ITEMS)

        async with mock_api(handler) as api:
            items = await StoreService(api).list_items_for_store("tok", "s1")

        assert [item.name for item in items] == ["Mug", "Bowl"]

    @pytest.mark.parametrize(("name", "price"), [("", Decimal("5")), ("Mug", Decimal("0"))])
    @pytest.mark.anyio()
    async def test_create_item_validation(self, mock_api, name, price):
        async with mock_api(lambda request: httpx.Response(200, json={})) as api:
            with pytest.raises(ValidationError):
                await StoreService(api).create_item("tok", "s1", name, price)

    @pytest.mark.anyio()
    async def test_create_item(self, mock_api):
        sent: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(json.loads(request.content))
            return httpx.Response(201, json=ITEMS[1])

        async with mock_api(handler) as api:
            item = await StoreService(api).create_item("tok", "s1", "Bowl", Decimal("24.00"))

        assert sent == [{"storeId": "s1", "name": "Bowl", "price": 24.0}]
        assert item.price == Decimal("24.00")
