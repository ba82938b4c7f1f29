"""Store and item endpoints.

Public storefront reads (store by slug, its items, view tracking) need no
credential; listing, creating and updating a seller's own stores and items do.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any
from urllib.parse import quote

import structlog
from pydantic import TypeAdapter

from storefront.api.client import ApiClient
from storefront.domain.errors import NetworkError, ValidationError
from storefront.domain.models import Item, Store

logger = structlog.get_logger()

_STORE_LIST = TypeAdapter(list[Store])
_ITEM_LIST = TypeAdapter(list[Item])


def _slug(slug: str) -> str:
    return quote(slug, safe="")


class StoreService:
    """Read and manage stores and their items.

    Args:
        api: The shared ``ApiClient``.
    """

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    # -- Public storefront -----------------------------------------------------

    async def get_store(self, slug: str) -> Store:
        """Fetch a public store by slug."""
        data = await self._api.request("GET", f"/stores/{_slug(slug)}", fallback="Store not found")
        return Store.model_validate(data)

    async def list_store_items(self, slug: str) -> list[Item]:
        """Fetch the items listed in a public store."""
        data = await self._api.request(
            "GET", f"/stores/{_slug(slug)}/items", fallback="Failed to load items"
        )
        return _ITEM_LIST.validate_python(data or [])

    async def find_item(self, slug: str, item_id: str) -> Item | None:
        """Return the item *item_id* from store *slug*, or ``None``."""
        for item in await self.list_store_items(slug):
            if item.id == item_id:
                return item
        return None

    async def record_view(self, slug: str) -> None:
        """Count a storefront visit.

        Best effort: a failure is logged and never surfaced to the visitor.
        """
        try:
            await self._api.request("POST", f"/stores/{_slug(slug)}/view", fallback="Failed to record view")
        except NetworkError as exc:
            logger.warning("store_view_not_recorded", slug=slug, error=exc.message)

    # -- Seller management -----------------------------------------------------

    async def list_stores(self, token: str | None) -> list[Store]:
        """Fetch the signed-in seller's stores."""
        data = await self._api.request(
            "GET", "/stores", token=token, require_auth=True, fallback="Failed to fetch stores"
        )
        return _STORE_LIST.validate_python(data or [])

    async def create_store(
        self, token: str | None, name: str, description: str | None = None
    ) -> Store:
        """Create a new store for the signed-in seller."""
        if not name.strip():
            raise ValidationError("Store name must not be empty")
        payload: dict[str, Any] = {"name": name.strip()}
        if description:
            payload["description"] = description
        data = await self._api.request(
            "POST",
            "/stores",
            token=token,
            require_auth=True,
            json=payload,
            fallback="Failed to create store",
        )
        store = Store.model_validate(data)
        logger.info("store_created", store_id=store.id, slug=store.slug)
        return store

    async def update_store(self, token: str | None, store_id: str, **changes: Any) -> Store:
        """Apply a partial update to a store.

        Keyword names may be given in snake_case (``is_active``) and are sent
        as the backend's camelCase (``isActive``).
        """
        unknown = sorted(set(changes) - set(Store.model_fields))
        if unknown:
            raise ValidationError(f"Unknown store fields: {', '.join(unknown)}")
        payload = {Store.model_fields[key].alias or key: value for key, value in changes.items()}
        data = await self._api.request(
            "PATCH",
            f"/stores/{quote(store_id, safe='')}",
            token=token,
            require_auth=True,
            json=payload,
            fallback="Failed to update store",
        )
        return Store.model_validate(data)

    async def list_items_for_store(self, token: str | None, store_id: str) -> list[Item]:
        """Fetch all items of one of the seller's stores, including inactive ones."""
        data = await self._api.request(
            "GET",
            f"/items/store/{quote(store_id, safe='')}",
            token=token,
            require_auth=True,
            fallback="Failed to fetch items",
        )
        return _ITEM_LIST.validate_python(data or [])

    async def create_item(
        self,
        token: str | None,
        store_id: str,
        name: str,
        price: Decimal,
        description: str | None = None,
        image_url: str | None = None,
    ) -> Item:
        """List a new item in one of the seller's stores."""
        if not name.strip():
            raise ValidationError("Item name must not be empty")
        if price <= 0:
            raise ValidationError("Item price must be positive")
        payload: dict[str, Any] = {"storeId": store_id, "name": name.strip(), "price": float(price)}
        if description:
            payload["description"] = description
        if image_url:
            payload["imageUrl"] = image_url
        data = await self._api.request(
            "POST",
            "/items",
            token=token,
            require_auth=True,
            json=payload,
            fallback="Failed to create item",
        )
        return Item.model_validate(data)
