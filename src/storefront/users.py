"""Identity-provider user sync."""

from __future__ import annotations

from typing import Any

import structlog

from storefront.api.client import ApiClient
from storefront.domain.errors import ValidationError
from storefront.domain.models import User

logger = structlog.get_logger()


class UserService:
    """Mirror a user from the identity provider into the backend database."""

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def sync(self, external_user_id: str, email: str, name: str | None = None) -> User | None:
        """Create or update the backend record for an identity-provider user.

        Called once after sign-up or first sign-in.

        Args:
            external_user_id: The user's id at the identity provider.
            email: Primary email address.
            name: Display name, if known.

        Returns:
            The backend user when the response carries one, else ``None``.

        Raises:
            ValidationError: If *external_user_id* or *email* is blank.
            NetworkError: If the backend rejects the sync.
        """
        if not external_user_id.strip() or not email.strip():
            raise ValidationError("User id and email are required")
        payload: dict[str, Any] = {"clerkUserId": external_user_id, "email": email.strip()}
        if name:
            payload["name"] = name
        data = await self._api.request("POST", "/users/sync", json=payload, fallback="Failed to sync user")
        logger.info("user_synced", external_user_id=external_user_id)
        if isinstance(data, dict) and "id" in data and "email" in data:
            return User.model_validate(data)
        return None
