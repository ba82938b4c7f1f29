"""Authenticated HTTP transport for the storefront backend REST API.

Provides the ``ApiClient`` class that every service in this package calls
through.  It owns a single ``httpx.AsyncClient`` bound to the configured base
URL, attaches the bearer credential when one is given, and turns transport
failures and non-2xx responses into the client's error taxonomy.

No retry or backoff is performed; every retry is a manual re-fetch by the
caller.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

import httpx
import structlog

from storefront.config import Settings
from storefront.domain.errors import AuthError, NetworkError

logger = structlog.get_logger()


def error_message(response: httpx.Response, fallback: str) -> str:
    """Extract the backend's error message from a failed response.

    The backend reports failures as ``{"error": "..."}`` and occasionally as
    ``{"message": "..."}``.  Bodies that are not JSON, or carry neither key,
    yield *fallback*.

    Args:
        response: The non-2xx response.
        fallback: Message to use when the body carries none.

    Returns:
        The message to surface to the user.
    """
    try:
        body = response.json()
    except ValueError:
        return fallback

    if isinstance(body, dict):
        for key in ("error", "message"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return fallback


def read_count(data: Any, fallback: str) -> int:
    """Read ``count`` from an unread-count body.

    A missing body or key counts as zero.  A count that is not a whole
    number raises :class:`NetworkError` with *fallback*.
    """
    if not isinstance(data, dict):
        return 0
    value = data.get("count")
    if value is None:
        return 0
    if isinstance(value, bool):
        raise NetworkError(fallback)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise NetworkError(fallback) from exc


class ApiClient:
    """Thin async wrapper around the storefront REST API.

    Use as an async context manager, or call ``aclose()`` when done::

        async with ApiClient.from_settings(get_settings()) as api:
            orders = await api.request("GET", "/orders", token=token, require_auth=True)

    Args:
        base_url: Root URL of the backend API, e.g. ``http://localhost:3000/api``.
        timeout: Transport timeout in seconds, enforced by ``httpx``.
        transport: Optional ``httpx`` transport (tests pass a ``MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> ApiClient:
        """Create a client from the configured API URL and timeout."""
        return cls(settings.api_url, timeout=settings.request_timeout)

    @property
    def base_url(self) -> str:
        """Return the backend base URL without a trailing slash."""
        return self._base_url

    def _get_client(self) -> httpx.AsyncClient:
        """Lazy-create and cache the underlying ``httpx.AsyncClient``."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client, if one was opened."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        require_auth: bool = False,
        json: Any = None,
        params: dict[str, Any] | None = None,
        fallback: str = "Request failed",
        error_cls: type[NetworkError] = NetworkError,
    ) -> Any:
        """Perform one API call and return the decoded JSON body.

        Args:
            method: HTTP method.
            path: Path relative to the base URL, e.g. ``/orders``.
            token: Bearer credential, if the caller has one.
            require_auth: Raise ``AuthError`` before any I/O when *token* is
                missing.
            json: Request body to send as JSON.
            params: Query string parameters.
            fallback: Message used when the backend supplies none.
            error_cls: ``NetworkError`` subclass to raise on failure.

        Returns:
            The decoded JSON body, or ``None`` for an empty response.

        Raises:
            AuthError: If *require_auth* is set and *token* is empty.
            NetworkError: On transport failure or a non-2xx response.
        """
        if require_auth and not token:
            raise AuthError()

        headers: dict[str, str] = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._get_client().request(
                method,
                path,
                headers=headers,
                json=json,
                params=params,
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "api_transport_failed",
                method=method,
                path=path,
                exception=str(exc),
            )
            raise error_cls(fallback) from exc

        if response.is_error:
            message = error_message(response, fallback)
            logger.warning(
                "api_request_failed",
                method=method,
                path=path,
                status_code=response.status_code,
                detail=message,
            )
            raise error_cls(message, status_code=response.status_code)

        logger.debug("api_request", method=method, path=path, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise error_cls(fallback, status_code=response.status_code) from exc
