"""Domain-specific exception classes for the storefront client."""


class StorefrontError(Exception):
    """Base class for all errors raised by the storefront client."""


class AuthError(StorefrontError):
    """Raised when an action needs a bearer credential and none is available."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class NetworkError(StorefrontError):
    """Raised on transport failures and non-2xx backend responses.

    Attributes:
        status_code: The HTTP status code, or ``None`` for transport failures.
        message: The backend's error message when present, else a fallback.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ValidationError(StorefrontError):
    """Raised when client-side input is rejected before any network call."""


class RefundError(NetworkError):
    """Raised when the backend rejects a refund request."""
