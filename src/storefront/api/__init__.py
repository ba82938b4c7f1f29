"""HTTP transport for the storefront backend API."""

from storefront.api.client import ApiClient, error_message, read_count

__all__ = ["ApiClient", "error_message", "read_count"]
