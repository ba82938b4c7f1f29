"""Logging and error-reporting setup for the storefront client."""

from storefront.observability.logging import configure_logging
from storefront.observability.sentry import get_sentry_processor, init_sentry

__all__ = [
    "configure_logging",
    "get_sentry_processor",
    "init_sentry",
]
