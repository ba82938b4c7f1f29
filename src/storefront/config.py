"""Centralized, typed configuration using pydantic-settings.

Provides a single ``Settings`` class backed by ``.env`` file and environment
variables (all prefixed ``STOREFRONT_``), a cached ``get_settings()`` accessor,
and a ``check_configuration()`` startup check that reports missing optional
configuration without ever stopping the client.

IMPORTANT: This module has ZERO imports from the ``storefront`` package to
prevent circular imports.  Only stdlib, pydantic, pydantic_settings, and
structlog are used.
"""

from __future__ import annotations

import sys
from functools import lru_cache

import structlog
from pydantic import SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()


class Settings(BaseSettings):
    """Client settings loaded from environment variables and ``.env`` file.

    ``SecretStr`` fields prevent accidental leaks of the bearer credential in
    logs or error output.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STOREFRONT_",
        case_sensitive=False,
    )

    # -- General ---------------------------------------------------------------
    production: bool = False
    app_origin: str = "http://localhost:3001"

    # -- Backend API -----------------------------------------------------------
    api_url: str = "http://localhost:3000/api"
    api_token: SecretStr = SecretStr("")
    request_timeout: float = 30.0

    # -- Payments --------------------------------------------------------------
    stripe_publishable_key: str = ""

    # -- Inbox -----------------------------------------------------------------
    unread_poll_interval: float = 30.0
    inbox_preview_limit: int = 6
    message_max_length: int = 1000

    # -- Error reporting -------------------------------------------------------
    sentry_dsn: str = ""


@lru_cache
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance.

    The ``@lru_cache`` decorator ensures environment variables are parsed
    exactly once.  Call ``get_settings.cache_clear()`` in tests to reset.

    Returns:
        The client ``Settings``.
    """
    try:
        return Settings()
    except ValidationError as exc:
        # Log only the structured errors list -- never the full exception
        # which may contain raw SecretStr values.
        logger.error("settings_validation_failed", errors=exc.errors())
        sys.exit(1)


def payments_enabled(settings: Settings) -> bool:
    """Return ``True`` when a payments publishable key is configured."""
    return bool(settings.stripe_publishable_key.strip())


def check_configuration(settings: Settings) -> list[str]:
    """Report missing optional configuration.

    Missing values degrade the client (for example, payments onboarding shows
    a "key missing" state) but never stop it, so every problem is logged as a
    warning and returned to the caller.

    Args:
        settings: The loaded client settings.

    Returns:
        A list of human-readable problems.  Empty when fully configured.
    """
    problems: list[str] = []

    if not settings.api_url.strip():
        problems.append("STOREFRONT_API_URL is empty or not set")

    if not payments_enabled(settings):
        problems.append("STOREFRONT_STRIPE_PUBLISHABLE_KEY is empty or not set")

    if not settings.api_token.get_secret_value():
        problems.append("STOREFRONT_API_TOKEN is empty or not set")

    if not problems:
        logger.info("configuration_check_passed")
        return problems

    for problem in problems:
        logger.warning("configuration_missing", detail=problem, production=settings.production)
    return problems
