"""Tests for centralized Settings, the configuration check, and get_settings cache.

Covers: defaults, env-override, missing-configuration warnings that never
exit, payments "key missing" state, and lru_cache behavior.
"""

from __future__ import annotations

import pytest

from storefront.config import Settings, check_configuration, get_settings, payments_enabled

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    """Clear get_settings lru_cache before each test."""
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Settings defaults
# ---------------------------------------------------------------------------

class TestSettingsDefaults:
    """Verify that Settings fields have the expected default values."""

    def test_settings_defaults(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]

        assert s.production is False
        assert s.api_url == "http://localhost:3000/api"
        assert s.api_token.get_secret_value() == ""
        assert s.unread_poll_interval == 30.0
        assert s.inbox_preview_limit == 6
        assert s.message_max_length == 1000
        assert s.sentry_dsn == ""

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STOREFRONT_PRODUCTION", "true")
        monkeypatch.setenv("STOREFRONT_API_URL", "https://api.example.com/api")
        monkeypatch.setenv("STOREFRONT_API_TOKEN", "tok_secret")
        monkeypatch.setenv("STOREFRONT_UNREAD_POLL_INTERVAL", "15")

        s = Settings(_env_file=None)  # type: ignore[call-arg]

        assert s.production is True
        assert s.api_url == "https://api.example.com/api"
        assert s.api_token.get_secret_value() == "tok_secret"
        assert s.unread_poll_interval == 15.0

    def test_token_is_not_leaked_in_repr(self) -> None:
        s = Settings(_env_file=None, api_token="tok_secret")  # type: ignore[call-arg,arg-type]
        assert "tok_secret" not in repr(s)


# ---------------------------------------------------------------------------
# Configuration check
# ---------------------------------------------------------------------------

class TestCheckConfiguration:
    """Missing optional configuration is reported but never stops the client."""

    def test_reports_missing_key_and_token(self) -> None:
        settings = Settings(_env_file=None, production=True)  # type: ignore[call-arg]

        problems = check_configuration(settings)

        assert any("STOREFRONT_STRIPE_PUBLISHABLE_KEY" in p for p in problems)
        assert any("STOREFRONT_API_TOKEN" in p for p in problems)

    def test_fully_configured_passes(self) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            stripe_publishable_key="pk_test_123",
            api_token="tok_123",  # type: ignore[arg-type]
        )
        assert check_configuration(settings) == []

    def test_payments_disabled_without_publishable_key(self) -> None:
        assert payments_enabled(Settings(_env_file=None)) is False  # type: ignore[call-arg]
        assert payments_enabled(
            Settings(_env_file=None, stripe_publishable_key="pk_test_123")  # type: ignore[call-arg]
        ) is True

    def test_whitespace_key_counts_as_missing(self) -> None:
        settings = Settings(_env_file=None, stripe_publishable_key="   ")  # type: ignore[call-arg]
        assert payments_enabled(settings) is False


# ---------------------------------------------------------------------------
# get_settings caching
# ---------------------------------------------------------------------------

class TestGetSettings:
    """Verify lru_cache behaviour and validation failure handling."""

    def test_get_settings_cached(self) -> None:
        s1 = get_settings()
        s2 = get_settings()
        assert s1 is s2

    def test_invalid_settings_exit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STOREFRONT_INBOX_PREVIEW_LIMIT", "not-a-number")

        with pytest.raises(SystemExit) as exc_info:
            get_settings()

        assert exc_info.value.code == 1
