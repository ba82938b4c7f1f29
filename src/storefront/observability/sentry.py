"""Sentry SDK initialization with structlog-sentry bridge.

Guest access tokens travel in URL paths (``/conversations/guest/<token>``)
and seller credentials in the ``Authorization`` header; both are scrubbed
from events before they leave the process.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import sentry_sdk
import structlog
from sentry_sdk.integrations.logging import LoggingIntegration
from structlog_sentry import SentryProcessor

GUEST_TOKEN_PATH = re.compile(r"(/conversations/guest/)[^/?#\s]+")
REDACTED = "[redacted]"


def scrub_guest_tokens(text: str) -> str:
    """Replace guest access tokens embedded in conversation paths."""
    return GUEST_TOKEN_PATH.sub(rf"\g<1>{REDACTED}", text)


def scrub_event(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any]:
    """``before_send`` hook: drop credentials and guest tokens from *event*."""
    request = event.get("request")
    if isinstance(request, dict):
        headers = request.get("headers")
        if isinstance(headers, dict):
            for name in list(headers):
                if name.lower() == "authorization":
                    headers[name] = REDACTED
        if isinstance(request.get("url"), str):
            request["url"] = scrub_guest_tokens(request["url"])

    extra = event.get("extra")
    if isinstance(extra, dict):
        for key, value in extra.items():
            if isinstance(value, str):
                extra[key] = scrub_guest_tokens(value)

    message = event.get("message")
    if isinstance(message, str):
        event["message"] = scrub_guest_tokens(message)
    return event


def init_sentry(dsn: str, production: bool = False) -> None:
    """Initialize Sentry SDK with the given *dsn*.

    Args:
        dsn: Sentry DSN string.  Empty string disables Sentry.
        production: Tags events with the ``production`` environment instead
            of ``development``.
    """
    if not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        environment="production" if production else "development",
        traces_sample_rate=0.1,
        send_default_pii=False,
        before_send=scrub_event,
        integrations=[
            # structlog-sentry owns event capture; stdlib logging capture off.
            LoggingIntegration(event_level=None, level=None),
        ],
    )


def get_sentry_processor() -> structlog.types.Processor:
    """Return a structlog processor that forwards ERROR events to Sentry.

    Failed commands (``command_failed``) are the main source.  Insert this
    after ``add_log_level`` and before the renderer.
    """
    return SentryProcessor(event_level=logging.ERROR)
