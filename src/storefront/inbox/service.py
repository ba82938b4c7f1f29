"""Inbox operations against the conversation endpoints.

``InboxService`` covers both the authenticated seller inbox and the guest
flow, where an opaque ``guest_access_token`` stands in for a session
credential and is scoped server-side to the one conversation that minted it.

Read-state only advances through ``mark_read``/``mark_all_read``: fetching a
thread leaves ``last_read_at`` untouched, so callers that show a thread call
``open_thread`` (fetch, then mark read).
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, urlencode

import structlog

from storefront.api.client import ApiClient, read_count
from storefront.domain.errors import AuthError, NetworkError, ValidationError
from storefront.domain.models import (
    Conversation,
    ConversationList,
    ConversationThread,
    GuestContact,
    SentMessage,
)
from storefront.inbox.preview import ConversationPreview, compute_preview

logger = structlog.get_logger()

DEFAULT_MAX_MESSAGE_LENGTH = 1000
DEFAULT_PREVIEW_LIMIT = 6


def validate_content(content: str, max_length: int = DEFAULT_MAX_MESSAGE_LENGTH) -> str:
    """Validate and normalize message content before sending.

    Args:
        content: The raw message text.
        max_length: Maximum allowed length after stripping.

    Returns:
        The stripped content.

    Raises:
        ValidationError: If the content is blank or too long.
    """
    stripped = content.strip()
    if not stripped:
        raise ValidationError("Message must not be empty")
    if len(stripped) > max_length:
        raise ValidationError(f"Message must be at most {max_length} characters")
    return stripped


def _parse_sent(data: Any) -> SentMessage:
    """Parse a send response, which is either an envelope or the bare message."""
    if isinstance(data, dict) and "content" in data and "message" not in data:
        return SentMessage.model_validate({"message": data})
    return SentMessage.model_validate(data or {})


def guest_inbox_link(origin: str, guest_access_token: str) -> str:
    """Build the link a guest keeps to return to their conversation."""
    return f"{origin.rstrip('/')}/guest-inbox?{urlencode({'token': guest_access_token})}"


class InboxService:
    """Conversation list, thread, read-state and messaging operations.

    Args:
        api: The shared ``ApiClient``.
        max_message_length: Maximum length of message content.
        preview_limit: Number of rows shown by ``recent_previews``.
    """

    def __init__(
        self,
        api: ApiClient,
        max_message_length: int = DEFAULT_MAX_MESSAGE_LENGTH,
        preview_limit: int = DEFAULT_PREVIEW_LIMIT,
    ) -> None:
        self._api = api
        self._max_message_length = max_message_length
        self._preview_limit = preview_limit

    # -- Authenticated inbox ---------------------------------------------------

    async def fetch_all(self, token: str | None) -> ConversationList:
        """Fetch the viewer's conversations, newest message first in each."""
        data = await self._api.request(
            "GET",
            "/conversations",
            token=token,
            require_auth=True,
            fallback="Failed to fetch conversations",
        )
        return ConversationList.model_validate(data or {})

    async def fetch_thread(self, token: str | None, conversation_id: str) -> ConversationThread:
        """Fetch the full, chronological message history of one conversation.

        Does not mark the conversation read.
        """
        data = await self._api.request(
            "GET",
            f"/conversations/{quote(conversation_id, safe='')}/messages",
            token=token,
            require_auth=True,
            fallback="Failed to fetch messages",
        )
        return ConversationThread.model_validate(data)

    async def open_thread(self, token: str | None, conversation_id: str) -> ConversationThread:
        """Fetch a thread for display and then advance the viewer's read marker."""
        thread = await self.fetch_thread(token, conversation_id)
        await self.mark_read(token, conversation_id)
        return thread

    async def mark_read(self, token: str | None, conversation_id: str) -> None:
        """Advance the viewer's ``last_read_at`` for one conversation to now.

        Idempotent: marking an already-read conversation again has no visible
        effect.
        """
        await self._api.request(
            "POST",
            f"/conversations/{quote(conversation_id, safe='')}/read",
            token=token,
            require_auth=True,
            fallback="Failed to mark conversation read",
        )
        logger.info("conversation_marked_read", conversation_id=conversation_id)

    async def mark_all_read(self, token: str | None) -> None:
        """Advance ``last_read_at`` on every conversation the viewer is in."""
        await self._api.request(
            "POST",
            "/conversations/mark-all-read",
            token=token,
            require_auth=True,
            fallback="Failed to mark all read",
        )
        logger.info("conversations_marked_all_read")

    async def get_unread_count(self, token: str | None) -> int:
        """Fetch the viewer's global unread conversation count.

        Fetched separately from the list because the list is capped for
        previews while the count covers every conversation.
        """
        data = await self._api.request(
            "GET",
            "/conversations/unread-count",
            token=token,
            require_auth=True,
            fallback="Failed to fetch unread count",
        )
        return read_count(data, "Failed to fetch unread count")

    async def recent_previews(self, token: str | None) -> list[ConversationPreview]:
        """Return preview rows for the most recent conversations (dropdown view)."""
        listing = await self.fetch_all(token)
        return [
            compute_preview(conversation, listing.viewer_user_id)
            for conversation in listing.conversations[: self._preview_limit]
        ]

    # -- Sending ---------------------------------------------------------------

    async def send_message(
        self,
        content: str,
        *,
        conversation_id: str | None = None,
        recipient_user_id: str | None = None,
        guest: GuestContact | None = None,
        token: str | None = None,
    ) -> SentMessage:
        """Send a message, either replying in a thread or starting a new one.

        Exactly one of *conversation_id* (reply) and *recipient_user_id* (new
        thread) must be given.  Signed-in senders pass *token*; guests pass
        *guest* contact details instead and receive a ``guest_access_token``
        when they start a conversation.

        Raises:
            ValidationError: On blank or overlong content, on a missing or
                ambiguous route, or on a missing/unexpected guest contact.
            NetworkError: If the backend rejects the message.
        """
        text = validate_content(content, self._max_message_length)

        if (conversation_id is None) == (recipient_user_id is None):
            raise ValidationError(
                "Provide exactly one of conversation_id or recipient_user_id"
            )

        if token:
            if guest is not None:
                raise ValidationError("Signed-in senders must not supply guest details")
        else:
            if guest is None:
                raise ValidationError("Guest name and email are required when not signed in")
            if not guest.email.strip():
                raise ValidationError("Guest email is required")

        payload: dict[str, Any] = {"content": text}
        if conversation_id is not None:
            payload["conversationId"] = conversation_id
        if recipient_user_id is not None:
            payload["recipientUserId"] = recipient_user_id
        if guest is not None:
            payload["guest"] = guest.model_dump(by_alias=True, exclude_none=True)

        data = await self._api.request(
            "POST",
            "/conversations/message",
            token=token or None,
            json=payload,
            fallback="Failed to send message",
        )
        sent = _parse_sent(data)
        logger.info(
            "message_sent",
            conversation_id=conversation_id or sent.conversation_id,
            as_guest=guest is not None,
            guest_token_issued=sent.guest_access_token is not None,
        )
        return sent

    # -- Guest flow ------------------------------------------------------------

    async def get_guest_conversation(self, access_token: str | None) -> Conversation:
        """Fetch the single conversation a guest access token is scoped to."""
        if not access_token:
            raise AuthError("Missing access token.")
        data = await self._api.request(
            "GET",
            f"/conversations/guest/{quote(access_token, safe='')}",
            fallback="Failed to fetch conversation",
        )
        conversation = data.get("conversation") if isinstance(data, dict) else None
        if conversation is None:
            raise NetworkError("Conversation unavailable")
        return Conversation.model_validate(conversation)

    async def send_guest_message(self, access_token: str | None, content: str) -> SentMessage:
        """Reply as a guest in the conversation scoped by *access_token*."""
        if not access_token:
            raise AuthError("Missing access token.")
        text = validate_content(content, self._max_message_length)
        data = await self._api.request(
            "POST",
            f"/conversations/guest/{quote(access_token, safe='')}/message",
            json={"content": text},
            fallback="Failed to send message",
        )
        return _parse_sent(data)
