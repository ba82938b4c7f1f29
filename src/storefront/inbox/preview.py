"""Unread-state and preview derivation for conversation lists.

Pure functions over backend conversation payloads -- no I/O.  The unread
predicate implemented by ``is_unread`` is the one the backend's unread-count
endpoint applies, so a locally derived count and the fetched scalar agree.

A conversation is unread for a viewer when its most recent message is newer
than the viewer's ``last_read_at`` (absent means never read) and that message
was not written by the viewer.  Identity is compared by user id only.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from storefront.domain.models import Conversation, GuestSender, Message, UserSender

# Stand-in for a missing read marker: earlier than any message.
EPOCH = datetime.fromtimestamp(0, tz=UTC)

UNKNOWN_SENDER = "Someone"
EMPTY_CONVERSATION_LABEL = "New conversation"
EMPTY_CONVERSATION_EXCERPT = "Start the conversation"
GUEST_FALLBACK_LABEL = "Guest"


@dataclass(frozen=True)
class ConversationPreview:
    """One row of an inbox list.

    Attributes:
        sender_label: Display name of the latest message's author.
        excerpt: Content of the latest message.
        timestamp: When the latest message was sent (or the conversation
            was last updated, for empty conversations).
        is_unread: Whether the row should be highlighted for the viewer.
    """

    sender_label: str
    excerpt: str
    timestamp: datetime | None
    is_unread: bool


def latest_message(conversation: Conversation) -> Message | None:
    """Return the most recent message of a list-preview conversation.

    List endpoints return messages newest-first, so this is index 0.
    """
    if not conversation.messages:
        return None
    return conversation.messages[0]


def last_read_at(conversation: Conversation, viewer_id: str | None) -> datetime:
    """Return the viewer's read high-water mark, or ``EPOCH`` if absent."""
    participant = conversation.participant_for(viewer_id)
    if participant is None or participant.last_read_at is None:
        return EPOCH
    return participant.last_read_at


def is_unread(conversation: Conversation, viewer_id: str | None) -> bool:
    """Apply the unread predicate for *viewer_id* to *conversation*.

    Args:
        conversation: A conversation as returned by the list endpoint.
        viewer_id: The viewing user's id.

    Returns:
        ``True`` if the latest message is newer than the viewer's read marker
        and was not sent by the viewer.
    """
    message = latest_message(conversation)
    if message is None:
        return False
    if viewer_id is not None and message.sender_user_id == viewer_id:
        return False
    return message.created_at > last_read_at(conversation, viewer_id)


def is_from_guest(message: Message) -> bool:
    """Return ``True`` when *message* was sent by a guest contact rather than a user.

    Thread views use this to style guest bubbles.
    """
    return message.is_from_guest


def count_unread(conversations: Iterable[Conversation], viewer_id: str | None) -> int:
    """Count conversations that are unread for *viewer_id*."""
    return sum(1 for conversation in conversations if is_unread(conversation, viewer_id))


def _first_present(*values: str | None) -> str | None:
    for value in values:
        if value:
            return value
    return None


def sender_label(message: Message) -> str:
    """Return the display label for a message's author in the seller inbox.

    Prefers the guest's name, then the guest's email, then the user's name,
    then the user's email.
    """
    sender = message.sender
    if isinstance(sender, GuestSender):
        label = _first_present(sender.guest.name, sender.guest.email)
    else:
        label = _first_present(sender.user.name, sender.user.email)
    return label or UNKNOWN_SENDER


def thread_sender_label(message: Message) -> str:
    """Return the display label for a message in the guest's thread view."""
    sender = message.sender
    if isinstance(sender, UserSender):
        label = _first_present(sender.user.name, sender.user.email)
    else:
        label = _first_present(sender.guest.name, sender.guest.email)
    return label or GUEST_FALLBACK_LABEL


def compute_preview(conversation: Conversation, viewer_id: str | None) -> ConversationPreview:
    """Build the inbox row for *conversation* as seen by *viewer_id*.

    Args:
        conversation: A conversation as returned by the list endpoint.
        viewer_id: The viewing user's id.

    Returns:
        A ``ConversationPreview``.  Conversations without messages get a
        placeholder label and are never unread.
    """
    message = latest_message(conversation)
    if message is None:
        return ConversationPreview(
            sender_label=EMPTY_CONVERSATION_LABEL,
            excerpt=EMPTY_CONVERSATION_EXCERPT,
            timestamp=conversation.updated_at,
            is_unread=False,
        )

    return ConversationPreview(
        sender_label=sender_label(message),
        excerpt=message.content,
        timestamp=message.created_at,
        is_unread=is_unread(conversation, viewer_id),
    )


def format_badge(count: int) -> str:
    """Render an unread count for a badge; large counts collapse to ``9+``."""
    if count <= 0:
        return ""
    if count > 9:
        return "9+"
    return str(count)
