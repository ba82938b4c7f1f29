"""Conversation read-state engine, inbox service, and unread polling."""

from storefront.inbox.poller import UnreadCountPoller
from storefront.inbox.preview import (
    ConversationPreview,
    compute_preview,
    count_unread,
    format_badge,
    is_from_guest,
    is_unread,
    sender_label,
    thread_sender_label,
)
from storefront.inbox.service import InboxService, guest_inbox_link, validate_content

__all__ = [
    "ConversationPreview",
    "InboxService",
    "UnreadCountPoller",
    "compute_preview",
    "count_unread",
    "format_badge",
    "guest_inbox_link",
    "is_from_guest",
    "is_unread",
    "sender_label",
    "thread_sender_label",
    "validate_content",
]
