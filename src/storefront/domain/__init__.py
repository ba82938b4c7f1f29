"""Domain types, models, and errors for the storefront client."""

from storefront.domain.errors import (
    AuthError,
    NetworkError,
    RefundError,
    StorefrontError,
    ValidationError,
)
from storefront.domain.models import (
    CheckoutSession,
    ConnectStatus,
    Conversation,
    ConversationList,
    ConversationThread,
    Guest,
    GuestContact,
    GuestSender,
    Item,
    ItemImage,
    Message,
    Notification,
    Order,
    Participant,
    PaymentIntent,
    PostalAddress,
    RefundResult,
    SentMessage,
    SessionVerification,
    ShippingAddress,
    Store,
    StoreRef,
    User,
    UserSender,
)
from storefront.domain.types import (
    NON_REFUNDABLE_STATUSES,
    OrderStatus,
    SenderKind,
    StatusTone,
)

__all__ = [
    "NON_REFUNDABLE_STATUSES",
    "AuthError",
    "CheckoutSession",
    "ConnectStatus",
    "Conversation",
    "ConversationList",
    "ConversationThread",
    "Guest",
    "GuestContact",
    "GuestSender",
    "Item",
    "ItemImage",
    "Message",
    "NetworkError",
    "Notification",
    "Order",
    "OrderStatus",
    "Participant",
    "PaymentIntent",
    "PostalAddress",
    "RefundError",
    "RefundResult",
    "SenderKind",
    "SentMessage",
    "SessionVerification",
    "ShippingAddress",
    "StatusTone",
    "Store",
    "StoreRef",
    "StorefrontError",
    "User",
    "UserSender",
    "ValidationError",
]
