"""Pydantic v2 models for the entities returned by the storefront backend.

The backend speaks camelCase JSON; every model accepts either the camelCase
alias or the snake_case field name.  All models are frozen: the client never
patches backend data locally, it re-fetches after every write.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic.alias_generators import to_camel

from storefront.domain.types import OrderStatus, SenderKind


def ensure_aware(value: datetime) -> datetime:
    """Treat naive timestamps as UTC, whether from the backend or a caller."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _coerce_money(value: object) -> object:
    """Route JSON floats through ``str`` so cents stay exact."""
    if isinstance(value, float):
        return Decimal(str(value))
    return value


Timestamp = Annotated[datetime, AfterValidator(ensure_aware)]
Money = Annotated[Decimal, BeforeValidator(_coerce_money)]


class ApiModel(BaseModel):
    """Base model for backend payloads (camelCase aliases, immutable)."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ---------------------------------------------------------------------------
# People
# ---------------------------------------------------------------------------


class User(ApiModel):
    """A registered user of the platform."""

    id: str
    email: str
    name: str | None = None
    image_url: str | None = None


class Guest(ApiModel):
    """An unauthenticated message sender, identified by name and email."""

    email: str
    name: str | None = None
    id: str | None = None


class GuestContact(ApiModel):
    """Contact details a guest supplies when starting a conversation."""

    email: str
    name: str | None = None


# ---------------------------------------------------------------------------
# Conversations
# ---------------------------------------------------------------------------


class UserSender(ApiModel):
    """A message authored by a registered user."""

    kind: Literal["user"] = "user"
    user: User


class GuestSender(ApiModel):
    """A message authored by a guest."""

    kind: Literal["guest"] = "guest"
    guest: Guest


MessageSender = Annotated[UserSender | GuestSender, Field(discriminator="kind")]


class Message(ApiModel):
    """A single message in a conversation.

    The backend marks the author by populating exactly one of ``senderUser``
    or ``senderGuest``; that shape is folded into the tagged ``sender`` field
    on the way in, so a message with both or neither fails validation.
    """

    id: str
    content: str
    created_at: Timestamp
    sender: MessageSender

    @model_validator(mode="before")
    @classmethod
    def fold_sender_fields(cls, data: object) -> object:
        """Turn ``senderUser``/``senderGuest`` into a tagged ``sender``."""
        if not isinstance(data, dict) or "sender" in data:
            return data

        user = data.get("senderUser") or data.get("sender_user")
        guest = data.get("senderGuest") or data.get("sender_guest")
        if user and guest:
            raise ValueError("message must not have both a user and a guest sender")
        if not user and not guest:
            raise ValueError("message must have either a user or a guest sender")

        folded = {
            key: value
            for key, value in data.items()
            if key not in {"senderUser", "sender_user", "senderGuest", "sender_guest"}
        }
        if user:
            folded["sender"] = {"kind": SenderKind.USER.value, "user": user}
        else:
            folded["sender"] = {"kind": SenderKind.GUEST.value, "guest": guest}
        return folded

    @property
    def is_from_guest(self) -> bool:
        """Return ``True`` if a guest wrote this message."""
        return self.sender.kind == SenderKind.GUEST

    @property
    def sender_user_id(self) -> str | None:
        """Return the authoring user's id, or ``None`` for guest messages."""
        if isinstance(self.sender, UserSender):
            return self.sender.user.id
        return None


class Participant(ApiModel):
    """A registered user taking part in a conversation.

    ``last_read_at`` is the high-water mark up to which this participant has
    seen messages.  ``None`` means nothing has been read yet.
    """

    user: User
    last_read_at: Timestamp | None = None


class Conversation(ApiModel):
    """A thread between a store owner and a counterparty."""

    id: str
    updated_at: Timestamp | None = None
    participants: list[Participant] = Field(default_factory=list)
    messages: list[Message] = Field(default_factory=list)

    def participant_for(self, user_id: str | None) -> Participant | None:
        """Return the participant entry for *user_id*, if any."""
        if user_id is None:
            return None
        for participant in self.participants:
            if participant.user.id == user_id:
                return participant
        return None


class ConversationList(ApiModel):
    """Response of the conversation list endpoint."""

    viewer_user_id: str | None = None
    conversations: list[Conversation] = Field(default_factory=list)


class ConversationThread(ApiModel):
    """Response of the conversation messages endpoint."""

    viewer_user_id: str | None = None
    conversation: Conversation


class SentMessage(ApiModel):
    """Response of the send-message endpoints.

    ``guest_access_token`` is only issued when a guest starts a new
    conversation.
    """

    message: Message | None = None
    conversation_id: str | None = None
    guest_access_token: str | None = None


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class StoreRef(ApiModel):
    """The owning store as embedded in items and orders."""

    name: str
    slug: str | None = None
    id: str | None = None


class Store(ApiModel):
    """A seller's storefront."""

    id: str
    name: str
    slug: str
    description: str | None = None
    is_active: bool = True
    view_count: int | None = None
    primary_color: str | None = None
    banner_image: str | None = None
    logo_image: str | None = None
    website_url: str | None = None
    instagram_url: str | None = None
    twitter_url: str | None = None
    user: User | None = None


class ItemImage(ApiModel):
    """An item image; ``position`` orders the gallery."""

    url: str
    public_id: str | None = None
    id: str | None = None
    position: int = 0


class Item(ApiModel):
    """A listed item belonging to exactly one store."""

    id: str | None = None
    name: str
    description: str | None = None
    price: Money | None = None
    images: list[ItemImage] = Field(default_factory=list)
    is_active: bool = True
    created_at: Timestamp | None = None
    store: StoreRef | None = None

    def sorted_images(self) -> list[ItemImage]:
        """Return the images ordered by ``position``."""
        return sorted(self.images, key=lambda image: image.position)

    @property
    def cover_image_url(self) -> str | None:
        """Return the URL of the first image as stored, if any."""
        if not self.images:
            return None
        return self.images[0].url


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class PostalAddress(ApiModel):
    """A structured postal address as provided by the payments provider."""

    line1: str | None = None
    line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None


class ShippingAddress(ApiModel):
    """Shipping contact and address collected at checkout."""

    name: str | None = None
    phone: str | None = None
    address: PostalAddress | None = None


class Order(ApiModel):
    """A buyer's order for a single item.

    ``status`` is kept as the raw backend string so an unrecognized status
    never breaks parsing; compare it against ``OrderStatus`` values.
    """

    id: str
    amount: Money
    platform_fee: Money = Decimal("0")
    status: str
    buyer_email: str
    buyer_name: str | None = None
    item_id: str | None = None
    stripe_payment_id: str | None = None
    shipping_address: ShippingAddress | None = None
    refunded_at: Timestamp | None = None
    refund_amount: Money | None = None
    created_at: Timestamp
    item: Item

    @model_validator(mode="after")
    def refund_must_not_exceed_amount(self) -> "Order":
        """Ensure refund_amount does not exceed amount."""
        if self.refund_amount is not None and self.refund_amount > self.amount:
            raise ValueError(
                f"refund_amount ({self.refund_amount}) must not exceed amount ({self.amount})"
            )
        return self

    @property
    def seller_proceeds(self) -> Decimal:
        """Return the amount left to the seller after the platform fee."""
        return self.amount - self.platform_fee

    @property
    def known_status(self) -> OrderStatus | None:
        """Return the status as an ``OrderStatus``, or ``None`` if unrecognized."""
        try:
            return OrderStatus(self.status)
        except ValueError:
            return None

    @property
    def store_id(self) -> str | None:
        """Return the id of the store that owns the ordered item."""
        if self.item.store is None:
            return None
        return self.item.store.id


class RefundResult(ApiModel):
    """Response of the refund endpoint."""

    success: bool = True
    refund_id: str | None = None
    amount: Money | None = None
    status: str | None = None
    order: Order | None = None


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------


class CheckoutSession(ApiModel):
    """A hosted checkout session to redirect the buyer to."""

    url: str
    session_id: str | None = None


class SessionVerification(ApiModel):
    """Outcome of verifying a completed checkout session."""

    success: bool = False
    message: str | None = None
    order: Order | None = None


class PaymentIntent(ApiModel):
    """An embedded-checkout payment intent created by the backend."""

    client_secret: str
    payment_intent_id: str | None = None
    order_id: str | None = None


class ConnectStatus(ApiModel):
    """Seller onboarding status with the payments provider."""

    onboarding_complete: bool = False
    charges_enabled: bool | None = None
    payouts_enabled: bool | None = None


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class Notification(ApiModel):
    """A seller-facing notification (new order, new message, ...)."""

    id: str
    type: str
    title: str
    message: str
    read: bool = False
    created_at: Timestamp
