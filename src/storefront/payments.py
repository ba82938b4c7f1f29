"""Checkout, payment intent and seller onboarding endpoints.

Buyers check out without a session credential; Connect onboarding calls are
made on behalf of the signed-in seller.  Payment capture itself happens with
the payments provider and is out of scope here.
"""

from __future__ import annotations

import uuid
from typing import Any
from urllib.parse import quote

import structlog

from storefront.api.client import ApiClient
from storefront.domain.errors import NetworkError, ValidationError
from storefront.domain.models import (
    CheckoutSession,
    ConnectStatus,
    PaymentIntent,
    SessionVerification,
)

logger = structlog.get_logger()


def new_idempotency_key() -> str:
    """Return a fresh key for one payment intent creation attempt."""
    return str(uuid.uuid4())


def _segment(value: str) -> str:
    return quote(value, safe="")


class PaymentsService:
    """Client for the ``/stripe`` family of backend endpoints.

    Args:
        api: The shared ``ApiClient``.
    """

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def create_checkout_session(self, item_id: str, buyer_email: str) -> CheckoutSession:
        """Start a hosted checkout for *item_id* and return its redirect URL."""
        if not buyer_email.strip():
            raise ValidationError("Buyer email is required")
        data = await self._api.request(
            "POST",
            "/stripe/checkout",
            json={"itemId": item_id, "buyerEmail": buyer_email.strip()},
            fallback="Failed to create checkout session",
        )
        session = CheckoutSession.model_validate(data or {})
        logger.info("checkout_session_created", item_id=item_id, session_id=session.session_id)
        return session

    async def verify_session(self, session_id: str) -> SessionVerification:
        """Verify a completed checkout session after the buyer is redirected back."""
        data = await self._api.request(
            "GET",
            f"/stripe/verify-session/{_segment(session_id)}",
            fallback="Failed to verify session",
        )
        verification = SessionVerification.model_validate(data or {})
        if not verification.success:
            logger.warning("checkout_session_unverified", session_id=session_id, detail=verification.message)
        return verification

    async def create_payment_intent(
        self,
        item_id: str,
        buyer_email: str | None = None,
        idempotency_key: str | None = None,
    ) -> PaymentIntent:
        """Create a payment intent for an embedded checkout.

        Reusing the same *idempotency_key* for a retried attempt lets the
        backend return the intent it already created instead of a second one.
        A new key is generated when none is given.
        """
        payload: dict[str, Any] = {
            "itemId": item_id,
            "idempotencyKey": idempotency_key or new_idempotency_key(),
        }
        if buyer_email:
            payload["buyerEmail"] = buyer_email
        data = await self._api.request(
            "POST",
            "/stripe/payment-intent",
            json=payload,
            fallback="Failed to start checkout.",
        )
        intent = PaymentIntent.model_validate(data or {})
        logger.info(
            "payment_intent_created",
            item_id=item_id,
            payment_intent_id=intent.payment_intent_id,
            order_id=intent.order_id,
        )
        return intent

    async def sync_payment_intent(self, payment_intent_id: str) -> SessionVerification:
        """Ask the backend to reconcile an intent's order with the provider."""
        data = await self._api.request(
            "POST",
            f"/stripe/payment-intent/{_segment(payment_intent_id)}/sync",
            fallback="Failed to sync payment",
        )
        return SessionVerification.model_validate(data or {})

    async def update_payment_intent_email(self, payment_intent_id: str, buyer_email: str) -> None:
        """Attach the buyer's email to an existing payment intent."""
        if not buyer_email.strip():
            raise ValidationError("Buyer email is required")
        await self._api.request(
            "PATCH",
            f"/stripe/payment-intent/{_segment(payment_intent_id)}/email",
            json={"buyerEmail": buyer_email.strip()},
            fallback="Failed to update email",
        )

    # -- Seller onboarding -----------------------------------------------------

    async def create_account_session(self, token: str | None) -> str:
        """Return the client secret for an embedded onboarding session."""
        data = await self._api.request(
            "POST",
            "/stripe/connect/account-session",
            token=token,
            require_auth=True,
            fallback="Failed to create account session",
        )
        secret = data.get("clientSecret") if isinstance(data, dict) else None
        if not secret:
            raise NetworkError("Failed to create account session")
        return str(secret)

    async def get_connect_status(self, token: str | None) -> ConnectStatus:
        """Return whether the seller has finished payments onboarding."""
        data = await self._api.request(
            "GET",
            "/stripe/connect/status",
            token=token,
            require_auth=True,
            fallback="Failed to fetch payments status",
        )
        return ConnectStatus.model_validate(data or {})
