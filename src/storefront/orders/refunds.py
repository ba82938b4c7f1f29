"""Refund validation and submission.

``validate_refund_amount`` is a client-side pre-check only.  The backend is
the authority: it may still reject a refund the client considered valid (for
example, an order fully refunded from another tab since it was loaded), and it
alone decides whether the order ends up ``refunded`` or
``partially_refunded``.  After a successful refund, callers re-fetch the order
list rather than patching the order locally.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

import structlog
from pydantic import BaseModel, ConfigDict, field_validator

from storefront.api.client import ApiClient
from storefront.domain.errors import RefundError, ValidationError
from storefront.domain.models import Order, RefundResult

logger = structlog.get_logger()

TWO_PLACES = Decimal("0.01")


def _parse_amount(requested: object) -> Decimal:
    if isinstance(requested, bool):
        raise ValidationError("Enter a valid refund amount.")
    if isinstance(requested, float):
        requested = str(requested)
    if isinstance(requested, str):
        requested = requested.strip()
    try:
        return Decimal(requested)  # type: ignore[arg-type]
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError("Enter a valid refund amount.") from exc


def validate_refund_amount(requested: object, order: Order) -> Decimal:
    """Check a requested refund amount against *order*.

    Args:
        requested: The amount as typed by the seller (string, number or
            Decimal).
        order: The order being refunded.

    Returns:
        The amount as a Decimal.

    Raises:
        ValidationError: If the amount is not a finite positive number, or
            exceeds the order amount.
    """
    amount = _parse_amount(requested)
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Enter a valid refund amount.")
    if amount > order.amount:
        raise ValidationError(f"Refund amount can't exceed ${order.amount:,.2f}.")
    return amount


def default_refund_amount(order: Order) -> str:
    """Return the prefilled refund amount: the full order amount, in cents."""
    return str(order.amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


class RefundRequest(BaseModel):
    """A refund to submit for one order."""

    model_config = ConfigDict(frozen=True)

    order_id: str
    amount: Decimal
    reason: str = ""
    refund_platform_fee: bool = True

    @field_validator("amount", mode="before")
    @classmethod
    def reject_float_inputs(cls, v: object) -> object:
        """Reject float inputs for the refund amount to prevent precision errors."""
        if isinstance(v, float):
            raise ValueError("Use Decimal or string, not float, for monetary values")
        return v

    def to_payload(self) -> dict[str, object]:
        """Return the JSON body expected by the refund endpoint."""
        return {
            "orderId": self.order_id,
            "amount": float(self.amount),
            "reason": self.reason,
            "refundPlatformFee": self.refund_platform_fee,
        }


class RefundService:
    """Submit refunds through the payments refund endpoint.

    Args:
        api: The shared ``ApiClient``.
    """

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def submit_refund(self, token: str | None, request: RefundRequest) -> RefundResult:
        """Post *request* to the refund endpoint.

        Raises:
            AuthError: If *token* is missing.
            RefundError: If the backend rejects the refund; the backend's
                message is surfaced verbatim when it sends one.
        """
        logger.info(
            "refund_submitting",
            order_id=request.order_id,
            amount=str(request.amount),
            refund_platform_fee=request.refund_platform_fee,
        )
        data = await self._api.request(
            "POST",
            "/stripe/refund",
            token=token,
            require_auth=True,
            json=request.to_payload(),
            fallback="Failed to process refund",
            error_cls=RefundError,
        )
        result = RefundResult.model_validate(data or {})
        logger.info("refund_submitted", order_id=request.order_id, status=result.status)
        return result

    async def refund_order(
        self,
        token: str | None,
        order: Order,
        amount: object,
        reason: str = "",
        refund_platform_fee: bool = True,
    ) -> RefundResult:
        """Validate *amount* against *order* and submit the refund."""
        validated = validate_refund_amount(amount, order)
        request = RefundRequest(
            order_id=order.id,
            amount=validated,
            reason=reason,
            refund_platform_fee=refund_platform_fee,
        )
        return await self.submit_refund(token, request)
