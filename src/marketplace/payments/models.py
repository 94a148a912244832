"""Pydantic v2 models for payment events and reconciliation outcomes."""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from marketplace.domain.errors import InvalidInputError
from marketplace.domain.types import PaymentStatus


class PaymentEvent(BaseModel):
    """A completed checkout session reported by the payment provider.

    Consumed once by the reconciliation flow; never persisted here.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str
    payment_status: PaymentStatus
    campaign_id: str
    influencer_id: str
    brand_id: str | None = None
    amount_total: int | None = Field(default=None, description="Amount in minor units (cents)")

    @field_validator("session_id", "campaign_id", "influencer_id")
    @classmethod
    def ids_must_not_be_empty(cls, v: str) -> str:
        """Ensure identifiers are not empty or whitespace-only."""
        if not v.strip():
            raise ValueError("identifier must not be empty")
        return v

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    @property
    def amount(self) -> Decimal:
        """The paid amount in major currency units (zero when not reported)."""
        if self.amount_total is None:
            return Decimal("0.00")
        return (Decimal(self.amount_total) / 100).quantize(Decimal("0.01"))

    @classmethod
    def from_checkout_session(cls, session: Any) -> PaymentEvent:
        """Build an event from a provider checkout-session object.

        The session carries ``campaignId`` / ``influencerId`` / ``brandId`` in
        its ``metadata`` map, as set when the checkout was created.

        Raises:
            InvalidInputError: If the session is not an object, or lacks an ID,
                a status, or the campaign/influencer metadata.
        """
        if not isinstance(session, dict):
            raise InvalidInputError("Checkout session must be a JSON object")
        metadata = session.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise InvalidInputError("Checkout session metadata must be a JSON object")
        campaign_id = metadata.get("campaignId")
        influencer_id = metadata.get("influencerId")
        if not campaign_id or not influencer_id:
            raise InvalidInputError(
                "Missing campaign or influencer information in session metadata"
            )
        if not session.get("id") or not session.get("payment_status"):
            raise InvalidInputError("Checkout session is missing its id or payment_status")
        try:
            return cls(
                session_id=session["id"],
                payment_status=session["payment_status"],
                campaign_id=campaign_id,
                influencer_id=influencer_id,
                brand_id=metadata.get("brandId"),
                amount_total=session.get("amount_total"),
            )
        except ValueError as exc:
            raise InvalidInputError(f"Malformed checkout session: {exc}") from exc


class ReconciliationStep(StrEnum):
    """Secondary steps whose failure does not void a confirmed payment."""

    APPLICATION = "application"
    CAMPAIGN_STATUS = "campaign_status"
    TRANSACTION = "transaction"
    NOTIFICATION = "notification"


class PartialFailure(BaseModel):
    """A non-fatal failure of one reconciliation step."""

    model_config = ConfigDict(frozen=True)

    step: ReconciliationStep
    detail: str


class ReconciliationResult(BaseModel):
    """Outcome of reconciling a payment event.

    ``payment_verified`` is True whenever the provider reported the session as
    paid; the remaining fields describe what happened downstream.
    """

    payment_verified: bool = True
    session_id: str
    campaign_id: str
    influencer_id: str
    application_updated: bool = False
    already_paid: bool = False
    campaign_transitioned: bool = False
    transaction_id: int | None = None
    notification_sent: bool = False
    warnings: list[PartialFailure] = Field(default_factory=list)

    @property
    def fully_succeeded(self) -> bool:
        return not self.warnings
