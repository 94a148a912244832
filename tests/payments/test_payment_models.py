"""Tests for PaymentEvent parsing and ReconciliationResult."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest

from marketplace.domain.errors import InvalidInputError
from marketplace.domain.types import PaymentStatus
from marketplace.payments.models import (
    PartialFailure,
    PaymentEvent,
    ReconciliationResult,
    ReconciliationStep,
)


def _session(**overrides: Any) -> dict[str, Any]:
    session: dict[str, Any] = {
        "id": "cs_test_123",
        "payment_status": "paid",
        "amount_total": 250_050,
        "metadata": {
            "campaignId": "camp-1",
            "influencerId": "inf-1",
            "brandId": "brand-1",
        },
    }
    session.update(overrides)
    return session


class TestFromCheckoutSession:
    def test_parses_metadata(self) -> None:
        event = PaymentEvent.from_checkout_session(_session())

        assert event.session_id == "cs_test_123"
        assert event.payment_status == PaymentStatus.PAID
        assert event.campaign_id == "camp-1"
        assert event.influencer_id == "inf-1"
        assert event.brand_id == "brand-1"
        assert event.is_paid

    def test_amount_converted_from_cents(self) -> None:
        event = PaymentEvent.from_checkout_session(_session())
        assert event.amount == Decimal("2500.50")

    def test_missing_amount_is_zero(self) -> None:
        event = PaymentEvent.from_checkout_session(_session(amount_total=None))
        assert event.amount == Decimal("0.00")

    def test_brand_is_optional(self) -> None:
        event = PaymentEvent.from_checkout_session(
            _session(metadata={"campaignId": "camp-1", "influencerId": "inf-1"})
        )
        assert event.brand_id is None

    def test_unpaid_session_parses_but_is_not_paid(self) -> None:
        event = PaymentEvent.from_checkout_session(_session(payment_status="unpaid"))
        assert not event.is_paid

    @pytest.mark.parametrize(
        "metadata",
        [None, {}, {"campaignId": "camp-1"}, {"influencerId": "inf-1"}],
    )
    def test_missing_metadata_is_invalid(self, metadata: dict[str, str] | None) -> None:
        with pytest.raises(InvalidInputError, match="metadata"):
            PaymentEvent.from_checkout_session(_session(metadata=metadata))

    def test_missing_session_id_is_invalid(self) -> None:
        with pytest.raises(InvalidInputError):
            PaymentEvent.from_checkout_session(_session(id=None))

    def test_unknown_payment_status_is_invalid(self) -> None:
        with pytest.raises(InvalidInputError, match="Malformed"):
            PaymentEvent.from_checkout_session(_session(payment_status="refunded"))

    @pytest.mark.parametrize("session", [None, "cs_1", ["cs_1"]])
    def test_non_object_session_is_invalid(self, session: Any) -> None:
        with pytest.raises(InvalidInputError, match="JSON object"):
            PaymentEvent.from_checkout_session(session)

    @pytest.mark.parametrize("metadata", ["oops", ["camp-1", "inf-1"], 7])
    def test_non_object_metadata_is_invalid(self, metadata: Any) -> None:
        with pytest.raises(InvalidInputError, match="metadata"):
            PaymentEvent.from_checkout_session(_session(metadata=metadata))


class TestReconciliationResult:
    def test_defaults(self) -> None:
        result = ReconciliationResult(session_id="cs", campaign_id="c", influencer_id="i")
        assert result.payment_verified is True
        assert result.fully_succeeded
        assert result.warnings == []

    def test_warnings_mark_partial_success(self) -> None:
        result = ReconciliationResult(
            session_id="cs",
            campaign_id="c",
            influencer_id="i",
            warnings=[PartialFailure(step=ReconciliationStep.NOTIFICATION, detail="down")],
        )
        assert not result.fully_succeeded
        dumped = result.model_dump(mode="json")
        assert dumped["warnings"] == [{"step": "notification", "detail": "down"}]
