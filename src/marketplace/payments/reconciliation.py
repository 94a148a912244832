"""Align a confirmed external payment with application and campaign state.

Flow for a paid checkout session carrying (campaign_id, influencer_id):

1. Locate the application for the pair.  A missing application is a data
   integrity mismatch between payment metadata and our records: it is
   reported as ``NotFoundError`` and nothing is written.
2. Set the application to ``approved_and_paid``.  Replays are no-ops.
3. Move the campaign to ``in_progress`` with a single conditional write, so
   only the first paid application performs the transition.
4. Record the payment transaction (once per provider session).
5. Notify the influencer.

Steps 3-5 are secondary: their failures are logged and returned as
``PartialFailure`` warnings and never undo step 2.  Nothing is retried here.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

import structlog

from marketplace.domain.errors import InvalidInputError, NotFoundError
from marketplace.domain.types import ApplicationStatus, CampaignStatus, NotificationType
from marketplace.notifications.dispatcher import Notifier
from marketplace.observability.metrics import (
    CAMPAIGNS_STARTED,
    PAYMENTS_RECONCILED,
    RECONCILIATION_PARTIAL_FAILURES,
)
from marketplace.payments.models import (
    PartialFailure,
    PaymentEvent,
    ReconciliationResult,
    ReconciliationStep,
)
from marketplace.state_machine.transitions import PAYMENT_SETTLED_STATES
from marketplace.store.store import MarketplaceStore

logger = structlog.get_logger()

DEFAULT_PLATFORM_FEE_RATE = Decimal("0.10")
TWO_PLACES = Decimal("0.01")


def calculate_platform_fee(amount: Decimal, rate: Decimal = DEFAULT_PLATFORM_FEE_RATE) -> Decimal:
    """Return the platform's cut of *amount*, rounded half-up to cents."""
    return (amount * rate).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class PaymentReconciler:
    """Reconciles paid checkout sessions against marketplace records.

    Args:
        store: The marketplace store.
        notifier: Delivers the "payment received" notification.
        platform_fee_rate: Fraction of each payment kept as platform fee.
    """

    def __init__(
        self,
        store: MarketplaceStore,
        notifier: Notifier,
        platform_fee_rate: Decimal = DEFAULT_PLATFORM_FEE_RATE,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._platform_fee_rate = platform_fee_rate

    def reconcile_payment(self, event: PaymentEvent) -> ReconciliationResult:
        """Apply a paid payment event to the matching application and campaign.

        Args:
            event: The payment event from the provider.

        Returns:
            A ``ReconciliationResult`` with ``payment_verified=True`` and the
            outcome of every downstream step.

        Raises:
            InvalidInputError: If the event is not marked as paid.
            NotFoundError: If no application exists for the event's
                (campaign, influencer) pair.
        """
        log = logger.bind(
            session_id=event.session_id,
            campaign_id=event.campaign_id,
            influencer_id=event.influencer_id,
        )
        if not event.is_paid:
            raise InvalidInputError(
                f"Payment not completed (status '{event.payment_status}')"
            )

        application = self._store.get_application(event.campaign_id, event.influencer_id)
        if application is None:
            log.error("payment_application_missing")
            raise NotFoundError(
                "application", f"{event.campaign_id}/{event.influencer_id}"
            )

        result = ReconciliationResult(
            session_id=event.session_id,
            campaign_id=event.campaign_id,
            influencer_id=event.influencer_id,
        )

        self._mark_application_paid(event, application.status, result, log)
        self._start_campaign(event, result, log)
        self._record_transaction(event, result, log)
        self._notify_influencer(event, result, log)

        PAYMENTS_RECONCILED.inc()
        for warning in result.warnings:
            RECONCILIATION_PARTIAL_FAILURES.labels(step=warning.step.value).inc()

        log.info(
            "payment_reconciled",
            application_updated=result.application_updated,
            already_paid=result.already_paid,
            campaign_transitioned=result.campaign_transitioned,
            transaction_id=result.transaction_id,
            notification_sent=result.notification_sent,
            warnings=len(result.warnings),
        )
        return result

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _mark_application_paid(
        self,
        event: PaymentEvent,
        current: ApplicationStatus,
        result: ReconciliationResult,
        log: structlog.typing.FilteringBoundLogger,
    ) -> None:
        if current in PAYMENT_SETTLED_STATES:
            result.already_paid = True
            log.info("application_already_paid", status=current.value)
            return
        if current == ApplicationStatus.REJECTED:
            log.warning("payment_received_for_rejected_application")

        try:
            updated = self._store.mark_application_paid(event.campaign_id, event.influencer_id)
        except Exception as exc:
            log.exception("application_update_failed")
            result.warnings.append(
                PartialFailure(step=ReconciliationStep.APPLICATION, detail=str(exc))
            )
            return

        result.application_updated = updated
        # A concurrent confirmation may have settled the row first
        result.already_paid = not updated

    def _start_campaign(
        self,
        event: PaymentEvent,
        result: ReconciliationResult,
        log: structlog.typing.FilteringBoundLogger,
    ) -> None:
        try:
            transitioned = self._store.advance_campaign_status(
                event.campaign_id, CampaignStatus.IN_PROGRESS
            )
        except Exception as exc:
            log.exception("campaign_status_update_failed")
            result.warnings.append(
                PartialFailure(step=ReconciliationStep.CAMPAIGN_STATUS, detail=str(exc))
            )
            return

        result.campaign_transitioned = transitioned
        if transitioned:
            CAMPAIGNS_STARTED.inc()
            log.info("campaign_started")

    def _record_transaction(
        self,
        event: PaymentEvent,
        result: ReconciliationResult,
        log: structlog.typing.FilteringBoundLogger,
    ) -> None:
        amount = event.amount
        try:
            result.transaction_id = self._store.record_transaction(
                session_id=event.session_id,
                campaign_id=event.campaign_id,
                brand_id=event.brand_id,
                influencer_id=event.influencer_id,
                amount=amount,
                platform_fee=calculate_platform_fee(amount, self._platform_fee_rate),
            )
        except Exception as exc:
            log.exception("transaction_record_failed")
            result.warnings.append(
                PartialFailure(step=ReconciliationStep.TRANSACTION, detail=str(exc))
            )

    def _notify_influencer(
        self,
        event: PaymentEvent,
        result: ReconciliationResult,
        log: structlog.typing.FilteringBoundLogger,
    ) -> None:
        if result.already_paid:
            return
        try:
            campaign = self._store.get_campaign(event.campaign_id)
            title = campaign.title if campaign and campaign.title else event.campaign_id
            self._notifier.notify(
                event.influencer_id,
                "Payment received",
                f"Your application for '{title}' has been approved and paid.",
                notification_type=NotificationType.PAYMENT,
                metadata={
                    "campaign_id": event.campaign_id,
                    "session_id": event.session_id,
                },
            )
        except Exception as exc:
            log.exception("payment_notification_failed")
            result.warnings.append(
                PartialFailure(step=ReconciliationStep.NOTIFICATION, detail=str(exc))
            )
            return
        result.notification_sent = True
