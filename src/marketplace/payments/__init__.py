"""Payment events, reconciliation, and the provider webhook."""

from marketplace.payments.earnings import EarningsSummary, MonthlyEarnings, summarize_earnings
from marketplace.payments.models import (
    PartialFailure,
    PaymentEvent,
    ReconciliationResult,
    ReconciliationStep,
)
from marketplace.payments.reconciliation import (
    DEFAULT_PLATFORM_FEE_RATE,
    PaymentReconciler,
    calculate_platform_fee,
)

__all__ = [
    "DEFAULT_PLATFORM_FEE_RATE",
    "EarningsSummary",
    "MonthlyEarnings",
    "PartialFailure",
    "PaymentEvent",
    "PaymentReconciler",
    "ReconciliationResult",
    "ReconciliationStep",
    "calculate_platform_fee",
    "summarize_earnings",
]
