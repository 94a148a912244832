"""Earnings and spend summaries over a user's payment transactions.

Influencers see what they earned, brands see what they spent; both views are
computed from the same ``payment_transactions`` rows, keyed on whichever side
of the transaction the user is on.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict

from marketplace.domain.models import Caller
from marketplace.domain.types import UserRole

COMPLETED = "completed"

_CENTS = Decimal("0.01")


class MonthlyEarnings(BaseModel):
    """Net amount and transaction count for one ``YYYY-MM`` month."""

    model_config = ConfigDict(frozen=True)

    month: str
    total: Decimal
    count: int


class EarningsSummary(BaseModel):
    """Totals over a user's completed transactions.

    ``net`` is the gross amount minus platform fees.  All amounts are in
    major currency units.
    """

    model_config = ConfigDict(frozen=True)

    total: Decimal = Decimal("0.00")
    fees: Decimal = Decimal("0.00")
    net: Decimal = Decimal("0.00")
    avg_per_transaction: Decimal = Decimal("0.00")
    transaction_count: int = 0
    unique_campaign_count: int = 0
    monthly: list[MonthlyEarnings] = []


def party_field(caller: Caller) -> str:
    """Return the transaction column that identifies *caller*'s side."""
    return "influencer_id" if caller.role == UserRole.INFLUENCER else "brand_id"


def transactions_for(caller: Caller, transactions: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Keep the rows where *caller* is on their own role's side."""
    field = party_field(caller)
    return [t for t in transactions if t.get(field) == caller.user_id]


def summarize_earnings(transactions: list[dict[str, Any]]) -> EarningsSummary:
    """Summarize the completed rows of *transactions*.

    Rows in any other status are ignored.  Months are listed oldest first.
    """
    completed = [t for t in transactions if t.get("status") == COMPLETED]
    if not completed:
        return EarningsSummary()

    total = sum((Decimal(t["amount"]) for t in completed), Decimal("0"))
    fees = sum((Decimal(t["platform_fee"]) for t in completed), Decimal("0"))

    by_month: dict[str, list[Decimal]] = defaultdict(list)
    for t in completed:
        by_month[t["created_at"][:7]].append(Decimal(t["amount"]) - Decimal(t["platform_fee"]))

    return EarningsSummary(
        total=total.quantize(_CENTS),
        fees=fees.quantize(_CENTS),
        net=(total - fees).quantize(_CENTS),
        avg_per_transaction=(total / len(completed)).quantize(_CENTS),
        transaction_count=len(completed),
        unique_campaign_count=len({t["campaign_id"] for t in completed}),
        monthly=[
            MonthlyEarnings(
                month=month,
                total=sum(amounts, Decimal("0")).quantize(_CENTS),
                count=len(amounts),
            )
            for month, amounts in sorted(by_month.items())
        ],
    )
