"""HTTP endpoints exposing a caller's payment history.

Both endpoints are scoped to the authenticated caller; there is no way to
read another user's transactions through them.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from marketplace.auth.access import get_caller
from marketplace.dependencies import get_store
from marketplace.domain.models import Caller
from marketplace.payments.earnings import summarize_earnings, transactions_for
from marketplace.store.store import MarketplaceStore

router = APIRouter()


@router.get("/payments/transactions")
def list_payment_transactions(
    caller: Caller = Depends(get_caller),
    store: MarketplaceStore = Depends(get_store),
) -> dict[str, Any]:
    """Return every transaction the caller paid or received, newest first."""
    return {"transactions": store.list_transactions(caller.user_id)}


@router.get("/payments/earnings")
def get_earnings(
    caller: Caller = Depends(get_caller),
    store: MarketplaceStore = Depends(get_store),
) -> dict[str, Any]:
    """Return the caller's transactions on their role's side and a summary.

    Influencers get what they earned; brands (and admins) get what they spent.
    """
    transactions = transactions_for(caller, store.list_transactions(caller.user_id))
    return {
        "transactions": transactions,
        "stats": summarize_earnings(transactions).model_dump(mode="json"),
    }
