"""FastAPI webhook endpoint for payment-provider checkout events.

Verifies the HMAC-SHA256 signature against the raw request body bytes BEFORE
JSON parsing.  Only ``checkout.session.completed`` events are reconciled;
every other event type is acknowledged and ignored.
"""

from __future__ import annotations

import asyncio
import hashlib
import hmac
import json
from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request

from marketplace.dependencies import get_reconciler
from marketplace.domain.errors import InvalidInputError
from marketplace.payments.models import PaymentEvent
from marketplace.payments.reconciliation import PaymentReconciler

logger = structlog.get_logger()

router = APIRouter()

CHECKOUT_COMPLETED = "checkout.session.completed"


def verify_signature(body: bytes, signature: str, secret: str) -> bool:
    """Verify HMAC-SHA256 signature of a webhook payload.

    Must be called with raw body bytes BEFORE any JSON parsing so the
    signature matches the exact bytes sent by the provider.

    Args:
        body: The raw request body bytes.
        signature: The HMAC-SHA256 hex digest from the X-Signature header.
        secret: The webhook signing secret from PAYMENT_WEBHOOK_SECRET.

    Returns:
        True if the computed signature matches the provided one.
    """
    computed = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(computed, signature)


@router.post("/webhooks/payments")
async def payment_webhook(
    request: Request,
    reconciler: PaymentReconciler = Depends(get_reconciler),
) -> dict[str, Any]:
    """Receive and reconcile payment-provider events.

    1. Read raw body bytes (before JSON parsing).
    2. Verify HMAC-SHA256 signature from X-Signature header.
    3. Parse JSON only after signature verification.
    4. Reconcile ``checkout.session.completed`` events.

    Returns:
        ``{"received": true}`` for ignored events, otherwise the
        reconciliation result.

    Raises:
        HTTPException: 401 if signature is missing or invalid, 400 if the
            body is not JSON.
        InvalidInputError: If the event payload is not shaped like a
            checkout event.
    """
    secret = request.app.state.settings.payment_webhook_secret.get_secret_value()
    if not secret:
        logger.error("PAYMENT_WEBHOOK_SECRET not configured")
        raise HTTPException(status_code=500, detail="Webhook secret not configured")

    raw_body = await request.body()

    signature = request.headers.get("X-Signature")
    if not signature:
        logger.warning("Missing X-Signature header in payment webhook request")
        raise HTTPException(status_code=401, detail="Missing signature")

    if not verify_signature(raw_body, signature, secret):
        logger.warning("Invalid payment webhook signature")
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        payload = json.loads(raw_body)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Body is not valid JSON") from None
    if not isinstance(payload, dict):
        raise InvalidInputError("Webhook payload must be a JSON object")

    event_type = payload.get("type")
    if event_type != CHECKOUT_COMPLETED:
        logger.info("Ignoring payment event", event_type=event_type)
        return {"received": True}

    data = payload.get("data")
    if not isinstance(data, dict):
        raise InvalidInputError("Checkout event is missing its data object")
    session = data.get("object")
    event = PaymentEvent.from_checkout_session(session)
    result = await asyncio.to_thread(reconciler.reconcile_payment, event)
    return {"received": True, **result.model_dump(mode="json")}
