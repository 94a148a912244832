"""Tests for the payment webhook endpoint with HMAC-SHA256 verification.

Covers signature validation, event filtering, and the reconciliation flow
end to end against an in-memory store.
"""

from __future__ import annotations

import hashlib
import hmac
import json
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from marketplace.config import Settings
from marketplace.domain.models import Campaign, InfluencerProfile
from marketplace.domain.types import ApplicationStatus, CampaignStatus
from marketplace.http_errors import register_error_handlers
from marketplace.notifications.dispatcher import StoreNotifier
from marketplace.payments.reconciliation import PaymentReconciler
from marketplace.payments.webhook import router, verify_signature
from marketplace.store.store import MarketplaceStore

TEST_SECRET = "whsec-test-12345"


def _sign(body: bytes, secret: str = TEST_SECRET) -> str:
    """Compute HMAC-SHA256 hex digest for a request body."""
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def _checkout_payload(
    event_type: str = "checkout.session.completed",
    influencer_id: str = "inf-1",
    payment_status: str = "paid",
) -> dict[str, Any]:
    return {
        "type": event_type,
        "data": {
            "object": {
                "id": "cs_test_abc",
                "payment_status": payment_status,
                "amount_total": 50_000,
                "metadata": {
                    "campaignId": "camp-fashion",
                    "influencerId": influencer_id,
                    "brandId": "brand-1",
                },
            }
        },
    }


def _make_app(store: MarketplaceStore, secret: str = TEST_SECRET) -> FastAPI:
    app = FastAPI()
    app.include_router(router)
    register_error_handlers(app)
    app.state.settings = Settings(payment_webhook_secret=secret)  # type: ignore[call-arg]
    app.state.services = {"reconciler": PaymentReconciler(store, StoreNotifier(store))}
    return app


@pytest.fixture
def seeded(
    store: MarketplaceStore,
    fashion_campaign: Campaign,
    fashion_influencer: InfluencerProfile,
) -> MarketplaceStore:
    store.save_campaign(fashion_campaign)
    store.save_influencer(fashion_influencer)
    store.create_application("camp-fashion", "inf-1")
    return store


@pytest.fixture
def client(seeded: MarketplaceStore) -> TestClient:
    return TestClient(_make_app(seeded))


def _post(client: TestClient, payload: dict[str, Any], signature: str | None = None) -> Any:
    body = json.dumps(payload).encode()
    headers = {"Content-Type": "application/json"}
    headers["X-Signature"] = signature if signature is not None else _sign(body)
    return client.post("/webhooks/payments", content=body, headers=headers)


class TestVerifySignature:
    """Tests for the HMAC-SHA256 verify_signature function."""

    def test_valid_signature_passes(self) -> None:
        body = b'{"type": "checkout.session.completed"}'
        assert verify_signature(body, _sign(body), TEST_SECRET) is True

    def test_invalid_signature_fails(self) -> None:
        assert verify_signature(b"{}", "bad-signature", TEST_SECRET) is False

    def test_wrong_secret_fails(self) -> None:
        body = b"{}"
        assert verify_signature(body, _sign(body, "other"), TEST_SECRET) is False

    def test_signature_computed_on_raw_bytes(self) -> None:
        body = b'{"type":   "checkout.session.completed"}'
        sig = _sign(body)
        re_serialized = json.dumps(json.loads(body)).encode()
        assert verify_signature(body, sig, TEST_SECRET) is True
        assert verify_signature(re_serialized, sig, TEST_SECRET) is False


class TestWebhookAuthentication:
    def test_missing_signature_returns_401(self, client: TestClient) -> None:
        response = client.post("/webhooks/payments", content=b"{}")
        assert response.status_code == 401

    def test_invalid_signature_returns_401(
        self, client: TestClient, seeded: MarketplaceStore
    ) -> None:
        response = _post(client, _checkout_payload(), signature="0" * 64)

        assert response.status_code == 401
        application = seeded.get_application("camp-fashion", "inf-1")
        assert application is not None
        assert application.status == ApplicationStatus.PENDING

    def test_unconfigured_secret_returns_500(self, seeded: MarketplaceStore) -> None:
        client = TestClient(_make_app(seeded, secret=""))
        response = _post(client, _checkout_payload())
        assert response.status_code == 500

    def test_non_json_body_returns_400(self, client: TestClient) -> None:
        body = b"not json"
        response = client.post(
            "/webhooks/payments", content=body, headers={"X-Signature": _sign(body)}
        )
        assert response.status_code == 400


class TestWebhookFlow:
    def test_other_event_types_are_acknowledged(
        self, client: TestClient, seeded: MarketplaceStore
    ) -> None:
        response = _post(client, _checkout_payload(event_type="invoice.paid"))

        assert response.status_code == 200
        assert response.json() == {"received": True}
        application = seeded.get_application("camp-fashion", "inf-1")
        assert application is not None
        assert application.status == ApplicationStatus.PENDING

    def test_completed_checkout_is_reconciled(
        self, client: TestClient, seeded: MarketplaceStore
    ) -> None:
        response = _post(client, _checkout_payload())

        assert response.status_code == 200
        body = response.json()
        assert body["received"] is True
        assert body["payment_verified"] is True
        assert body["campaign_transitioned"] is True
        assert body["warnings"] == []

        campaign = seeded.get_campaign("camp-fashion")
        assert campaign is not None
        assert campaign.status == CampaignStatus.IN_PROGRESS

    def test_redelivery_reports_already_paid(self, client: TestClient) -> None:
        _post(client, _checkout_payload())
        response = _post(client, _checkout_payload())

        assert response.status_code == 200
        assert response.json()["already_paid"] is True
        assert response.json()["campaign_transitioned"] is False

    def test_unknown_application_returns_404(self, client: TestClient) -> None:
        response = _post(client, _checkout_payload(influencer_id="inf-ghost"))
        assert response.status_code == 404
        assert "not found" in response.json()["error"]

    def test_unpaid_session_returns_400(self, client: TestClient) -> None:
        response = _post(client, _checkout_payload(payment_status="unpaid"))
        assert response.status_code == 400

    def test_missing_metadata_returns_400(self, client: TestClient) -> None:
        payload = _checkout_payload()
        payload["data"]["object"]["metadata"] = {}
        response = _post(client, payload)
        assert response.status_code == 400
        assert "metadata" in response.json()["error"]


class TestMalformedCheckoutPayloads:
    def _post_raw(self, client: TestClient, payload: Any) -> Any:
        body = json.dumps(payload).encode()
        return client.post(
            "/webhooks/payments", content=body, headers={"X-Signature": _sign(body)}
        )

    @pytest.mark.parametrize(
        "payload",
        [
            [1, 2],
            "checkout.session.completed",
            {"type": "checkout.session.completed", "data": None},
            {"type": "checkout.session.completed"},
            {"type": "checkout.session.completed", "data": {"object": "cs_1"}},
            {"type": "checkout.session.completed", "data": {"object": None}},
            {
                "type": "checkout.session.completed",
                "data": {"object": {"id": "cs_1", "payment_status": "paid", "metadata": "oops"}},
            },
        ],
    )
    def test_wrong_shape_returns_400(
        self, client: TestClient, seeded: MarketplaceStore, payload: Any
    ) -> None:
        response = self._post_raw(client, payload)

        assert response.status_code == 400
        assert "error" in response.json()
        application = seeded.get_application("camp-fashion", "inf-1")
        assert application is not None
        assert application.status == ApplicationStatus.PENDING
