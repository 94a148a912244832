"""Tests for the caller-scoped payment history endpoints."""

from __future__ import annotations

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from marketplace.store.store import MarketplaceStore

INFLUENCER = {"X-User-Id": "inf-1", "X-User-Role": "influencer"}
BRAND = {"X-User-Id": "brand-1", "X-User-Role": "brand"}
OTHER_BRAND = {"X-User-Id": "brand-2", "X-User-Role": "brand"}


@pytest.fixture(autouse=True)
def transactions(store: MarketplaceStore) -> MarketplaceStore:
    store.record_transaction(
        session_id="cs_1",
        campaign_id="camp-1",
        brand_id="brand-1",
        influencer_id="inf-1",
        amount=Decimal("200.00"),
        platform_fee=Decimal("20.00"),
    )
    store.record_transaction(
        session_id="cs_2",
        campaign_id="camp-2",
        brand_id="brand-2",
        influencer_id="inf-1",
        amount=Decimal("100.00"),
        platform_fee=Decimal("10.00"),
    )
    return store


class TestTransactionsEndpoint:
    def test_requires_identity(self, client: TestClient) -> None:
        assert client.get("/payments/transactions").status_code == 401

    def test_influencer_sees_all_received(self, client: TestClient) -> None:
        response = client.get("/payments/transactions", headers=INFLUENCER)

        assert response.status_code == 200
        sessions = {t["session_id"] for t in response.json()["transactions"]}
        assert sessions == {"cs_1", "cs_2"}

    def test_brand_sees_only_its_payments(self, client: TestClient) -> None:
        response = client.get("/payments/transactions", headers=BRAND)

        [txn] = response.json()["transactions"]
        assert txn["session_id"] == "cs_1"
        assert txn["amount"] == "200.00"


class TestEarningsEndpoint:
    def test_influencer_earnings(self, client: TestClient) -> None:
        response = client.get("/payments/earnings", headers=INFLUENCER)

        assert response.status_code == 200
        stats = response.json()["stats"]
        assert Decimal(stats["total"]) == Decimal("300.00")
        assert Decimal(stats["fees"]) == Decimal("30.00")
        assert Decimal(stats["net"]) == Decimal("270.00")
        assert stats["transaction_count"] == 2
        assert stats["unique_campaign_count"] == 2

    def test_brand_spend(self, client: TestClient) -> None:
        response = client.get("/payments/earnings", headers=OTHER_BRAND)

        body = response.json()
        assert [t["session_id"] for t in body["transactions"]] == ["cs_2"]
        assert Decimal(body["stats"]["total"]) == Decimal("100.00")

    def test_no_history(self, client: TestClient) -> None:
        response = client.get(
            "/payments/earnings", headers={"X-User-Id": "inf-9", "X-User-Role": "influencer"}
        )

        body = response.json()
        assert body["transactions"] == []
        assert body["stats"]["transaction_count"] == 0
        assert body["stats"]["monthly"] == []
