"""Tests for the notification inbox endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from marketplace.domain.types import NotificationType
from marketplace.notifications.dispatcher import StoreNotifier

INFLUENCER = {"X-User-Id": "inf-1", "X-User-Role": "influencer"}


@pytest.fixture
def inbox(notifier: StoreNotifier) -> list[int]:
    return [
        notifier.notify("inf-1", "first", "m", notification_type=NotificationType.MESSAGE),
        notifier.notify(
            "inf-1",
            "second",
            "m",
            notification_type=NotificationType.PAYMENT,
            metadata={"campaign_id": "camp-1"},
        ),
        notifier.notify("inf-2", "not yours", "m", notification_type=NotificationType.MESSAGE),
    ]


class TestInbox:
    def test_requires_identity(self, client: TestClient) -> None:
        assert client.get("/notifications").status_code == 401

    def test_lists_only_callers_notifications(self, client: TestClient, inbox: list[int]) -> None:
        response = client.get("/notifications", headers=INFLUENCER)

        assert response.status_code == 200
        body = response.json()
        assert [n["title"] for n in body["notifications"]] == ["second", "first"]
        assert body["notifications"][0]["metadata"] == {"campaign_id": "camp-1"}
        assert body["unread_count"] == 2


class TestMarkRead:
    def test_marks_selected_ids(self, client: TestClient, inbox: list[int]) -> None:
        first_id = inbox[0]

        response = client.post("/notifications/read", json={"ids": [first_id]}, headers=INFLUENCER)

        assert response.json() == {"updated": 1}
        unread = client.get("/notifications?unread_only=true", headers=INFLUENCER).json()
        assert [n["title"] for n in unread["notifications"]] == ["second"]

    def test_marks_everything_without_body(self, client: TestClient, inbox: list[int]) -> None:
        response = client.post("/notifications/read", headers=INFLUENCER)

        assert response.json() == {"updated": 2}
        assert client.get("/notifications", headers=INFLUENCER).json()["unread_count"] == 0

    def test_other_users_ids_are_ignored(self, client: TestClient, inbox: list[int]) -> None:
        foreign_id = inbox[2]

        response = client.post(
            "/notifications/read", json={"ids": [foreign_id]}, headers=INFLUENCER
        )

        assert response.json() == {"updated": 0}
        other = client.get(
            "/notifications", headers={"X-User-Id": "inf-2", "X-User-Role": "influencer"}
        ).json()
        assert other["unread_count"] == 1
