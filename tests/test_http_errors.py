"""Tests for mapping domain exceptions onto HTTP responses."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from marketplace.domain.errors import (
    InvalidInputError,
    InvalidTransitionError,
    MarketplaceError,
    NotFoundError,
    StoreError,
    UnauthorizedError,
)
from marketplace.domain.types import ApplicationStatus
from marketplace.http_errors import register_error_handlers, status_code_for


class _Unmapped(MarketplaceError):
    pass


class _MoreSpecificNotFound(NotFoundError):
    pass


@pytest.mark.parametrize(
    ("exc", "code"),
    [
        (NotFoundError("campaign", "c1"), 404),
        (InvalidInputError("bad"), 400),
        (UnauthorizedError("no"), 403),
        (InvalidTransitionError(ApplicationStatus.REJECTED, "approve"), 409),
        (StoreError("duplicate"), 409),
        (_MoreSpecificNotFound("campaign", "c1"), 404),
        (_Unmapped("?"), 500),
    ],
)
def test_status_code_for(exc: MarketplaceError, code: int) -> None:
    assert status_code_for(exc) == code


def test_handler_returns_json_error() -> None:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/boom")
    async def boom() -> None:
        raise NotFoundError("campaign", "c1")

    response = TestClient(app).get("/boom")

    assert response.status_code == 404
    assert response.json() == {"error": "campaign 'c1' not found"}
