"""Liveness and readiness probes.

``GET /health`` answers as long as the process serves requests.
``GET /ready`` answers 200 only when the marketplace database responds and
the payment reconciler is wired; otherwise 503 with the failing checks.
"""

from __future__ import annotations

import asyncio
import sqlite3
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


async def _database_check(services: dict[str, Any]) -> str:
    db_conn: sqlite3.Connection | None = services.get("db_conn")
    if db_conn is None:
        return "fail"
    try:
        await asyncio.to_thread(db_conn.execute, "SELECT 1")
    except sqlite3.Error:
        return "fail"
    return "ok"


def register_health_routes(app: FastAPI) -> None:
    """Add ``/health`` and ``/ready`` to *app*."""

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy"}

    @app.get("/ready")
    async def ready(request: Request) -> JSONResponse:
        services: dict[str, Any] = request.app.state.services
        checks = {
            "database": await _database_check(services),
            "payments": "ok" if services.get("reconciler") is not None else "fail",
        }
        ok = all(result == "ok" for result in checks.values())
        return JSONResponse(
            content={"status": "ready" if ok else "not_ready", "checks": checks},
            status_code=200 if ok else 503,
        )
