"""Map domain exceptions onto JSON HTTP error responses.

Every failure is scoped to the request that raised it; the handlers only
choose the status code and log at a level matching the cause.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from marketplace.domain.errors import (
    InvalidInputError,
    InvalidTransitionError,
    MarketplaceError,
    NotFoundError,
    StoreError,
    UnauthorizedError,
)

logger = structlog.get_logger()

STATUS_CODES: dict[type[MarketplaceError], int] = {
    NotFoundError: 404,
    InvalidInputError: 400,
    UnauthorizedError: 403,
    InvalidTransitionError: 409,
    StoreError: 409,
}


def status_code_for(exc: MarketplaceError) -> int:
    """Return the HTTP status for *exc*, walking its class hierarchy."""
    for cls in type(exc).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return 500


def register_error_handlers(app: FastAPI) -> None:
    """Register the ``MarketplaceError`` handler on *app*.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
        code = status_code_for(exc)
        if code >= 500:
            logger.error("request_failed", path=request.url.path, error=str(exc))
        else:
            logger.info(
                "request_rejected",
                path=request.url.path,
                status_code=code,
                error=str(exc),
            )
        return JSONResponse(status_code=code, content={"error": str(exc)})
