"""Application entry point for the marketplace HTTP service.

Configures:
- **structlog** with JSON rendering (production) or colored console (development)
- **Sentry** error forwarding through the structlog processor chain
- **Services** (store, notifier, match finder, payment reconciler) built once
  per process and passed to route handlers via ``app.state.services``
- **Routers** for matches, applications, lifecycle sweeps, the payment
  webhook, payment history, and the notification inbox, plus health probes,
  request IDs, and Prometheus metrics
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from marketplace.campaigns.routes import router as campaigns_router
from marketplace.config import Settings, get_settings, validate_credentials
from marketplace.health import register_health_routes
from marketplace.http_errors import register_error_handlers
from marketplace.matching.finder import MatchFinder
from marketplace.matching.routes import router as matches_router
from marketplace.notifications.dispatcher import StoreNotifier
from marketplace.notifications.routes import router as notifications_router
from marketplace.observability.metrics import setup_metrics
from marketplace.observability.middleware import RequestIdMiddleware
from marketplace.observability.sentry import get_sentry_processor, init_sentry
from marketplace.payments.reconciliation import PaymentReconciler
from marketplace.payments.routes import router as payment_history_router
from marketplace.payments.webhook import router as payments_router
from marketplace.store.schema import close_marketplace_db, init_marketplace_db
from marketplace.store.store import MarketplaceStore

logger = structlog.get_logger()


def configure_logging(production: bool = False, sentry_enabled: bool = False) -> None:
    """Configure structlog for production (JSON) or development (console).

    Production mode (*production=True*): JSON rendering at INFO level.
    Development mode: colored console rendering at DEBUG level.

    Args:
        production: Enable production mode if ``True``.
        sentry_enabled: Forward ERROR-level events to Sentry if ``True``.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
    ]
    if sentry_enabled:
        shared_processors.append(get_sentry_processor())
    shared_processors += [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if production:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        log_level = logging.INFO
    else:
        renderer = structlog.dev.ConsoleRenderer()
        log_level = logging.DEBUG

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service="marketplace")


def initialize_services(settings: Settings | None = None) -> dict[str, Any]:
    """Set up all shared services for the application.

    Opens the marketplace database and builds the store, notifier, match
    finder, and payment reconciler on top of it.

    Args:
        settings: Application settings.  If ``None``, ``get_settings()`` is used.

    Returns:
        A dict of initialized service instances keyed by name.
    """
    if settings is None:
        settings = get_settings()

    services: dict[str, Any] = {"_settings": settings}

    db_path = settings.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    db_conn = init_marketplace_db(db_path)
    services["db_conn"] = db_conn

    store = MarketplaceStore(db_conn)
    services["store"] = store

    notifier = StoreNotifier(store)
    services["notifier"] = notifier

    services["match_finder"] = MatchFinder(store)
    services["reconciler"] = PaymentReconciler(
        store,
        notifier,
        platform_fee_rate=settings.platform_fee_rate,
    )

    logger.info("Services initialized", db_path=str(db_path))
    return services


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Lifespan context manager for FastAPI startup and shutdown.

    On shutdown: closes the marketplace database connection.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application.
    """
    logger.info("FastAPI application starting")
    yield
    db_conn = app.state.services.get("db_conn")
    if db_conn is not None:
        close_marketplace_db(db_conn)
        logger.info("Marketplace database connection closed")


def create_app(services: dict[str, Any], *, enable_metrics: bool = True) -> FastAPI:
    """Create the FastAPI app with lifespan, routers, and observability.

    Args:
        services: The initialized services dict from ``initialize_services``.
        enable_metrics: Expose Prometheus ``/metrics`` if ``True``.

    Returns:
        The configured FastAPI application.
    """
    fastapi_app = FastAPI(title="Influencer Marketplace", lifespan=lifespan)
    fastapi_app.state.services = services
    fastapi_app.state.settings = services.get("_settings") or get_settings()

    fastapi_app.add_middleware(RequestIdMiddleware)
    register_error_handlers(fastapi_app)
    register_health_routes(fastapi_app)
    fastapi_app.include_router(matches_router)
    fastapi_app.include_router(campaigns_router)
    fastapi_app.include_router(payments_router)
    fastapi_app.include_router(payment_history_router)
    fastapi_app.include_router(notifications_router)

    if enable_metrics:
        setup_metrics(fastapi_app)

    return fastapi_app


async def main() -> None:
    """Main entry point.

    1. Configure logging and Sentry
    2. Validate credentials
    3. Initialize services and create the FastAPI app
    4. Serve with uvicorn until shutdown
    """
    settings = get_settings()
    configure_logging(production=settings.production, sentry_enabled=bool(settings.sentry_dsn))
    init_sentry(
        settings.sentry_dsn,
        environment="production" if settings.production else "development",
    )
    logger.info("Application starting")

    validate_credentials(settings)

    services = initialize_services(settings)
    fastapi_app = create_app(services)

    config = uvicorn.Config(
        fastapi_app,
        host="0.0.0.0",
        port=settings.http_port,
        log_level="info",
    )
    server = uvicorn.Server(config)
    await server.serve()


def run() -> None:
    """Console-script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
