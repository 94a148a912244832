"""Typed service configuration loaded with pydantic-settings.

Values come from environment variables, falling back to a local ``.env``
file.  ``get_settings()`` parses them once per process, and
``validate_credentials()`` is the startup check for secrets the payment
webhook cannot run without.

This module imports nothing from ``marketplace`` so every other module can
depend on it.
"""

from __future__ import annotations

import sys
from decimal import Decimal
from functools import lru_cache
from pathlib import Path

import structlog
from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()


class Settings(BaseSettings):
    """Marketplace service settings.

    Secrets are ``SecretStr`` so they render masked in reprs and logs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Service ---------------------------------------------------------------
    production: bool = False
    http_port: int = 8000

    # -- Storage ---------------------------------------------------------------
    db_path: Path = Path("data/marketplace.db")

    # -- Matching --------------------------------------------------------------
    default_min_score: int = Field(default=60, ge=0, le=100)

    # -- Payments --------------------------------------------------------------
    payment_webhook_secret: SecretStr = SecretStr("")
    platform_fee_rate: Decimal = Field(default=Decimal("0.10"), ge=0, lt=1)

    # -- Observability ---------------------------------------------------------
    sentry_dsn: str = ""


@lru_cache
def get_settings() -> Settings:
    """Load settings once and reuse them.

    Tests reset the cache with ``get_settings.cache_clear()``.  Invalid
    values stop the process with exit code 1.
    """
    try:
        return Settings()
    except ValidationError as exc:
        # exc.errors() carries field locations without echoing secret input
        logger.error("settings_validation_failed", errors=exc.errors())
        sys.exit(1)


def _missing_credentials(settings: Settings) -> list[str]:
    missing: list[str] = []
    if not settings.payment_webhook_secret.get_secret_value():
        missing.append("PAYMENT_WEBHOOK_SECRET is empty or not set")
    return missing


def validate_credentials(settings: Settings) -> None:
    """Check required secrets before the server starts.

    A production deployment with a missing secret prints the problems to
    stderr and exits with code 1.  Development logs one warning per
    missing secret and carries on, so the webhook answers 500 until the
    secret is configured.
    """
    missing = _missing_credentials(settings)
    if not missing:
        logger.info("credential_validation_passed")
        return

    if not settings.production:
        for detail in missing:
            logger.warning("credential_missing_dev", detail=detail)
        return

    for detail in missing:
        logger.error("credential_missing", detail=detail)
    lines = ["", "=== STARTUP FAILED ===", "Missing required credentials for production mode:"]
    lines += [f"  - {detail}" for detail in missing]
    lines += ["======================", ""]
    print("\n".join(lines), file=sys.stderr)
    sys.exit(1)
