"""Prometheus metrics instrumentation for the marketplace service.

Provides:
- ``setup_metrics(app)``: Attach prometheus-fastapi-instrumentator to a FastAPI app,
  exposing ``/metrics`` with HTTP request duration/count plus custom business counters.
- ``MATCH_REQUESTS``: Counter of match queries by direction.
- ``PAYMENTS_RECONCILED``: Counter of paid events reconciled against an application.
- ``RECONCILIATION_PARTIAL_FAILURES``: Counter of non-fatal reconciliation step failures.
- ``CAMPAIGNS_STARTED``: Counter of campaigns moved to ``in_progress`` by a payment.

Business metrics are updated where the events happen (not by polling the database).
"""

from __future__ import annotations

from fastapi import FastAPI
from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator

MATCH_REQUESTS: Counter = Counter(
    "marketplace_match_requests_total",
    "Number of match queries served",
    ["direction"],
)

PAYMENTS_RECONCILED: Counter = Counter(
    "marketplace_payments_reconciled_total",
    "Total paid checkout sessions reconciled against an application",
)

RECONCILIATION_PARTIAL_FAILURES: Counter = Counter(
    "marketplace_reconciliation_partial_failures_total",
    "Secondary reconciliation steps that failed without voiding the payment",
    ["step"],
)

CAMPAIGNS_STARTED: Counter = Counter(
    "marketplace_campaigns_started_total",
    "Campaigns moved to in_progress by their first paid application",
)


def setup_metrics(app: FastAPI) -> None:
    """Instrument *app* with Prometheus HTTP metrics and expose ``/metrics``.

    Excludes health/ready/metrics endpoints from instrumentation to avoid
    noise in dashboards.

    Args:
        app: The FastAPI application to instrument.
    """
    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        excluded_handlers=["/health", "/ready", "/metrics"],
    ).instrument(app).expose(app, include_in_schema=False, should_gzip=True)
