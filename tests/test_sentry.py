"""Tests for Sentry SDK initialization and structlog-sentry bridge."""

from __future__ import annotations

from unittest.mock import patch

from marketplace.observability.sentry import get_sentry_processor, init_sentry, scrub_event


def test_init_sentry_noop_with_empty_dsn() -> None:
    """init_sentry('') does not raise and does not call sentry_sdk.init."""
    with patch("marketplace.observability.sentry.sentry_sdk.init") as mock_init:
        init_sentry("")
        mock_init.assert_not_called()


def test_init_sentry_calls_sdk_with_dsn() -> None:
    """init_sentry with a DSN calls sentry_sdk.init with correct parameters."""
    test_dsn = "https://examplePublicKey@o0.ingest.sentry.io/0"
    with patch("marketplace.observability.sentry.sentry_sdk.init") as mock_init:
        init_sentry(test_dsn, environment="production")
        mock_init.assert_called_once()
        call_kwargs = mock_init.call_args.kwargs
        assert call_kwargs["dsn"] == test_dsn
        assert call_kwargs["environment"] == "production"
        assert call_kwargs["send_default_pii"] is False
        assert call_kwargs["traces_sample_rate"] == 0.1
        assert call_kwargs["before_send"] is scrub_event


def test_get_sentry_processor_returns_callable() -> None:
    """get_sentry_processor() returns a callable (SentryProcessor instance)."""
    assert callable(get_sentry_processor())


def test_scrub_event_filters_sensitive_headers() -> None:
    event = {
        "request": {
            "headers": {
                "X-Signature": "abc",
                "X-User-Id": "inf-1",
                "Content-Type": "application/json",
            }
        }
    }

    scrubbed = scrub_event(event, {})

    headers = scrubbed["request"]["headers"]
    assert headers["X-Signature"] == "[Filtered]"
    assert headers["X-User-Id"] == "[Filtered]"
    assert headers["Content-Type"] == "application/json"


def test_scrub_event_without_request() -> None:
    assert scrub_event({"message": "boom"}, {}) == {"message": "boom"}
