# =============================================================================
# Sentry Error Tracking Integration
# =============================================================================
#
# Setup:
#   1. Create account at sentry.io
#   2. Create a Python project
#   3. Copy DSN to .env: SENTRY_DSN=https://...@sentry.io/...
#
# Usage:
#   Call init_sentry() at app startup (in i18nmate/api/app.py)
#
# =============================================================================

import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from i18nmate.config import get_settings
from i18nmate.core.errors import ApiError

logger = logging.getLogger(__name__)

# Expected client errors are not worth an alert
IGNORED_STATUS_CODES = (400, 401, 403, 404, 405, 409, 422)


def init_sentry() -> bool:
    """
    Initialize Sentry error tracking.

    Returns True if initialized, False if skipped.
    """
    settings = get_settings()

    if not settings.sentry_dsn:
        logger.info("SENTRY_DSN not set - error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,

        # Performance monitoring (sample 10% of transactions in prod)
        traces_sample_rate=0.1 if settings.is_production else 1.0,

        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            StarletteIntegration(transaction_style="endpoint"),
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR,
            ),
        ],

        # Don't send PII by default
        send_default_pii=False,

        before_send=_filter_events,
        before_send_transaction=_filter_transactions,
    )

    logger.info(f"Sentry initialized for {settings.environment}")
    return True


def _filter_events(event: dict, hint: dict) -> dict | None:
    """Filter out noisy or sensitive events."""
    if "exc_info" in hint:
        _, exc_value, _ = hint["exc_info"]

        # Don't report validation, auth, not-found and conflict errors
        if isinstance(exc_value, ApiError) and exc_value.code in IGNORED_STATUS_CODES:
            return None

    # Scrub sensitive data from request
    if "request" in event:
        request = event["request"]
        if "headers" in request:
            headers = request["headers"]
            for key in list(headers.keys()):
                if key.lower() in ("authorization", "cookie", "x-api-key"):
                    headers[key] = "[Filtered]"

    return event


def _filter_transactions(event: dict, hint: dict) -> dict | None:
    """Filter out noisy transactions."""
    transaction = event.get("transaction", "")

    if transaction in ("/health", "/healthz", "/ready"):
        return None

    return event


def capture_exception(error: Exception, **context) -> str | None:
    """
    Capture an exception to Sentry.

    Returns the event ID if captured, None otherwise.
    """
    if not sentry_sdk.get_client().is_active():
        logger.error("Error (Sentry disabled)", exc_info=error)
        return None

    with sentry_sdk.new_scope() as scope:
        for key, value in context.items():
            scope.set_extra(key, value)
        return sentry_sdk.capture_exception(error)


def set_user(user_id: str) -> None:
    """Set the current user context for error reports."""
    if sentry_sdk.get_client().is_active():
        sentry_sdk.set_user({"id": user_id})
