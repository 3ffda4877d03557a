"""
Sentry error tracking integration.

Provides error tracking and performance monitoring for the catalog API.
"""

import os
import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from .logging import get_logger, get_correlation_id

logger = get_logger(__name__)


def init_sentry() -> bool:
    """
    Initialize Sentry error tracking.

    Environment variables:
    - SENTRY_DSN: Sentry Data Source Name (required)
    - SENTRY_ENVIRONMENT: Environment name (development, staging, production)
    - SENTRY_RELEASE: Release version (e.g., git commit SHA)
    - SENTRY_TRACES_SAMPLE_RATE: Percentage of transactions to trace (0.0-1.0)
    - SENTRY_ENABLE: Set to "false" to disable Sentry (useful for local dev)

    Returns:
        True if Sentry was initialized
    """
    sentry_dsn = os.getenv("SENTRY_DSN")
    sentry_enable = os.getenv("SENTRY_ENABLE", "true").lower() == "true"

    if not sentry_dsn or not sentry_enable:
        logger.info("Sentry is disabled (SENTRY_DSN not set or SENTRY_ENABLE=false)")
        return False

    environment = os.getenv("SENTRY_ENVIRONMENT") or os.getenv("ENVIRONMENT", "development")
    release = os.getenv("SENTRY_RELEASE") or "unknown"

    is_production = environment == "production"
    traces_sample_rate = float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "1.0" if is_production else "0.1"))

    sentry_sdk.init(
        dsn=sentry_dsn,
        environment=environment,
        release=f"storefront-catalog-backend@{release}",
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR,
            ),
        ],
        traces_sample_rate=traces_sample_rate,
        send_default_pii=False,
        attach_stacktrace=True,
        max_breadcrumbs=50,
        before_send=before_send_hook,
    )

    logger.info(
        "Sentry initialized",
        extra={
            "environment": environment,
            "release": release,
            "traces_sample_rate": traces_sample_rate,
        },
    )
    return True


def before_send_hook(event, hint):
    """
    Filter and tag events before sending to Sentry.

    Category path errors are expected data problems already rendered as 422
    responses, so they are not reported.
    """
    exc_info = hint.get("exc_info") if hint else None
    if exc_info:
        from exceptions import CategoryPathError, ResourceNotFoundError

        if isinstance(exc_info[1], (CategoryPathError, ResourceNotFoundError)):
            return None

    if "exception" in event:
        for exc_value in event["exception"].get("values", []):
            if "client disconnected" in str(exc_value.get("value", "")).lower():
                return None

    correlation_id = get_correlation_id()
    if correlation_id:
        event.setdefault("tags", {})["correlation_id"] = correlation_id
        event.setdefault("extra", {})["correlation_id"] = correlation_id

    return event


def capture_exception(exc: Exception, **kwargs) -> None:
    """
    Capture an exception and send to Sentry with additional context.

    Args:
        exc: Exception to capture
        **kwargs: Additional context (tags, extra)
    """
    with sentry_sdk.new_scope() as scope:
        correlation_id = get_correlation_id()
        if correlation_id:
            scope.set_tag("correlation_id", correlation_id)

        for key, value in kwargs.get("tags", {}).items():
            scope.set_tag(key, value)

        for key, value in kwargs.get("extra", {}).items():
            scope.set_extra(key, value)

        sentry_sdk.capture_exception(exc)
