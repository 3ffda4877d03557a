"""
Logging for the catalog backend.

Every record carries the request's correlation id. Category context passed
through ``extra`` (slug, category_id, facet_field, ...) is rendered as
top-level keys in JSON output and as ``key=value`` pairs in text output, so a
resolution can be followed across the "Request started", "Category resolved"
and "Request completed" lines.

Usage:
    from observability import get_logger

    logger = get_logger(__name__)
    logger.info("Category resolved", extra={"slug": "men/mens-apparel", "category_id": "2"})
"""

import logging
import os
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "storefront-catalog-backend"

# Extra keys promoted into the rendered line, in this order
CATEGORY_LOG_FIELDS = ("slug", "category_id", "facet_field", "source", "status_code", "duration_seconds")

REDACTED = "[REDACTED]"

_correlation_id_ctx: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
_configured = False


def get_correlation_id() -> Optional[str]:
    return _correlation_id_ctx.get()


@contextmanager
def correlation_id_context(correlation_id: Optional[str] = None) -> Iterator[str]:
    """Bind a correlation id (generated when not given) for the enclosed block."""
    value = correlation_id or f"req-{uuid.uuid4().hex[:16]}"
    token = _correlation_id_ctx.set(value)
    try:
        yield value
    finally:
        _correlation_id_ctx.reset(token)


def _category_context(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        field: getattr(record, field)
        for field in CATEGORY_LOG_FIELDS
        if getattr(record, field, None) is not None
    }


class RedactionFilter(logging.Filter):
    """Masks credentials that end up in log extras or dict-style args."""

    SENSITIVE_KEYS = frozenset({
        "api_key", "catalog_api_key", "authorization", "token", "secret", "password", "sentry_dsn",
    })

    def filter(self, record: logging.LogRecord) -> bool:
        for key in [k for k in vars(record) if k.lower() in self.SENSITIVE_KEYS]:
            setattr(record, key, REDACTED)
        if isinstance(record.args, dict):
            record.args = self.redact(record.args)
        return True

    def redact(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                key: REDACTED if str(key).lower() in self.SENSITIVE_KEYS else self.redact(item)
                for key, item in value.items()
            }
        if isinstance(value, (list, tuple)):
            return [self.redact(item) for item in value]
        return value


class CatalogJsonFormatter(jsonlogger.JsonFormatter):
    """One JSON object per line: message, level, logger, service, correlation id and category context."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["@timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["service"] = SERVICE_NAME
        log_record["environment"] = os.getenv("ENVIRONMENT", "development")
        log_record["correlation_id"] = get_correlation_id() or "none"
        log_record.update(_category_context(record))
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


class CatalogTextFormatter(logging.Formatter):
    """Human-readable lines for local development."""

    def __init__(self) -> None:
        super().__init__(
            "%(asctime)s | %(levelname)-8s | %(correlation_id)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        record.correlation_id = get_correlation_id() or "none"
        line = super().format(record)
        context = _category_context(record)
        if context:
            line += " | " + " ".join(f"{key}={value}" for key, value in context.items())
        return line


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> logging.Handler:
    """
    Install the catalog handler on the root logger, replacing existing handlers.

    LOG_LEVEL and LOG_FORMAT (json/text) are read when not passed; the format
    defaults to json when ENVIRONMENT=production.
    """
    global _configured

    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if log_format is None:
        log_format = os.getenv("LOG_FORMAT", "json" if os.getenv("ENVIRONMENT") == "production" else "text")

    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(CatalogJsonFormatter("%(message)s"))
    else:
        handler.setFormatter(CatalogTextFormatter())
    handler.addFilter(RedactionFilter())

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _configured = True
    return handler


def get_logger(name: str) -> logging.Logger:
    """Module logger; configures the root handler on first use."""
    if not _configured:
        configure_logging()
    return logging.getLogger(name)
