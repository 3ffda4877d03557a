"""
Observability infrastructure for the Storefront Catalog backend.

Provides:
- Structured logging with correlation IDs
- Sentry error tracking
- Prometheus metrics
- Health check utilities
"""

from .logging import get_logger, correlation_id_context, get_correlation_id
from .metrics import (
    metrics_registry,
    http_requests_total,
    http_request_duration_seconds,
    http_requests_in_progress,
    category_resolutions_total,
    category_resolver_cache_total,
    category_resolver_cache_size,
    category_tree_fetch_total,
    category_tree_fetch_duration_seconds,
)

__all__ = [
    "get_logger",
    "correlation_id_context",
    "get_correlation_id",
    "metrics_registry",
    "http_requests_total",
    "http_request_duration_seconds",
    "http_requests_in_progress",
    "category_resolutions_total",
    "category_resolver_cache_total",
    "category_resolver_cache_size",
    "category_tree_fetch_total",
    "category_tree_fetch_duration_seconds",
]
