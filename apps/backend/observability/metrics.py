"""
Prometheus metrics collection for the Storefront Catalog backend.

Provides RED metrics (Rate, Errors, Duration) for HTTP plus category
resolution and catalog-source metrics.
"""

from prometheus_client import (
    Counter,
    Histogram,
    Gauge,
    REGISTRY,
)

# Use the default registry
metrics_registry = REGISTRY

# HTTP Metrics (RED - Rate, Errors, Duration)
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=metrics_registry,
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
    registry=metrics_registry,
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests in progress",
    ["method", "endpoint"],
    registry=metrics_registry,
)

# Category Resolution Metrics
category_resolutions_total = Counter(
    "category_resolutions_total",
    "Category slug resolutions by outcome",
    ["outcome"],  # found, not_found
    registry=metrics_registry,
)

category_resolver_cache_total = Counter(
    "category_resolver_cache_total",
    "Category resolver cache lookups",
    ["result"],  # hit, miss
    registry=metrics_registry,
)

category_resolver_cache_size = Gauge(
    "category_resolver_cache_size",
    "Current number of memoized category resolutions",
    registry=metrics_registry,
)

# Catalog Source Metrics
category_tree_fetch_total = Counter(
    "category_tree_fetch_total",
    "Category tree fetches",
    ["source", "status"],  # status: ok, cached, stale, error
    registry=metrics_registry,
)

category_tree_fetch_duration_seconds = Histogram(
    "category_tree_fetch_duration_seconds",
    "Remote category tree fetch duration in seconds",
    ["source"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
    registry=metrics_registry,
)
