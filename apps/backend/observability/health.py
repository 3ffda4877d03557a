"""
Health check utilities for dependency monitoring.

Provides detailed health checks for:
- Category tree source (static data or remote catalog service)
- System resources (memory, disk)
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import Dict, Any, Optional

import psutil

from .logging import get_logger

logger = get_logger(__name__)


class HealthCheckResult:
    """Result of a health check."""

    def __init__(self, name: str, status: str, details: Optional[Dict[str, Any]] = None, error: Optional[str] = None):
        self.name = name
        self.status = status  # "ok", "degraded", "error"
        self.details = details or {}
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "status": self.status,
            "details": self.details,
        }
        if self.error:
            result["error"] = self.error
        return result

    @property
    def is_healthy(self) -> bool:
        return self.status == "ok"


async def check_category_source(source, timeout: float = 5.0) -> HealthCheckResult:
    """
    Check that the category source can be reached.

    Args:
        source: CategoryTreeSource in use
        timeout: Timeout in seconds

    Returns:
        HealthCheckResult with category source status
    """
    start_time = time.time()

    try:
        healthy = await asyncio.wait_for(source.health_check(), timeout=timeout)
        latency = time.time() - start_time

        details = {
            "source": source.name,
            "latency_ms": round(latency * 1000, 2),
            "cache": source.cache_stats(),
        }
        if healthy:
            return HealthCheckResult(name="category_source", status="ok", details=details)
        return HealthCheckResult(
            name="category_source",
            status="error",
            details=details,
            error="Category source unreachable",
        )

    except asyncio.TimeoutError:
        return HealthCheckResult(
            name="category_source",
            status="error",
            error=f"Category source timeout after {timeout}s",
        )

    except Exception as e:
        logger.error("Category source health check failed", exc_info=True)
        return HealthCheckResult(
            name="category_source",
            status="error",
            error=str(e)[:200],
        )


async def check_system_resources() -> HealthCheckResult:
    """
    Check system resources (memory, disk).

    Returns:
        HealthCheckResult with system resource status
    """
    try:
        memory = psutil.virtual_memory()
        memory_percent = memory.percent

        disk = psutil.disk_usage("/")
        disk_percent = disk.percent

        status = "ok"
        warnings = []

        if memory_percent > 95:
            status = "error"
            warnings.append(f"Critical memory usage: {memory_percent}%")
        elif memory_percent > 90:
            status = "degraded"
            warnings.append(f"High memory usage: {memory_percent}%")

        if disk_percent > 95:
            status = "error"
            warnings.append(f"Critical disk usage: {disk_percent}%")
        elif disk_percent > 85:
            if status == "ok":
                status = "degraded"
            warnings.append(f"High disk usage: {disk_percent}%")

        return HealthCheckResult(
            name="system_resources",
            status=status,
            details={
                "memory_percent": round(memory_percent, 1),
                "memory_available_mb": round(memory.available / (1024 * 1024), 1),
                "disk_percent": round(disk_percent, 1),
                "disk_free_gb": round(disk.free / (1024 * 1024 * 1024), 1),
                "warnings": warnings if warnings else None,
            },
        )

    except Exception as e:
        logger.error("System resource check failed", exc_info=True)
        return HealthCheckResult(
            name="system_resources",
            status="error",
            error=str(e)[:200],
        )


async def run_health_checks(source) -> Dict[str, Any]:
    """
    Run all health checks and return aggregated results.

    Args:
        source: CategoryTreeSource in use

    Returns:
        Dictionary with health check results
    """
    checks = {
        "category_source": await check_category_source(source),
        "system_resources": await check_system_resources(),
    }

    statuses = [check.status for check in checks.values()]
    if any(status == "error" for status in statuses):
        overall_status = "unhealthy"
    elif any(status == "degraded" for status in statuses):
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    return {
        "status": overall_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {name: check.to_dict() for name, check in checks.items()},
    }
