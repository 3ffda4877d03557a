"""
Storefront Catalog Backend
Category browsing API with health checks, metrics and CORS
"""
import os
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env", override=False)

from catalog.sources import CategoryTreeSource  # noqa: E402
from dependencies import get_source  # noqa: E402
from exceptions import StorefrontError  # noqa: E402
from observability import get_logger, get_correlation_id, metrics_registry  # noqa: E402
from observability.health import check_category_source, run_health_checks  # noqa: E402
from observability.middleware import ObservabilityMiddleware  # noqa: E402
from observability.sentry_config import capture_exception, init_sentry  # noqa: E402
from routes.categories import router as categories_router  # noqa: E402

logger = get_logger(__name__)

APP_VERSION = "0.1.0"

app = FastAPI(
    title="Storefront Catalog Backend",
    description="Category tree resolution, search facets and breadcrumbs for the storefront",
    version=APP_VERSION,
)

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "DELETE"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)

app.include_router(categories_router)


class HealthResponse(BaseModel):
    status: str
    version: str


@app.get("/health", response_model=HealthResponse)
async def health_check():
    return {
        "status": "healthy",
        "version": APP_VERSION,
    }


@app.get("/health/ready")
async def readiness_check(source: CategoryTreeSource = Depends(get_source)):
    """
    Readiness check - verifies the category source is available.

    Returns 503 if it is not.
    """
    result = await check_category_source(source)
    checks = {"category_source": "ok" if result.is_healthy else f"error: {(result.error or '')[:100]}"}
    all_ok = all(v == "ok" for v in checks.values())

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={
            "status": "ready" if all_ok else "degraded",
            "checks": checks,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    )


@app.get("/health/detailed")
async def detailed_health_check(source: CategoryTreeSource = Depends(get_source)):
    report = await run_health_checks(source)
    return JSONResponse(status_code=200 if report["status"] != "unhealthy" else 503, content=report)


@app.get("/metrics")
async def metrics():
    return Response(content=generate_latest(metrics_registry), media_type=CONTENT_TYPE_LATEST)


@app.exception_handler(StorefrontError)
async def storefront_exception_handler(request: Request, exc: StorefrontError):
    """Render application errors with their suggested status code."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"{exc.__class__.__name__}: {exc.message}",
        extra={
            "path": str(request.url.path),
            "method": request.method,
            "status_code": exc.status_code,
            "error_detail": exc.detail,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unhandled errors.

    - Logs full traceback
    - Reports to Sentry (no-op when disabled)
    - Returns safe error message to client
    """
    error_id = f"ERR-{datetime.now(timezone.utc).strftime('%Y%m%d%H%M%S')}-{id(exc)}"

    logger.error(
        f"[ERROR {error_id}] Unhandled exception",
        extra={"path": str(request.url.path), "method": request.method, "error_type": type(exc).__name__},
        exc_info=exc,
    )
    capture_exception(exc, tags={"error_id": error_id}, extra={"path": str(request.url.path)})

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "error_id": error_id,
            "correlation_id": get_correlation_id(),
            "message": "An unexpected error occurred. Please try again.",
        }
    )


@app.on_event("startup")
async def startup_event():
    """Run on application startup"""
    init_sentry()
    logger.info(
        "FastAPI application starting",
        extra={
            "environment": os.getenv("ENVIRONMENT", "development"),
            "category_source": os.getenv("CATEGORY_SOURCE", "static"),
        },
    )


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown"""
    logger.info("FastAPI application shutting down")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=False)
