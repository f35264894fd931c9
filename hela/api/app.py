"""FastAPI application entry point.

Configures the application with logging, exception handling, metrics,
health checks and the inventory routes.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from hela import __version__
from hela.api.dependencies import Services, build_services
from hela.api.routes import router
from hela.config import get_settings
from hela.exceptions import ErrorCode, HelaError
from hela.logging_config import get_logger, setup_logging
from hela.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
)

logger = get_logger(__name__)

_STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.RECORD_SHAPE_INVALID: 400,
    ErrorCode.RECORD_VALIDATION_FAILED: 400,
    ErrorCode.VISION_ERROR: 400,
    ErrorCode.RECORD_NOT_FOUND: 404,
    ErrorCode.GENERATION_RATE_LIMIT: 429,
    ErrorCode.GENERATION_TIMEOUT: 504,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Composes services on startup unless they were injected, and releases
    HTTP clients on shutdown.
    """
    settings = get_settings()
    setup_logging(level=settings.log_level)

    owns_services = getattr(app.state, "services", None) is None
    if owns_services:
        app.state.services = build_services(settings)

    logger.info(
        "Starting Hela inventory service",
        extra={
            "version": __version__,
            "environment": settings.environment.value,
            "tiers": app.state.services.classifier.tier_status(),
        },
    )

    yield

    if owns_services:
        await app.state.services.classifier.close()
    logger.info("Shutting down Hela inventory service")


def create_app(services: Services | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        services: Pre-built services. When omitted they are composed from
            settings at startup.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Hela Inventory",
        description="Photo inventory classification and natural-language search",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    if services is not None:
        app.state.services = services

    app.add_middleware(MetricsMiddleware)
    app.add_exception_handler(HelaError, hela_exception_handler)

    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/ready", readiness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/live", liveness_check, methods=["GET"], tags=["Health"])
    app.add_api_route(
        "/metrics",
        metrics_endpoint,
        methods=["GET"],
        tags=["Observability"],
        include_in_schema=False,
    )
    app.include_router(router)

    return app


async def hela_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Convert HelaError exceptions to structured JSON responses."""
    if not isinstance(exc, HelaError):
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": ErrorCode.INTERNAL_ERROR.value,
                    "message": str(exc),
                    "details": {},
                }
            },
        )

    logger.error(
        f"Request failed: {exc.message}",
        extra={
            "error_code": exc.code.value,
            "path": request.url.path,
            "details": exc.details,
        },
    )

    return JSONResponse(
        status_code=_STATUS_CODES.get(exc.code, 500),
        content=exc.to_dict(),
    )


async def health_check() -> dict[str, Any]:
    """Basic health check endpoint.

    Returns:
        Health status with version and timestamp.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def readiness_check(request: Request) -> dict[str, Any]:
    """Readiness probe.

    The service is ready once its services are composed. Generative tiers
    are reported but never block readiness, since the deterministic tier
    always answers.

    Returns:
        Readiness status with component checks.
    """
    services: Services | None = getattr(request.app.state, "services", None)
    checks: dict[str, str] = {
        "config": "ok",
        "store": "ok" if services is not None else "missing",
    }
    tiers = services.classifier.tier_status() if services is not None else {}

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
        "tiers": tiers,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def liveness_check() -> dict[str, str]:
    """Liveness probe.

    Returns:
        Liveness status.
    """
    return {"status": "alive"}


async def metrics_endpoint() -> Response:
    """Expose Prometheus metrics."""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


app = create_app()
