import logging
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes.customers import router as customers_router
from app.api.routes.dashboard import router as dashboard_router
from app.api.routes.health import router as health_router
from app.api.routes.invoices import router as invoices_router
from app.api.routes.monitoring import router as monitoring_router
from app.core.config import AppEnvironment, settings
from app.core.db import reset_async_engine
from app.core.errors import InvoiceDashboardError, get_status_code
from app.core.observability import (
    ObservabilityMiddleware,
    configure_structured_logging,
    extract_request_context,
)

# Configure structured logging before creating logger
if settings.observability_structured_logs:
    configure_structured_logging(settings.app_log_level)

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

_SENSITIVE_PATTERNS = [
    r"[/\\][\w/-]+\.py",  # File paths
    r"SELECT.*FROM",  # SQL queries
    r"INSERT INTO.*VALUES",
    r"UPDATE.*SET",
    r"DELETE FROM",
    r"table\s*[:=]\s*\w+",  # Table references
]


def _sanitize_error_details(details: dict[str, Any]) -> dict[str, Any]:
    """
    Sanitize error details to prevent information leakage in production.

    Redacts string values that look like file paths, SQL statements or
    table references. Non-production environments get details unchanged.

    Args:
        details: Original error details dictionary

    Returns:
        Sanitized details dictionary
    """
    if settings.app_env != AppEnvironment.PROD:
        return details

    sanitized: dict[str, Any] = {}
    for key, value in details.items():
        if isinstance(value, str):
            if any(re.search(p, value, re.IGNORECASE) for p in _SENSITIVE_PATTERNS):
                sanitized[key] = "[REDACTED]"
            else:
                sanitized[key] = value
        elif isinstance(value, dict):
            sanitized[key] = _sanitize_error_details(value)
        elif isinstance(value, list):
            sanitized[key] = [
                _sanitize_error_details(item) if isinstance(item, dict) else item for item in value
            ]
        else:
            sanitized[key] = value

    return sanitized


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Starting %s", settings.app_name, extra={"app_env": settings.app_env.value})
    yield
    await reset_async_engine()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Sets up:
    - Structured logging with correlation IDs
    - Observability middleware (metrics, request tracking)
    - CORS middleware
    - Exception handlers for domain errors
    - API routers
    - Metrics endpoint for Prometheus scraping
    """
    app = FastAPI(
        title="Invoice Dashboard API",
        description="Read-only dashboard, invoice and customer queries for the invoicing app",
        version="0.1.0",
        lifespan=lifespan,
    )

    # ============================================================================
    # Middleware
    # ============================================================================

    if settings.observability_enabled:
        app.add_middleware(
            ObservabilityMiddleware,
            request_id_header=settings.observability_request_id_header,
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # ============================================================================
    # Exception Handlers
    # ============================================================================

    @app.exception_handler(InvoiceDashboardError)
    async def domain_error_handler(request: Request, exc: InvoiceDashboardError) -> JSONResponse:
        """
        Map domain errors to HTTP status codes and a structured body.

        DataFetchError carries only its fixed message; the storage error was
        already logged by the repository layer.
        """
        status_code = get_status_code(exc)

        context = {
            "details": exc.details,
            "path": request.url.path,
            **extract_request_context(request),
        }

        if status_code >= 500:
            logger.error(f"{exc.__class__.__name__}: {exc.message}", extra=context)
        else:
            logger.warning(f"{exc.__class__.__name__}: {exc.message}", extra=context)

        return JSONResponse(
            status_code=status_code,
            content={
                "error": exc.__class__.__name__,
                "message": exc.message,
                "details": _sanitize_error_details(exc.details),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        """Consistent error body for FastAPI HTTP exceptions."""
        if exc.status_code >= 500:
            logger.error(
                f"HTTP {exc.status_code}: {exc.detail}",
                extra={"path": request.url.path, **extract_request_context(request)},
            )

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "HTTPException",
                "message": exc.detail,
                "details": {},
            },
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Catch-all handler for unexpected exceptions.

        Logs the full exception and returns a generic 500 error to the client
        without exposing internal implementation details.
        """
        logger.error(
            f"Unhandled exception: {exc}",
            exc_info=True,
            extra={"path": request.url.path, **extract_request_context(request)},
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "InternalServerError",
                "message": "An unexpected error occurred",
                "details": {},
            },
        )

    # ============================================================================
    # Router Registration
    # ============================================================================

    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(dashboard_router, prefix=API_PREFIX)
    app.include_router(invoices_router, prefix=API_PREFIX)
    app.include_router(customers_router, prefix=API_PREFIX)

    if settings.observability_enabled:
        app.include_router(monitoring_router)

    return app


app = create_app()
