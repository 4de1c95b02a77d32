"""
Observability module for the Invoice Dashboard API.

Provides:
- Structured logging with JSON format and correlation IDs
- Request correlation ID (request_id) generation and propagation
- Prometheus metrics collection (HTTP, DB queries)
- Request tracking middleware for latency and status codes

Usage:
    from app.core.observability import (
        get_request_id,
        set_correlation_id,
        db_metrics,
        metrics,
    )
"""

import json
import logging
import time
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from fastapi import Request, Response
from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

# ============================================================================
# Context Variables for Request Tracking
# ============================================================================

# Correlation ID - links all logs for a single request
_request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")


def generate_request_id() -> str:
    """Generate a unique request ID for correlation."""
    return str(uuid.uuid4())


def get_request_id() -> str:
    """Get the current request ID from context."""
    return _request_id_ctx.get()


def set_correlation_id(request_id: str) -> None:
    """Set the correlation ID for the current request context."""
    _request_id_ctx.set(request_id)


# ============================================================================
# Structured Logging Configuration
# ============================================================================

# Attributes every LogRecord carries; anything else came from logging.extra
_RESERVED_RECORD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs as JSON with standard fields:
    - timestamp: ISO 8601 format
    - level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - logger: Logger name
    - message: Log message
    - request_id: Correlation ID (if available)
    - exception: Exception type and message (if present)
    - extra: Any additional context from logging.extra
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = get_request_id()
        if request_id:
            log_entry["request_id"] = request_id

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
            }

        log_entry["file"] = record.pathname
        log_entry["line"] = record.lineno
        log_entry["function"] = record.funcName

        extra_keys = {
            k: v for k, v in record.__dict__.items() if k not in _RESERVED_RECORD_ATTRS
        }
        if extra_keys:
            log_entry["extra"] = extra_keys

        return json.dumps(log_entry, default=str)


def configure_structured_logging(level: str = "INFO") -> None:
    """
    Configure root logger with structured JSON formatting.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    root_logger.addHandler(handler)


# ============================================================================
# Prometheus Metrics
# ============================================================================

# Use a custom registry to avoid conflicts with other Prometheus metrics
_registry = CollectorRegistry()


class Metrics:
    """
    Centralized metrics collection for the application.

    Metrics groups:
    - HTTP: Request rate, errors, latency
    - Database: Query timing and outcome per fetch operation
    """

    def __init__(self, registry: CollectorRegistry) -> None:
        self.registry = registry

        # -------------------------------------------------------------------
        # HTTP Metrics
        # -------------------------------------------------------------------

        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "route", "status_code"],
            registry=self.registry,
        )

        self.http_request_duration_seconds = Histogram(
            "http_request_duration_seconds",
            "HTTP request latency in seconds",
            ["method", "route"],
            buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
            registry=self.registry,
        )

        self.http_requests_in_progress = Gauge(
            "http_requests_in_progress",
            "HTTP requests currently in progress",
            ["method"],
            registry=self.registry,
        )

        self.http_errors_total = Counter(
            "http_errors_total",
            "Total HTTP errors",
            ["error_type", "method", "route"],
            registry=self.registry,
        )

        # -------------------------------------------------------------------
        # Database Metrics
        # -------------------------------------------------------------------

        self.db_query_duration_seconds = Histogram(
            "db_query_duration_seconds",
            "Database query duration in seconds",
            ["operation"],
            buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
            registry=self.registry,
        )

        self.db_queries_total = Counter(
            "db_queries_total",
            "Total database queries",
            ["operation", "status"],
            registry=self.registry,
        )


# Global metrics instance
metrics = Metrics(_registry)

# Route label for requests that matched no route
UNMATCHED_ROUTE = "__unmatched__"


# ============================================================================
# Middleware
# ============================================================================


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds observability to all requests.

    Features:
    - Generates and propagates request_id (correlation ID)
    - Logs all requests with structured fields
    - Tracks request latency
    - Records Prometheus metrics
    - Adds request_id to response headers
    """

    def __init__(
        self,
        app: ASGIApp,
        metrics_instance: Metrics | None = None,
        skip_paths: list[str] | None = None,
        request_id_header: str = "X-Request-ID",
    ) -> None:
        super().__init__(app)
        self.metrics = metrics_instance or metrics
        self.skip_paths = set(skip_paths or ["/api/v1/health", "/api/v1/readyz", "/metrics"])
        self.request_id_header = request_id_header

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.request_id_header) or generate_request_id()
        set_correlation_id(request_id)

        is_skipped_path = any(request.url.path.startswith(path) for path in self.skip_paths)

        self.metrics.http_requests_in_progress.labels(method=request.method).inc()

        start_time = time.time()
        logger = logging.getLogger("app.request")

        try:
            response = await call_next(request)

            latency_ms = (time.time() - start_time) * 1000
            route_pattern = _route_label(request)

            self.metrics.http_requests_total.labels(
                method=request.method,
                route=route_pattern,
                status_code=response.status_code,
            ).inc()
            self.metrics.http_request_duration_seconds.labels(
                method=request.method, route=route_pattern
            ).observe(latency_ms / 1000)

            response.headers[self.request_id_header] = request_id

            if not is_skipped_path:
                logger.info(
                    f"{request.method} {route_pattern}",
                    extra={
                        "method": request.method,
                        "route": route_pattern,
                        "status_code": response.status_code,
                        "latency_ms": round(latency_ms, 2),
                    },
                )

            return response

        except Exception as e:
            latency_ms = (time.time() - start_time) * 1000
            route_pattern = _route_label(request)

            error_type = type(e).__name__
            self.metrics.http_requests_total.labels(
                method=request.method,
                route=route_pattern,
                status_code=500,
            ).inc()
            self.metrics.http_errors_total.labels(
                error_type=error_type, method=request.method, route=route_pattern
            ).inc()
            self.metrics.http_request_duration_seconds.labels(
                method=request.method, route=route_pattern
            ).observe(latency_ms / 1000)

            logger.error(
                f"{request.method} {route_pattern} - {error_type}",
                extra={
                    "method": request.method,
                    "route": route_pattern,
                    "status_code": 500,
                    "latency_ms": round(latency_ms, 2),
                    "error_type": error_type,
                },
                exc_info=True,
            )
            raise

        finally:
            self.metrics.http_requests_in_progress.labels(method=request.method).dec()


def _route_label(request: Request) -> str:
    """
    Full route template for metric labels, e.g. "/api/v1/invoices/{invoice_id}".

    The router sets ``scope["route"]`` once a route matches. A route inside an
    included router may report its path relative to the router prefix, so the
    prefix is taken from the leading segments of the request path that the
    template does not cover.
    """
    route = request.scope.get("route")
    if route is None:
        return UNMATCHED_ROUTE

    template = [segment for segment in route.path.split("/") if segment]
    requested = [segment for segment in request.url.path.split("/") if segment]
    if len(template) > len(requested):
        return route.path

    prefix = requested[: len(requested) - len(template)]
    return "/" + "/".join(prefix + template)


# ============================================================================
# Database Metrics Helper
# ============================================================================


class DBMetricsWrapper:
    """
    Wrapper to track database query metrics.

    Usage in repos:
        with db_metrics.track("fetch_revenue"):
            result = await db.execute(stmt)
    """

    def __init__(self, metrics_instance: Metrics | None = None) -> None:
        self.metrics = metrics_instance or metrics

    @contextmanager
    def track(self, operation: str) -> Iterator[None]:
        """
        Record duration and outcome of a database operation.

        Args:
            operation: Name of the operation (e.g., "fetch_revenue")
        """
        start = time.time()
        status = "success"
        try:
            yield
        except Exception:
            status = "error"
            raise
        finally:
            duration = time.time() - start
            self.metrics.db_query_duration_seconds.labels(operation=operation).observe(duration)
            self.metrics.db_queries_total.labels(operation=operation, status=status).inc()


# Global DB metrics wrapper
db_metrics = DBMetricsWrapper()


# ============================================================================
# Metrics Endpoint
# ============================================================================


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format for scraping.
    """
    return Response(
        content=generate_latest(_registry),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )


def extract_request_context(request: Request) -> dict[str, Any]:
    """
    Extract observability context from request for logging.

    Args:
        request: FastAPI Request object

    Returns:
        Dictionary with request_id
    """
    return {"request_id": get_request_id()}
