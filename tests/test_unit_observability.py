"""
Unit tests for observability features.

Tests cover:
- Structured logging with JSON format
- Request correlation ID (request_id) generation and propagation
- Prometheus metrics collection
- Request tracking middleware
- Metrics endpoint
- DB query metrics
"""

import json
import logging
import re
import sys
import time
from types import SimpleNamespace

import pytest
from fastapi import APIRouter, FastAPI, Request
from fastapi.testclient import TestClient
from prometheus_client import generate_latest

from app.core.observability import (
    UNMATCHED_ROUTE,
    ObservabilityMiddleware,
    StructuredFormatter,
    _route_label,
    configure_structured_logging,
    db_metrics,
    extract_request_context,
    generate_request_id,
    get_request_id,
    metrics,
    metrics_endpoint,
    set_correlation_id,
)


def _record(msg: str = "Test message", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname="/test/path.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def _metrics_text() -> str:
    return generate_latest(metrics.registry).decode("utf-8")


class TestRequestIdGeneration:
    """Tests for request ID generation and context management."""

    def test_generate_request_id_returns_uuid_format(self):
        request_id = generate_request_id()
        uuid_pattern = re.compile(
            r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
            re.IGNORECASE,
        )
        assert uuid_pattern.match(request_id)

    def test_generate_request_id_is_unique(self):
        assert generate_request_id() != generate_request_id()

    def test_request_id_context(self):
        set_correlation_id("request-1")
        assert get_request_id() == "request-1"

        set_correlation_id("request-2")
        assert get_request_id() == "request-2"

        set_correlation_id("")


class TestStructuredLogging:
    """Tests for structured JSON logging."""

    def test_structured_formatter_outputs_json(self):
        parsed = json.loads(StructuredFormatter().format(_record()))

        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "test.logger"
        assert parsed["message"] == "Test message"
        assert parsed["line"] == 42

    def test_structured_formatter_includes_timestamp(self):
        parsed = json.loads(StructuredFormatter().format(_record()))

        # ISO 8601 format in UTC
        assert parsed["timestamp"].endswith("+00:00")

    def test_structured_formatter_includes_request_id(self):
        set_correlation_id("req-123")
        try:
            parsed = json.loads(StructuredFormatter().format(_record()))
        finally:
            set_correlation_id("")

        assert parsed["request_id"] == "req-123"

    def test_structured_formatter_omits_empty_request_id(self):
        set_correlation_id("")

        parsed = json.loads(StructuredFormatter().format(_record()))

        assert "request_id" not in parsed

    def test_structured_formatter_includes_extra_fields(self):
        record = _record(operation="fetch_revenue", status_code=200)

        parsed = json.loads(StructuredFormatter().format(record))

        assert parsed["extra"]["operation"] == "fetch_revenue"
        assert parsed["extra"]["status_code"] == 200

    def test_structured_formatter_includes_exception(self):
        try:
            raise RuntimeError("connection refused")
        except RuntimeError:
            record = _record()
            record.exc_info = sys.exc_info()

        parsed = json.loads(StructuredFormatter().format(record))

        assert parsed["exception"] == {"type": "RuntimeError", "message": "connection refused"}

    def test_configure_structured_logging(self):
        root_logger = logging.getLogger()
        saved_handlers = root_logger.handlers[:]
        saved_level = root_logger.level
        try:
            configure_structured_logging("DEBUG")

            assert root_logger.level == logging.DEBUG
            assert len(root_logger.handlers) == 1
            assert isinstance(root_logger.handlers[0].formatter, StructuredFormatter)
        finally:
            root_logger.handlers[:] = saved_handlers
            root_logger.setLevel(saved_level)


class TestObservabilityMiddleware:
    """Tests for ObservabilityMiddleware."""

    def _app(self, **middleware_kwargs) -> FastAPI:
        app = FastAPI()
        app.add_middleware(ObservabilityMiddleware, **middleware_kwargs)

        @app.get("/test")
        async def test_route():
            return {"request_id": get_request_id()}

        return app

    def test_middleware_generates_request_id(self):
        response = TestClient(self._app()).get("/test")

        assert response.status_code == 200
        request_id = response.json()["request_id"]
        assert request_id
        assert response.headers["X-Request-ID"] == request_id

    def test_middleware_propagates_request_id_from_header(self):
        provided_id = "custom-request-id-123"

        response = TestClient(self._app()).get("/test", headers={"X-Request-ID": provided_id})

        assert response.json()["request_id"] == provided_id
        assert response.headers["X-Request-ID"] == provided_id

    def test_middleware_uses_configured_header(self):
        client = TestClient(self._app(request_id_header="X-Correlation-ID"))

        response = client.get("/test", headers={"X-Correlation-ID": "corr-1"})

        assert response.json()["request_id"] == "corr-1"
        assert response.headers["X-Correlation-ID"] == "corr-1"

    def test_middleware_records_http_metrics(self):
        TestClient(self._app()).get("/test")

        output = _metrics_text()
        assert "http_requests_total{" in output
        assert 'method="GET"' in output
        assert 'route="/test"' in output
        assert 'status_code="200"' in output

    def test_middleware_uses_route_template_for_path_params(self):
        app = FastAPI()
        app.add_middleware(ObservabilityMiddleware)

        @app.get("/invoices/{invoice_id}")
        async def get_invoice(invoice_id: str):
            return {"invoice_id": invoice_id}

        response = TestClient(app).get("/invoices/d6e15727-9fe1-4961-8c5b-ea44a9bd81aa")
        assert response.status_code == 200

        output = _metrics_text()
        assert 'route="/invoices/{invoice_id}"' in output
        assert 'route="/invoices/d6e15727-9fe1-4961-8c5b-ea44a9bd81aa"' not in output

    def test_middleware_labels_included_routers_with_full_prefix(self):
        router = APIRouter(prefix="/invoices")

        @router.get("/{invoice_id}")
        async def get_invoice(invoice_id: str):
            return {"invoice_id": invoice_id}

        app = FastAPI()
        app.add_middleware(ObservabilityMiddleware)
        app.include_router(router, prefix="/api/v1")

        response = TestClient(app).get("/api/v1/invoices/cc27c14a-0acf-4f4a-a6c9-d45682c144b9")
        assert response.status_code == 200

        assert 'route="/api/v1/invoices/{invoice_id}"' in _metrics_text()

    def test_middleware_uses_unmatched_label_for_404s(self):
        response = TestClient(self._app()).get("/does-not-exist/12345")
        assert response.status_code == 404

        output = _metrics_text()
        assert f'route="{UNMATCHED_ROUTE}"' in output
        assert 'route="/does-not-exist/12345"' not in output

    def test_middleware_skips_logging_for_health_endpoints(self, caplog):
        app = FastAPI()
        app.add_middleware(ObservabilityMiddleware, skip_paths=["/health"])

        @app.get("/health")
        def health():
            return {"ok": True}

        @app.get("/api")
        def api_route():
            return {"ok": True}

        client = TestClient(app)
        with caplog.at_level(logging.INFO, logger="app.request"):
            client.get("/health")
            client.get("/api")

        messages = [r.getMessage() for r in caplog.records if r.name == "app.request"]
        assert messages == ["GET /api"]


class TestMetricsEndpoint:
    """Tests for the Prometheus exposition helper."""

    def test_metrics_endpoint_returns_prometheus_format(self):
        response = metrics_endpoint()

        assert response.media_type.startswith("text/plain")
        assert "version=0.0.4" in response.media_type
        assert b"# HELP" in response.body

    def test_metrics_include_db_and_http_families(self):
        body = metrics_endpoint().body.decode("utf-8")

        assert "http_requests_total" in body
        assert "db_query_duration_seconds" in body
        assert "db_queries_total" in body


class TestDBMetricsWrapper:
    """Tests for DBMetricsWrapper."""

    def test_db_metrics_wrapper_tracks_duration(self):
        with db_metrics.track("test_query"):
            time.sleep(0.01)

        count = metrics.registry.get_sample_value(
            "db_query_duration_seconds_count", {"operation": "test_query"}
        )
        total = metrics.registry.get_sample_value(
            "db_query_duration_seconds_sum", {"operation": "test_query"}
        )
        assert count >= 1
        assert total > 0

    def test_db_metrics_wrapper_tracks_success(self):
        with db_metrics.track("success_query"):
            pass

        output = _metrics_text()
        assert 'operation="success_query"' in output
        assert 'status="success"' in output

    def test_db_metrics_wrapper_tracks_error(self):
        with pytest.raises(ValueError):
            with db_metrics.track("error_query"):
                raise ValueError("DB error")

        value = metrics.registry.get_sample_value(
            "db_queries_total", {"operation": "error_query", "status": "error"}
        )
        assert value >= 1


class TestExtractRequestContext:
    """Tests for extract_request_context helper."""

    def test_extract_context_includes_request_id(self):
        app = FastAPI()
        app.add_middleware(ObservabilityMiddleware)

        @app.get("/test")
        async def test_route(request: Request):
            return extract_request_context(request)

        response = TestClient(app).get("/test", headers={"X-Request-ID": "ctx-1"})

        assert response.status_code == 200
        assert response.json() == {"request_id": "ctx-1"}


class TestRouteLabel:
    """Tests for the route label used by the HTTP metrics."""

    def _request(self, path: str, route_path: str | None) -> Request:
        scope = {
            "type": "http",
            "method": "GET",
            "path": path,
            "root_path": "",
            "query_string": b"",
            "headers": [],
        }
        if route_path is not None:
            scope["route"] = SimpleNamespace(path=route_path)
        return Request(scope)

    def test_full_template_is_kept(self):
        request = self._request("/api/v1/invoices/abc", "/api/v1/invoices/{invoice_id}")

        assert _route_label(request) == "/api/v1/invoices/{invoice_id}"

    def test_relative_template_gets_request_prefix(self):
        request = self._request("/api/v1/invoices/pages", "/invoices/pages")

        assert _route_label(request) == "/api/v1/invoices/pages"

    def test_relative_template_with_path_param(self):
        request = self._request("/api/v1/invoices/abc", "/{invoice_id}")

        assert _route_label(request) == "/api/v1/invoices/{invoice_id}"

    def test_unmatched_request(self):
        assert _route_label(self._request("/nope/123", None)) == UNMATCHED_ROUTE
