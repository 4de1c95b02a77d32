"""Monitoring and metrics endpoints.

Exposes the Prometheus registry for scraping. The endpoint is protected
by the METRICS_TOKEN shared secret.
"""

import hmac
import logging
from typing import Annotated

from fastapi import APIRouter, Header, HTTPException, Request, status
from fastapi.responses import Response

from app.core.config import settings
from app.core.observability import metrics_endpoint

logger = logging.getLogger(__name__)

router = APIRouter(tags=["monitoring"])


@router.get("/metrics", include_in_schema=False)
async def get_metrics(
    request: Request,
    x_metrics_token: Annotated[str | None, Header()] = None,
) -> Response:
    """Prometheus metrics endpoint for scraping.

    Requires the X-Metrics-Token header; compared in constant time.

    Raises:
        HTTPException: 500 if no token is configured, 403 if the token is wrong
    """
    expected_token = settings.metrics_token
    if not expected_token:
        logger.error(
            "Metrics endpoint accessed but METRICS_TOKEN not configured",
            extra={"security_event": True, "event_type": "METRICS_NOT_CONFIGURED"},
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Metrics token not configured. Set METRICS_TOKEN environment variable.",
        )

    if not hmac.compare_digest(x_metrics_token or "", expected_token):
        logger.warning(
            "Unauthorized metrics access attempt",
            extra={
                "security_event": True,
                "event_type": "METRICS_ACCESS_DENIED",
                "client_ip": request.client.host if request.client else "unknown",
            },
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid metrics token",
        )

    return metrics_endpoint()
