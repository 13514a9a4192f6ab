"""
Prometheus metrics endpoint.

Example:
    GET /metrics

    Response:
        # HELP khael_apartments_mutations_total Total number of store mutations ...
        # TYPE khael_apartments_mutations_total counter
        khael_apartments_mutations_total{entity="apartment",operation="create"} 3.0
        ...
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response)
async def metrics() -> Any:
    """
    Expose listing, media and login metrics in the Prometheus text format.

    Returns:
        Response: Metrics with the Prometheus content type
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
