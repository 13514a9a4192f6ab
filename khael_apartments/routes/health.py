"""
Health and readiness check endpoints.

``/api/health`` only says the process is up; ``/api/ready`` also checks that
the listing store answers.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from khael_apartments.db.engine import check_engine_health
from khael_apartments.dependencies import get_db_engine
from khael_apartments.utils.datetime import to_iso, utc_now

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
def health_check() -> JSONResponse:
    """
    Liveness probe endpoint.

    Example:
        >>> GET /api/health
        {"status": "OK", "message": "Server is running", "timestamp": "2024-05-01T10:00:00+00:00"}
    """
    return JSONResponse(
        content={
            "status": "OK",
            "message": "Server is running",
            "timestamp": to_iso(utc_now()),
        }
    )


@router.get("/ready")
def readiness_check(engine: Engine = Depends(get_db_engine)) -> JSONResponse:
    """
    Readiness probe endpoint.

    Returns 503 if the database is not accessible.

    Example:
        >>> GET /api/ready
        {"status": "ready", "checks": {"database": "ok"}}
    """
    checks = {}

    if check_engine_health(engine):
        checks["database"] = "ok"
        return JSONResponse(content={"status": "ready", "checks": checks})

    logger.error("readiness_check_failed", reason="database_not_accessible")
    checks["database"] = "failed"
    return JSONResponse(
        status_code=503,
        content={"status": "not ready", "checks": checks},
    )
