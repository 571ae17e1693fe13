"""
Liveness and readiness endpoints used by the deployment probes.
"""
from datetime import datetime

from fastapi import APIRouter, HTTPException, status

from ..db import check_db_connection

router = APIRouter(tags=["health"])


def _stamp(body: dict) -> dict:
    body["timestamp"] = datetime.utcnow().isoformat()
    return body


@router.get("/health")
def health_check():
    # the process is up; no dependencies are touched
    return _stamp({"status": "healthy"})


@router.get("/ready")
def readiness_check():
    """Ready only while the database answers; 503 otherwise."""
    if check_db_connection():
        return _stamp({"status": "ready", "database": "connected"})

    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=_stamp({"status": "not_ready", "database": "disconnected"}),
    )
