"""Health check endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from sentiment_api.routes.dependencies import get_database
from sentiment_api.storage import Database

router = APIRouter()


@router.get("")
def health_check() -> dict:
    """Generic health check."""
    return {"status": "healthy"}


@router.get("/live")
def liveness() -> dict:
    """Liveness probe - is the process running?"""
    return {"status": "alive"}


@router.get("/ready")
def readiness(db: Annotated[Database, Depends(get_database)]) -> dict:
    """Readiness probe - does the database answer?"""
    if not db.ping():
        raise HTTPException(status_code=503, detail="Database unavailable")
    return {"status": "ready"}
