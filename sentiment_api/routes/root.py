"""Root endpoint (hello world)."""

from fastapi import APIRouter

from sentiment_api import __version__

router = APIRouter(tags=["root"])


@router.get("/")
def read_root() -> dict:
    """Hello world endpoint."""
    return {
        "message": "Hello from Sentiment Dashboard API",
        "service": "sentiment-api",
        "version": __version__,
    }
