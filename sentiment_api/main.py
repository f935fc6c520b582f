"""FastAPI application entrypoint."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sentiment_api import __version__
from sentiment_api.core.config import configure_logging, load_settings
from sentiment_api.core.prices import build_price_service
from sentiment_api.routes import (
    allocations,
    auth,
    baskets,
    health,
    performance,
    prices,
    root,
    signals,
    summaries,
)
from sentiment_api.storage import Database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the shared database and price service from the environment."""
    settings = load_settings()
    configure_logging(settings.log_level)

    app.state.settings = settings
    app.state.db = Database(settings.db_path)
    app.state.price_service = build_price_service(settings.price_provider)
    logger.info(
        f"Sentiment API starting (db={settings.db_path}, prices={settings.price_provider})"
    )
    try:
        yield
    finally:
        app.state.db.close()


app = FastAPI(
    title="Sentiment Dashboard API",
    description="Market-sentiment signals, model performance and stock baskets",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(root.router)
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(signals.router, prefix="/signals", tags=["signals"])
app.include_router(summaries.router, prefix="/summaries", tags=["summaries"])
app.include_router(performance.router, prefix="/performance", tags=["performance"])
app.include_router(prices.router, prefix="/prices", tags=["prices"])
app.include_router(allocations.router, prefix="/allocations", tags=["allocations"])
app.include_router(baskets.router, prefix="/baskets", tags=["baskets"])
