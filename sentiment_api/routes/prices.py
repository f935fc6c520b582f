"""Stock price endpoints (current, batch and historical)."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from sentiment_api.core.prices import PriceService
from sentiment_api.domain.constants import MAX_BATCH_PRICE_SYMBOLS
from sentiment_api.routes.dependencies import get_price_service

router = APIRouter()


# ============================================================================
# Request / Response models
# ============================================================================


class PriceResponse(BaseModel):
    """Current price for a symbol."""

    symbol: str
    price: float
    currency: str
    market_state: str
    last_updated: str
    source: str = Field(..., description="cache, yahoo or mock")


class BatchPriceRequest(BaseModel):
    """Request model for batch price lookup."""

    symbols: list[str] = Field(
        ...,
        min_length=1,
        max_length=MAX_BATCH_PRICE_SYMBOLS,
        description=f"Ticker symbols (1-{MAX_BATCH_PRICE_SYMBOLS})",
    )


class BatchPriceResponse(BaseModel):
    prices: dict[str, float]


class HistoricalPriceResponse(BaseModel):
    """Closing price for a symbol on a date."""

    symbol: str
    date: str
    price: float
    source: str = Field(..., description="cache, yahoo or mock")
    open: float | None = None
    high: float | None = None
    low: float | None = None
    volume: int | None = None


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/batch", response_model=BatchPriceResponse)
def get_batch_prices(
    request: BatchPriceRequest,
    prices: Annotated[PriceService, Depends(get_price_service)],
) -> BatchPriceResponse:
    """Current prices for several symbols as {symbol: price}."""
    return BatchPriceResponse(prices=prices.batch(request.symbols))


@router.get("/{symbol}", response_model=PriceResponse)
def get_price(
    symbol: str,
    prices: Annotated[PriceService, Depends(get_price_service)],
) -> PriceResponse:
    """Current price for a symbol (falls back to a stable mock price)."""
    quote = prices.current(symbol)
    return PriceResponse(
        symbol=quote.symbol,
        price=quote.price,
        currency=quote.currency,
        market_state=quote.market_state,
        last_updated=quote.last_updated,
        source=quote.source,
    )


@router.get("/{symbol}/historical", response_model=HistoricalPriceResponse)
def get_historical_price(
    symbol: str,
    prices: Annotated[PriceService, Depends(get_price_service)],
    day: Annotated[str, Query(alias="date", description="YYYY-MM-DD")],
) -> HistoricalPriceResponse:
    """Closing price for a symbol on a date.

    Raises:
        HTTPException 400: if the date is not YYYY-MM-DD
    """
    try:
        parsed = date.fromisoformat(day)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid date {day!r}, expected YYYY-MM-DD",
        ) from None

    result = prices.historical(symbol, parsed)
    return HistoricalPriceResponse(
        symbol=result.symbol,
        date=result.date.isoformat(),
        price=result.price,
        source=result.source,
        open=result.open,
        high=result.high,
        low=result.low,
        volume=result.volume,
    )
