"""Model performance endpoints: headline metrics, trade history and equity curve."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from sentiment_api.domain.services import compute_metrics, cumulative_pl, trade_history
from sentiment_api.routes.dependencies import get_performance_repository
from sentiment_api.storage import PerformanceRepository

router = APIRouter()


# ============================================================================
# Response models
# ============================================================================


class MetricsResponse(BaseModel):
    """Headline metrics over a symbol's non-neutral calls."""

    symbol: str
    win_percentage: int | None = Field(
        ..., description="Share of calls in profit at 30 or 60 days, rounded (null if none)"
    )
    total_trades: int
    profit_factor: float | None = Field(
        ..., description="Gross profit / gross loss, 2 decimals (null without losses)"
    )


class TradeResponse(BaseModel):
    """One non-neutral sentiment call and its outcome."""

    date: str
    sentiment: str
    entry_price: float
    pl_30d: float | None
    pl_60d: float | None


class TradeHistoryResponse(BaseModel):
    symbol: str
    trades: list[TradeResponse]


class CumulativePLPointResponse(BaseModel):
    date: str
    daily_pl: float
    cumulative_pl: float


class CumulativePLResponse(BaseModel):
    symbol: str
    points: list[CumulativePLPointResponse]


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/{symbol}/metrics", response_model=MetricsResponse)
def get_metrics(
    symbol: str,
    repo: Annotated[PerformanceRepository, Depends(get_performance_repository)],
) -> MetricsResponse:
    """Win percentage, trade count and profit factor for a symbol."""
    symbol = symbol.upper()
    metrics = compute_metrics(repo.list_for_symbol(symbol))
    return MetricsResponse(
        symbol=symbol,
        win_percentage=metrics.win_percentage,
        total_trades=metrics.total_trades,
        profit_factor=metrics.profit_factor,
    )


@router.get("/{symbol}/data", response_model=TradeHistoryResponse)
def get_trade_history(
    symbol: str,
    repo: Annotated[PerformanceRepository, Depends(get_performance_repository)],
) -> TradeHistoryResponse:
    """Non-neutral calls for a symbol, oldest first."""
    symbol = symbol.upper()
    trades = trade_history(repo.list_for_symbol(symbol))
    return TradeHistoryResponse(
        symbol=symbol,
        trades=[
            TradeResponse(
                date=t.date.isoformat(),
                sentiment=t.sentiment,
                entry_price=t.entry_price,
                pl_30d=t.pl_30d,
                pl_60d=t.pl_60d,
            )
            for t in trades
        ],
    )


@router.get("/{symbol}/cumulative-pl", response_model=CumulativePLResponse)
def get_cumulative_pl(
    symbol: str,
    repo: Annotated[PerformanceRepository, Depends(get_performance_repository)],
) -> CumulativePLResponse:
    """Daily 30-day P/L of non-neutral calls summed per date, with its running total."""
    symbol = symbol.upper()
    points = cumulative_pl(repo.list_for_symbol(symbol))
    return CumulativePLResponse(
        symbol=symbol,
        points=[
            CumulativePLPointResponse(
                date=p.date.isoformat(), daily_pl=p.daily_pl, cumulative_pl=p.cumulative_pl
            )
            for p in points
        ],
    )
