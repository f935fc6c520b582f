"""Model performance domain service.

Win rate, trade count, profit factor and equity curve for a symbol's
sentiment calls. Neutral calls are never traded and are ignored throughout.
"""

import math

import pandas as pd

from sentiment_api.domain.constants import SENTIMENT_NEUTRAL
from sentiment_api.domain.entities.performance import (
    CumulativePLPoint,
    PerformanceMetrics,
    PerformanceRecord,
)


def _is_trade(record: PerformanceRecord) -> bool:
    return record.sentiment.strip().lower() != SENTIMENT_NEUTRAL


def trade_history(records: list[PerformanceRecord]) -> list[PerformanceRecord]:
    """Non-neutral records, in their original order."""
    return [r for r in records if _is_trade(r)]


def compute_metrics(records: list[PerformanceRecord]) -> PerformanceMetrics:
    """Compute headline metrics over non-neutral calls.

    - win_percentage: share of calls with a profit at 30 or 60 days, rounded
    - total_trades: number of non-neutral calls
    - profit_factor: gross 30-day profit / gross 30-day loss, 2 decimals

    Missing P/L values count as neither a win nor a loss.
    """
    trades = trade_history(records)
    if not trades:
        return PerformanceMetrics(win_percentage=None, total_trades=0, profit_factor=None)

    wins = sum(
        1
        for r in trades
        if (r.pl_30d is not None and r.pl_30d > 0) or (r.pl_60d is not None and r.pl_60d > 0)
    )
    win_percentage = math.floor(wins / len(trades) * 100 + 0.5)

    gross_profit = sum(r.pl_30d for r in trades if r.pl_30d is not None and r.pl_30d > 0)
    gross_loss = abs(sum(r.pl_30d for r in trades if r.pl_30d is not None and r.pl_30d < 0))
    profit_factor = round(gross_profit / gross_loss, 2) if gross_loss > 0 else None

    return PerformanceMetrics(
        win_percentage=win_percentage,
        total_trades=len(trades),
        profit_factor=profit_factor,
    )


def cumulative_pl(records: list[PerformanceRecord]) -> list[CumulativePLPoint]:
    """Equity curve: 30-day P/L summed per date, then accumulated in date order."""
    trades = trade_history(records)
    if not trades:
        return []

    df = pd.DataFrame(
        {
            "date": [r.date for r in trades],
            "pl_30d": [r.pl_30d if r.pl_30d is not None else 0.0 for r in trades],
        }
    )
    daily = df.groupby("date", sort=True)["pl_30d"].sum()
    running = daily.cumsum()

    return [
        CumulativePLPoint(
            date=day,
            daily_pl=float(daily[day]),
            cumulative_pl=float(running[day]),
        )
        for day in daily.index
    ]
