"""Model performance domain entities."""

from dataclasses import dataclass
from datetime import date
from typing import Any


@dataclass
class PerformanceRecord:
    """Outcome of one sentiment call: entry price and profit/loss after 30/60 days."""

    symbol: str
    date: date
    sentiment: str
    entry_price: float
    pl_30d: float | None  # None until 30 days have passed
    pl_60d: float | None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "symbol": self.symbol,
            "date": self.date.isoformat(),
            "sentiment": self.sentiment,
            "entry_price": self.entry_price,
            "pl_30d": self.pl_30d,
            "pl_60d": self.pl_60d,
        }


@dataclass
class PerformanceMetrics:
    """Headline metrics for a symbol's non-neutral calls."""

    win_percentage: int | None  # None when there are no non-neutral calls
    total_trades: int
    profit_factor: float | None  # None when there are no losing trades


@dataclass
class CumulativePLPoint:
    """Daily and running profit/loss for one date."""

    date: date
    daily_pl: float
    cumulative_pl: float
