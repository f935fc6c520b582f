"""Sentiment-related domain entities."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any


class SignalSource(str, Enum):
    """The three independent sentiment signal providers."""

    GOOGLE = "google"
    TWITTER = "twitter"
    NEWS = "news"


@dataclass
class SentimentObservation:
    """A single sentiment signal for a symbol from one source on one date."""

    symbol: str
    source: SignalSource
    date: date
    sentiment: str  # "positive", "negative", "neutral" (any case), or anything upstream wrote
    entry_price: float
    sentiment_score: float | None = None
    analyzed_count: int | None = None  # Tweets, keywords or articles analyzed

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "symbol": self.symbol,
            "source": self.source.value,
            "date": self.date.isoformat(),
            "sentiment": self.sentiment,
            "entry_price": self.entry_price,
            "sentiment_score": self.sentiment_score,
            "analyzed_count": self.analyzed_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SentimentObservation":
        """Create from dictionary."""
        obs_date = data["date"]
        if isinstance(obs_date, str):
            obs_date = date.fromisoformat(obs_date)
        return cls(
            symbol=data["symbol"],
            source=SignalSource(data["source"]),
            date=obs_date,
            sentiment=data["sentiment"],
            entry_price=float(data["entry_price"]),
            sentiment_score=data.get("sentiment_score"),
            analyzed_count=data.get("analyzed_count"),
        )


@dataclass
class UniverseEntry:
    """A symbol whose requested sources all agree on sentiment."""

    symbol: str
    sentiment: str  # Shared sentiment, lowercased
    observations: dict[SignalSource, SentimentObservation] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "symbol": self.symbol,
            "sentiment": self.sentiment,
            "observations": {
                source.value: obs.to_dict() for source, obs in self.observations.items()
            },
        }


@dataclass
class SignalSummary:
    """Aggregate win-rate statistics for one signal type."""

    signal_type: str
    total_signals: int
    positive_ratio: float
    win_rate_percent: float
    positive_signals: int
    negative_signals: int
    last_updated_at: str | None = None  # ISO format

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "signal_type": self.signal_type,
            "total_signals": self.total_signals,
            "positive_ratio": self.positive_ratio,
            "win_rate_percent": self.win_rate_percent,
            "positive_signals": self.positive_signals,
            "negative_signals": self.negative_signals,
            "last_updated_at": self.last_updated_at,
        }
