"""Allocation-related domain entities."""

from dataclasses import dataclass
from typing import Any


@dataclass
class AllocationEntry:
    """One stock's share of a basket, in percentage points."""

    id: str
    symbol: str
    allocation: float  # 0 <= allocation <= 100
    locked: bool = False  # Excluded from automatic redistribution

    # Display metadata, carried through untouched
    name: str | None = None
    sector: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "symbol": self.symbol,
            "allocation": self.allocation,
            "locked": self.locked,
            "name": self.name,
            "sector": self.sector,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AllocationEntry":
        """Create from dictionary."""
        return cls(
            id=str(data["id"]),
            symbol=data["symbol"],
            allocation=float(data.get("allocation", 0.0)),
            locked=bool(data.get("locked", False)),
            name=data.get("name"),
            sector=data.get("sector"),
        )


@dataclass
class SourceWeights:
    """Relative weight of each sentiment source (fractions summing to 1)."""

    twitter: float
    google_trends: float
    news: float

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary for serialization."""
        return {
            "twitter": self.twitter,
            "google_trends": self.google_trends,
            "news": self.news,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SourceWeights":
        """Create from dictionary.

        Accepts the camelCase ``googleTrends`` key stored by older clients.
        """
        google = data.get("google_trends", data.get("googleTrends", 0.0))
        return cls(
            twitter=float(data.get("twitter", 0.0)),
            google_trends=float(google),
            news=float(data.get("news", 0.0)),
        )
