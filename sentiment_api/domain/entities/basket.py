"""Basket and user domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sentiment_api.domain.entities.allocation import AllocationEntry, SourceWeights


@dataclass
class BasketStock:
    """A stock held in a saved basket."""

    symbol: str
    name: str
    sector: str
    allocation: float
    is_locked: bool
    id: str | None = None

    def to_entry(self) -> AllocationEntry:
        """View this stock as an allocation entry for rebalancing."""
        return AllocationEntry(
            id=self.id or self.symbol,
            symbol=self.symbol,
            allocation=self.allocation,
            locked=self.is_locked,
            name=self.name,
            sector=self.sector,
        )

    @classmethod
    def from_entry(cls, entry: AllocationEntry) -> "BasketStock":
        """Create from an allocation entry."""
        return cls(
            id=entry.id,
            symbol=entry.symbol,
            name=entry.name or entry.symbol,
            sector=entry.sector or "Unknown",
            allocation=entry.allocation,
            is_locked=entry.locked,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "symbol": self.symbol,
            "name": self.name,
            "sector": self.sector,
            "allocation": self.allocation,
            "is_locked": self.is_locked,
        }


@dataclass
class Basket:
    """A user-defined named collection of stocks."""

    name: str
    source_weights: SourceWeights
    is_locked: bool  # Locked in as a snapshot
    id: str | None = None
    user_email: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    stocks: list[BasketStock] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "source_weights": self.source_weights.to_dict(),
            "is_locked": self.is_locked,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "stocks": [s.to_dict() for s in self.stocks],
        }


@dataclass
class User:
    """A registered dashboard user (never carries the password hash)."""

    email: str
    name: str
    created_at: datetime


@dataclass
class Session:
    """A login session keyed by the cookie value."""

    id: str
    email: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Whether the session is past its expiry at ``now``."""
        return self.expires_at < now
