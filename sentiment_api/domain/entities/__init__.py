"""Domain entities - pure dataclasses with no external dependencies.

These entities represent the core business objects in the domain model.
"""

from sentiment_api.domain.entities.allocation import AllocationEntry, SourceWeights
from sentiment_api.domain.entities.basket import Basket, BasketStock, Session, User
from sentiment_api.domain.entities.performance import (
    CumulativePLPoint,
    PerformanceMetrics,
    PerformanceRecord,
)
from sentiment_api.domain.entities.sentiment import (
    SentimentObservation,
    SignalSource,
    SignalSummary,
    UniverseEntry,
)

__all__ = [
    # Allocation
    "AllocationEntry",
    "SourceWeights",
    # Baskets and users
    "Basket",
    "BasketStock",
    "Session",
    "User",
    # Performance
    "CumulativePLPoint",
    "PerformanceMetrics",
    "PerformanceRecord",
    # Sentiment
    "SentimentObservation",
    "SignalSource",
    "SignalSummary",
    "UniverseEntry",
]
