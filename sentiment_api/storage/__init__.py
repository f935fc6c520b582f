"""SQLite-backed storage for signals, performance, users and baskets."""

from sentiment_api.storage.baskets import BasketRepository
from sentiment_api.storage.database import Database
from sentiment_api.storage.performance import PerformanceRepository
from sentiment_api.storage.signals import SignalRepository
from sentiment_api.storage.summaries import SummaryRepository
from sentiment_api.storage.users import SessionRepository, UserRepository

__all__ = [
    "BasketRepository",
    "Database",
    "PerformanceRepository",
    "SessionRepository",
    "SignalRepository",
    "SummaryRepository",
    "UserRepository",
]
