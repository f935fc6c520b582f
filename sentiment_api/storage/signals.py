"""Repository for per-source sentiment signals."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable
from datetime import date

from sentiment_api.domain.entities.sentiment import SentimentObservation, SignalSource
from sentiment_api.storage.database import Database

_COLUMNS = "source, symbol, date, sentiment, sentiment_score, analyzed_count, entry_price"


def _row_to_observation(row: sqlite3.Row) -> SentimentObservation:
    return SentimentObservation(
        symbol=row["symbol"],
        source=SignalSource(row["source"]),
        date=date.fromisoformat(row["date"]),
        sentiment=row["sentiment"],
        entry_price=row["entry_price"],
        sentiment_score=row["sentiment_score"],
        analyzed_count=row["analyzed_count"],
    )


class SignalRepository:
    """Reads and writes rows of the signals table."""

    def __init__(self, db: Database):
        self.db = db

    def add_many(self, observations: Iterable[SentimentObservation]) -> int:
        """Insert observations; returns how many rows were written."""
        rows = [
            (
                obs.source.value,
                obs.symbol,
                obs.date.isoformat(),
                obs.sentiment,
                obs.sentiment_score,
                obs.analyzed_count,
                obs.entry_price,
            )
            for obs in observations
        ]
        with self.db.transaction() as conn:
            conn.executemany(
                f"INSERT INTO signals ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                rows,
            )
        return len(rows)

    def list_all(self, source: SignalSource) -> list[SentimentObservation]:
        """Every row for a source, in insertion order."""
        rows = self.db.query(
            f"SELECT {_COLUMNS} FROM signals WHERE source = ? ORDER BY id",
            (source.value,),
        )
        return [_row_to_observation(r) for r in rows]

    def list_latest(self, source: SignalSource) -> list[SentimentObservation]:
        """Rows dated on each symbol's most recent date for a source.

        A symbol with several rows on its latest date returns all of them.
        """
        rows = self.db.query(
            f"""
            SELECT {_COLUMNS} FROM signals AS s
            WHERE s.source = ?
              AND s.date = (
                  SELECT MAX(date) FROM signals
                  WHERE source = s.source AND symbol = s.symbol
              )
            ORDER BY s.symbol, s.id
            """,
            (source.value,),
        )
        return [_row_to_observation(r) for r in rows]
