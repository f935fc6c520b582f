"""Repository for model performance rows."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from sentiment_api.domain.entities.performance import PerformanceRecord
from sentiment_api.storage.database import Database


class PerformanceRepository:
    """Reads and writes rows of the models_performance table."""

    def __init__(self, db: Database):
        self.db = db

    def add_many(self, records: Iterable[PerformanceRecord]) -> int:
        """Insert records; returns how many rows were written."""
        rows = [
            (r.symbol, r.date.isoformat(), r.sentiment, r.entry_price, r.pl_30d, r.pl_60d)
            for r in records
        ]
        with self.db.transaction() as conn:
            conn.executemany(
                """
                INSERT INTO models_performance
                    (symbol, date, sentiment, entry_price, pl_30d, pl_60d)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                rows,
            )
        return len(rows)

    def list_for_symbol(self, symbol: str) -> list[PerformanceRecord]:
        """All records for a symbol, oldest first."""
        rows = self.db.query(
            """
            SELECT symbol, date, sentiment, entry_price, pl_30d, pl_60d
            FROM models_performance
            WHERE symbol = ?
            ORDER BY date, id
            """,
            (symbol,),
        )
        return [
            PerformanceRecord(
                symbol=row["symbol"],
                date=date.fromisoformat(row["date"]),
                sentiment=row["sentiment"],
                entry_price=row["entry_price"],
                pl_30d=row["pl_30d"],
                pl_60d=row["pl_60d"],
            )
            for row in rows
        ]
