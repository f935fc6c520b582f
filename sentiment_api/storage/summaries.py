"""Repository for per-signal-type summary statistics."""

from __future__ import annotations

from datetime import UTC, datetime

from sentiment_api.domain.entities.sentiment import SignalSummary
from sentiment_api.storage.database import Database


class SummaryRepository:
    """Upserts and lists rows of the signal_summaries table."""

    def __init__(self, db: Database):
        self.db = db

    def upsert(self, summary: SignalSummary) -> SignalSummary:
        """Insert or replace the summary for its signal_type, stamping last_updated_at."""
        stamped = SignalSummary(
            signal_type=summary.signal_type,
            total_signals=summary.total_signals,
            positive_ratio=summary.positive_ratio,
            win_rate_percent=summary.win_rate_percent,
            positive_signals=summary.positive_signals,
            negative_signals=summary.negative_signals,
            last_updated_at=datetime.now(UTC).isoformat(),
        )
        with self.db.transaction() as conn:
            conn.execute(
                """
                INSERT INTO signal_summaries
                    (signal_type, total_signals, positive_ratio, win_rate_percent,
                     positive_signals, negative_signals, last_updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(signal_type) DO UPDATE SET
                    total_signals = excluded.total_signals,
                    positive_ratio = excluded.positive_ratio,
                    win_rate_percent = excluded.win_rate_percent,
                    positive_signals = excluded.positive_signals,
                    negative_signals = excluded.negative_signals,
                    last_updated_at = excluded.last_updated_at
                """,
                (
                    stamped.signal_type,
                    stamped.total_signals,
                    stamped.positive_ratio,
                    stamped.win_rate_percent,
                    stamped.positive_signals,
                    stamped.negative_signals,
                    stamped.last_updated_at,
                ),
            )
        return stamped

    def list_all(self) -> list[SignalSummary]:
        """All summaries, ordered by signal_type."""
        rows = self.db.query("SELECT * FROM signal_summaries ORDER BY signal_type")
        return [SignalSummary(**dict(row)) for row in rows]
