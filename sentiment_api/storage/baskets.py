"""Repository for user-owned stock baskets."""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from datetime import UTC, datetime

from sentiment_api.domain.entities.allocation import SourceWeights
from sentiment_api.domain.entities.basket import Basket, BasketStock
from sentiment_api.domain.exceptions import DataNotFoundError
from sentiment_api.storage.database import Database

logger = logging.getLogger(__name__)


class BasketRepository:
    """Saves and loads baskets together with their stocks.

    Stocks are stored with a position column so that a basket reloads in
    the order it was saved.
    """

    def __init__(self, db: Database):
        self.db = db

    def save(self, basket: Basket, user_email: str) -> Basket:
        """Create a basket, or update it when ``basket.id`` is set.

        Updating replaces the full stock list.

        Raises:
            DataNotFoundError: updating a basket the user does not own
        """
        now = datetime.now(UTC)
        weights_json = json.dumps(basket.source_weights.to_dict())

        with self.db.transaction() as conn:
            if basket.id is None:
                basket_id = str(uuid.uuid4())
                created_at = now
                conn.execute(
                    """
                    INSERT INTO stock_baskets
                        (id, user_email, name, source_weights, is_locked, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        basket_id,
                        user_email,
                        basket.name,
                        weights_json,
                        int(basket.is_locked),
                        created_at.isoformat(),
                        now.isoformat(),
                    ),
                )
                logger.info(f"[Baskets] Created basket {basket_id} for {user_email}")
            else:
                basket_id = basket.id
                existing = conn.execute(
                    "SELECT created_at FROM stock_baskets WHERE id = ? AND user_email = ?",
                    (basket_id, user_email),
                ).fetchone()
                if existing is None:
                    raise DataNotFoundError(
                        f"Basket {basket_id} not found", resource="basket"
                    )
                created_at = datetime.fromisoformat(existing["created_at"])
                conn.execute(
                    """
                    UPDATE stock_baskets
                    SET name = ?, source_weights = ?, is_locked = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (basket.name, weights_json, int(basket.is_locked), now.isoformat(), basket_id),
                )
                conn.execute("DELETE FROM basket_stocks WHERE basket_id = ?", (basket_id,))
                logger.info(f"[Baskets] Updated basket {basket_id} for {user_email}")

            stocks = [
                BasketStock(
                    id=str(uuid.uuid4()),
                    symbol=s.symbol,
                    name=s.name,
                    sector=s.sector,
                    allocation=s.allocation,
                    is_locked=s.is_locked,
                )
                for s in basket.stocks
            ]
            conn.executemany(
                """
                INSERT INTO basket_stocks
                    (id, basket_id, position, symbol, name, sector, allocation, is_locked)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (s.id, basket_id, i, s.symbol, s.name, s.sector, s.allocation, int(s.is_locked))
                    for i, s in enumerate(stocks)
                ],
            )

        return Basket(
            id=basket_id,
            name=basket.name,
            source_weights=basket.source_weights,
            is_locked=basket.is_locked,
            user_email=user_email,
            created_at=created_at,
            updated_at=now,
            stocks=stocks,
        )

    def list_for_user(self, user_email: str) -> list[Basket]:
        """A user's baskets without stocks, newest first."""
        rows = self.db.query(
            "SELECT * FROM stock_baskets WHERE user_email = ? ORDER BY created_at DESC, rowid DESC",
            (user_email,),
        )
        return [self._row_to_basket(row) for row in rows]

    def get(self, basket_id: str, user_email: str) -> Basket:
        """Load one basket with its stocks.

        Raises:
            DataNotFoundError: no such basket for this user
        """
        row = self.db.query_one(
            "SELECT * FROM stock_baskets WHERE id = ? AND user_email = ?",
            (basket_id, user_email),
        )
        if row is None:
            raise DataNotFoundError(f"Basket {basket_id} not found", resource="basket")
        basket = self._row_to_basket(row)
        basket.stocks = self._load_stocks(basket_id)
        return basket

    def get_most_recent(self, user_email: str) -> Basket | None:
        """The user's newest basket with stocks, or None."""
        row = self.db.query_one(
            """
            SELECT * FROM stock_baskets WHERE user_email = ?
            ORDER BY created_at DESC, rowid DESC LIMIT 1
            """,
            (user_email,),
        )
        if row is None:
            return None
        basket = self._row_to_basket(row)
        basket.stocks = self._load_stocks(basket.id)
        return basket

    def _load_stocks(self, basket_id: str) -> list[BasketStock]:
        rows = self.db.query(
            "SELECT * FROM basket_stocks WHERE basket_id = ? ORDER BY position",
            (basket_id,),
        )
        return [
            BasketStock(
                id=r["id"],
                symbol=r["symbol"],
                name=r["name"],
                sector=r["sector"],
                allocation=r["allocation"],
                is_locked=bool(r["is_locked"]),
            )
            for r in rows
        ]

    @staticmethod
    def _row_to_basket(row: sqlite3.Row) -> Basket:
        return Basket(
            id=row["id"],
            name=row["name"],
            source_weights=SourceWeights.from_dict(json.loads(row["source_weights"])),
            is_locked=bool(row["is_locked"]),
            user_email=row["user_email"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
