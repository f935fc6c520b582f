"""Repositories for registered users and their login sessions."""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime, timedelta

from sentiment_api.core.security import hash_password, new_session_id, verify_password
from sentiment_api.domain.exceptions import (
    EmailAlreadyInUseError,
    InvalidCredentialsError,
    SessionExpiredError,
)
from sentiment_api.domain.entities.basket import Session, User
from sentiment_api.storage.database import Database


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository:
    """Creates users and checks their credentials."""

    def __init__(self, db: Database):
        self.db = db

    def create(self, email: str, name: str, password: str) -> User:
        """Register a new user.

        Raises:
            EmailAlreadyInUseError: if the email already has an account
        """
        email = normalize_email(email)
        if self.get(email) is not None:
            raise EmailAlreadyInUseError("Email already in use", email=email)

        created_at = datetime.now(UTC)
        try:
            with self.db.transaction() as conn:
                conn.execute(
                    "INSERT INTO users (email, name, password_hash, created_at) VALUES (?, ?, ?, ?)",
                    (email, name, hash_password(password), created_at.isoformat()),
                )
        except sqlite3.IntegrityError as e:
            raise EmailAlreadyInUseError("Email already in use", email=email) from e
        return User(email=email, name=name, created_at=created_at)

    def get(self, email: str) -> User | None:
        row = self.db.query_one(
            "SELECT email, name, created_at FROM users WHERE email = ?",
            (normalize_email(email),),
        )
        if row is None:
            return None
        return User(
            email=row["email"],
            name=row["name"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def authenticate(self, email: str, password: str) -> User:
        """Return the user whose credentials match.

        Raises:
            InvalidCredentialsError: unknown email or wrong password
        """
        row = self.db.query_one(
            "SELECT email, name, password_hash, created_at FROM users WHERE email = ?",
            (normalize_email(email),),
        )
        if row is None or not verify_password(password, row["password_hash"]):
            raise InvalidCredentialsError("Invalid email or password")
        return User(
            email=row["email"],
            name=row["name"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


class SessionRepository:
    """Issues, resolves and deletes login sessions."""

    def __init__(self, db: Database, ttl_days: int):
        self.db = db
        self.ttl = timedelta(days=ttl_days)

    def create(self, email: str) -> Session:
        now = datetime.now(UTC)
        session = Session(
            id=new_session_id(),
            email=normalize_email(email),
            created_at=now,
            expires_at=now + self.ttl,
        )
        with self.db.transaction() as conn:
            conn.execute(
                "INSERT INTO sessions (id, email, created_at, expires_at) VALUES (?, ?, ?, ?)",
                (
                    session.id,
                    session.email,
                    session.created_at.isoformat(),
                    session.expires_at.isoformat(),
                ),
            )
        return session

    def resolve(self, session_id: str) -> Session:
        """Look up a live session; expired ones are deleted.

        Raises:
            SessionExpiredError: unknown or expired session id
        """
        row = self.db.query_one(
            "SELECT id, email, created_at, expires_at FROM sessions WHERE id = ?",
            (session_id,),
        )
        if row is None:
            raise SessionExpiredError("Session not found")

        session = Session(
            id=row["id"],
            email=row["email"],
            created_at=datetime.fromisoformat(row["created_at"]),
            expires_at=datetime.fromisoformat(row["expires_at"]),
        )
        if session.is_expired(datetime.now(UTC)):
            self.delete(session_id)
            raise SessionExpiredError("Session expired")
        return session

    def delete(self, session_id: str) -> None:
        with self.db.transaction() as conn:
            conn.execute("DELETE FROM sessions WHERE id = ?", (session_id,))
