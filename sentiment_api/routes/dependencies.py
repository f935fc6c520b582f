"""Dependency injection shared by all routers.

The Database, PriceService and Settings are built once in the application
lifespan and kept on ``app.state``. Tests replace these providers through
``app.dependency_overrides``.
"""

import logging
from typing import Annotated

from fastapi import Cookie, Depends, HTTPException, Request

from sentiment_api.core.config import Settings
from sentiment_api.core.prices import PriceService
from sentiment_api.domain.entities.basket import User
from sentiment_api.domain.exceptions import SessionExpiredError
from sentiment_api.storage import (
    BasketRepository,
    Database,
    PerformanceRepository,
    SessionRepository,
    SignalRepository,
    SummaryRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Application-scoped collaborators
# ============================================================================


def get_settings(request: Request) -> Settings:
    """Get the settings resolved at startup."""
    return request.app.state.settings


def get_database(request: Request) -> Database:
    """Get the shared database."""
    return request.app.state.db


def get_price_service(request: Request) -> PriceService:
    """Get the shared, memoizing price service."""
    return request.app.state.price_service


# ============================================================================
# Repositories
# ============================================================================


def get_signal_repository(
    db: Annotated[Database, Depends(get_database)],
) -> SignalRepository:
    return SignalRepository(db)


def get_performance_repository(
    db: Annotated[Database, Depends(get_database)],
) -> PerformanceRepository:
    return PerformanceRepository(db)


def get_summary_repository(
    db: Annotated[Database, Depends(get_database)],
) -> SummaryRepository:
    return SummaryRepository(db)


def get_user_repository(
    db: Annotated[Database, Depends(get_database)],
) -> UserRepository:
    return UserRepository(db)


def get_session_repository(
    db: Annotated[Database, Depends(get_database)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionRepository:
    return SessionRepository(db, ttl_days=settings.session_ttl_days)


def get_basket_repository(
    db: Annotated[Database, Depends(get_database)],
) -> BasketRepository:
    return BasketRepository(db)


# ============================================================================
# Authentication
# ============================================================================


def get_current_user(
    sessions: Annotated[SessionRepository, Depends(get_session_repository)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
    session_id: Annotated[str | None, Cookie()] = None,
) -> User:
    """Resolve the logged-in user from the session cookie.

    Raises:
        HTTPException 401: missing, unknown or expired session
    """
    if not session_id:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        session = sessions.resolve(session_id)
    except SessionExpiredError as e:
        raise HTTPException(status_code=401, detail=str(e)) from None

    user = users.get(session.email)
    if user is None:
        logger.warning(f"[Auth] Session {session.id[:8]}... points at a missing user")
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user
