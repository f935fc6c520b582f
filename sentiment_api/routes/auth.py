"""Authentication endpoints: signup, login, logout and current user."""

import logging
from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from sentiment_api.core.config import Settings
from sentiment_api.domain.constants import MIN_PASSWORD_LENGTH, SESSION_COOKIE_NAME
from sentiment_api.domain.entities.basket import Session, User
from sentiment_api.domain.exceptions import EmailAlreadyInUseError, InvalidCredentialsError
from sentiment_api.routes.dependencies import (
    get_current_user,
    get_session_repository,
    get_settings,
    get_user_repository,
)
from sentiment_api.storage import SessionRepository, UserRepository

logger = logging.getLogger(__name__)

router = APIRouter()

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


# ============================================================================
# Request / Response models
# ============================================================================


class SignupRequest(BaseModel):
    """Request model for creating an account."""

    email: str = Field(..., pattern=EMAIL_PATTERN, description="Login email")
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    password: str = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        description=f"Password (at least {MIN_PASSWORD_LENGTH} characters)",
    )


class LoginRequest(BaseModel):
    """Request model for logging in."""

    email: str = Field(..., description="Login email")
    password: str = Field(..., description="Password")


class UserResponse(BaseModel):
    """Public view of a user."""

    email: str
    name: str
    created_at: str


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        email=user.email, name=user.name, created_at=user.created_at.isoformat()
    )


def _set_session_cookie(response: Response, session: Session, settings: Settings) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session.id,
        max_age=settings.session_ttl_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/signup", response_model=UserResponse, status_code=201)
def signup(
    request: SignupRequest,
    response: Response,
    users: Annotated[UserRepository, Depends(get_user_repository)],
    sessions: Annotated[SessionRepository, Depends(get_session_repository)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserResponse:
    """Create an account and log it in.

    Raises:
        HTTPException 409: if the email is already registered
    """
    try:
        user = users.create(request.email, request.name, request.password)
    except EmailAlreadyInUseError as e:
        raise HTTPException(status_code=409, detail=str(e)) from None

    session = sessions.create(user.email)
    _set_session_cookie(response, session, settings)
    logger.info(f"[Auth] New account {user.email}")
    return _user_response(user)


@router.post("/login", response_model=UserResponse)
def login(
    request: LoginRequest,
    response: Response,
    users: Annotated[UserRepository, Depends(get_user_repository)],
    sessions: Annotated[SessionRepository, Depends(get_session_repository)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserResponse:
    """Check credentials and start a session (httponly cookie).

    Raises:
        HTTPException 401: on unknown email or wrong password
    """
    try:
        user = users.authenticate(request.email, request.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e)) from None

    session = sessions.create(user.email)
    _set_session_cookie(response, session, settings)
    return _user_response(user)


@router.post("/logout")
def logout(
    response: Response,
    sessions: Annotated[SessionRepository, Depends(get_session_repository)],
    session_id: Annotated[str | None, Cookie()] = None,
) -> dict:
    """End the current session, if any, and clear the cookie."""
    if session_id:
        sessions.delete(session_id)
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")
    return {"status": "logged_out"}


@router.get("/me", response_model=UserResponse)
def me(user: Annotated[User, Depends(get_current_user)]) -> UserResponse:
    """The user owning the session cookie."""
    return _user_response(user)
