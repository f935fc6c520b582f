"""Password hashing and session token helpers."""

import secrets

from werkzeug.security import check_password_hash, generate_password_hash

from sentiment_api.domain.constants import PASSWORD_HASH_METHOD, PASSWORD_SALT_LENGTH


def hash_password(password: str) -> str:
    """Hash a password with salted PBKDF2-SHA256.

    Returns:
        werkzeug "<method>$<salt>$<digest>" string, safe to store as text
    """
    return generate_password_hash(
        password, method=PASSWORD_HASH_METHOD, salt_length=PASSWORD_SALT_LENGTH
    )


def verify_password(password: str, stored: str) -> bool:
    """Check a password against a value produced by hash_password."""
    try:
        return check_password_hash(stored, password)
    except ValueError:
        # stored value names a hash method werkzeug does not know
        return False


def new_session_id() -> str:
    """Random, URL-safe session identifier."""
    return secrets.token_urlsafe(32)
