"""Custom exceptions for sentiment_api domain.

This module defines domain-specific exceptions so that route handlers can map
failures to HTTP status codes without inspecting messages.
"""

from typing import Any


class SentimentAPIError(Exception):
    """Base exception for all sentiment_api errors."""

    pass


# ============================================================================
# Configuration errors
# ============================================================================


class ConfigError(SentimentAPIError):
    """Raised when an environment variable holds an unusable value."""

    def __init__(self, message: str, variable: str | None = None):
        super().__init__(message)
        self.variable = variable


# ============================================================================
# Data errors
# ============================================================================


class DataError(SentimentAPIError):
    """Base class for data-related errors."""

    pass


class DataNotFoundError(DataError):
    """Raised when required data cannot be found.

    Examples:
    - Basket id not owned by the current user
    - No performance rows for a symbol
    """

    def __init__(self, message: str, resource: str | None = None):
        super().__init__(message)
        self.resource = resource


class DataValidationError(DataError):
    """Raised when data fails validation.

    Examples:
    - Invalid date format
    - Unknown signal source
    - Malformed CSV row
    """

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value


# ============================================================================
# Allocation errors
# ============================================================================


class AllocationError(SentimentAPIError):
    """Base class for basket allocation errors."""

    pass


class CannotReconcileAllocationsError(AllocationError):
    """Raised when rounded allocations cannot be forced to sum to 100.

    Happens only when every entry is locked and the rounded sum differs from
    100, so no entry is allowed to absorb the correction.
    """

    def __init__(self, message: str, rounded_total: float | None = None):
        super().__init__(message)
        self.rounded_total = rounded_total


# ============================================================================
# Auth errors
# ============================================================================


class AuthError(SentimentAPIError):
    """Base class for authentication errors."""

    pass


class InvalidCredentialsError(AuthError):
    """Raised when an email/password pair does not match."""

    pass


class EmailAlreadyInUseError(AuthError):
    """Raised when signing up with an email that already has an account."""

    def __init__(self, message: str, email: str | None = None):
        super().__init__(message)
        self.email = email


class SessionExpiredError(AuthError):
    """Raised when a session id is unknown or past its expiry."""

    pass


# ============================================================================
# Storage errors
# ============================================================================


class StorageError(SentimentAPIError):
    """Base class for storage-related errors."""

    pass


class StorageReadError(StorageError):
    """Raised when reading from storage fails."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class StorageWriteError(StorageError):
    """Raised when writing to storage fails."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path
