from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, details: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.details = details or {}


class AlreadyPunchedIn(DomainError):
    """Raised when an employee already has an open punch for today."""

    def __init__(self, message: str = "Already punched in today. Please punch out first."):
        super().__init__(message)


class MustPunchInFirst(DomainError):
    """Raised when punching out without an open punch for today."""

    def __init__(self, message: str = "Must punch in first or already punched out"):
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials or tokens are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
