from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class InvalidTransitionError(ValidationError):
    """Raised when a clock or review action is not allowed in the current state."""


class PermissionRequiredError(DomainError):
    """Clock-in blocked by the late cutoff; a supervisor must approve first."""

    def __init__(self, message: str, *, existing_status: Optional[str] = None):
        super().__init__(message)
        self.existing_status = existing_status


class DeviceAccessError(Exception):
    """Camera or geolocation could not be used (denied, missing, timed out)."""


class ApiError(Exception):
    """A call to the attendance API failed (transport error or error envelope)."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
