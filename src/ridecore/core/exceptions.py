"""Standardized exception hierarchy for the ride booking core."""

from typing import Any


class RideCoreError(Exception):
    """Base exception for all ride core errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TransientError(RideCoreError):
    """Errors that may succeed when the user re-triggers the operation."""

    pass


class NetworkError(TransientError):
    """Network-related transient errors (timeout, connection refused)."""

    pass


class ServiceUnavailableError(TransientError):
    """External service temporarily unavailable (5xx responses)."""

    pass


class PermanentError(RideCoreError):
    """Errors that will not succeed on retry."""

    pass


class ValidationError(PermanentError):
    """Invalid input or data format."""

    pass


class NotFoundError(PermanentError):
    """Requested entity does not exist."""

    pass


class StateError(PermanentError):
    """Invalid state transition."""

    pass


class ConfigurationError(PermanentError):
    """Missing or invalid configuration."""

    pass
