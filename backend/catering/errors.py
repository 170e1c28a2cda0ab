"""
Error taxonomy for the catering backend.

Service helpers raise these; the app-level handlers in catering.main render
them as {"error": "<message>"} with the matching HTTP status.
"""


class CateringError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class ValidationError(CateringError):
    """Malformed or missing input."""

    status_code = 400


class AuthenticationError(CateringError):
    """Bad or missing credentials."""

    status_code = 401


class AuthorizationError(CateringError):
    """Role or ownership mismatch."""

    status_code = 403


class NotFoundError(CateringError):
    """Referenced entity does not exist (or is not visible to the caller)."""

    status_code = 404


class ConflictError(CateringError):
    """Duplicate account, double-booked date, referenced menu item, ..."""

    status_code = 409


class InternalError(CateringError):
    """Storage failure."""

    status_code = 500


__all__ = [
    "CateringError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "InternalError",
]
