"""
Domain Exceptions

Every failure the services report to callers. Each carries a stable error
code used in the API error envelope and the HTTP status it maps to.
"""
from typing import Any, Optional


class ScholarLinkError(Exception):
    """Base class for all ScholarLink domain errors"""

    code = "SCHOLARLINK_ERROR"
    status_code = 400

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


class ValidationError(ScholarLinkError):
    """Malformed or out-of-range input; the user can correct it"""

    code = "VALIDATION_ERROR"
    status_code = 422


class DuplicateEmail(ScholarLinkError):
    code = "DUPLICATE_EMAIL"
    status_code = 409


class DuplicateUsername(ScholarLinkError):
    code = "DUPLICATE_USERNAME"
    status_code = 409


class InvalidCredentials(ScholarLinkError):
    """Login failed. The message never says which field was wrong."""

    code = "INVALID_CREDENTIALS"
    status_code = 401

    def __init__(self, message: str = "Invalid credentials. Please try again."):
        super().__init__(message)


class NotFound(ScholarLinkError):
    code = "NOT_FOUND"
    status_code = 404


class Forbidden(ScholarLinkError):
    """Acting user does not own the record"""

    code = "FORBIDDEN"
    status_code = 403


class InvalidTransition(ScholarLinkError):
    """Session state machine violation"""

    code = "INVALID_TRANSITION"
    status_code = 409


class StorageError(ScholarLinkError):
    """The durable store failed; the operation was rolled back"""

    code = "STORAGE_ERROR"
    status_code = 503
