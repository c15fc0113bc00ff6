"""
This file contains custom, application-specific exceptions.
The API layer maps each of them to an HTTP status code in main.py.
"""

class LedgerError(Exception):
    """Base class for all domain errors raised by the services."""
    status_code: int = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(LedgerError):
    """Raised when a referenced id (user, subject, ...) does not exist."""
    status_code = 404


class ConflictError(LedgerError):
    """Raised on a uniqueness or referential-integrity violation."""
    status_code = 409


class InvalidInputError(LedgerError):
    """Raised when a required field is missing or a value is out of range."""
    status_code = 422


class UnauthorizedRoleError(LedgerError):
    """Raised when a user's role does not permit them to perform an action."""
    status_code = 403
