"""Domain errors shared by the category and product services.

Every failure carries a machine-usable ``kind``, the catalog ``code`` of its
message (see ``errors.json``) and a human-readable ``detail``. The HTTP
layer maps ``kind`` to a status code; nothing here knows about transports.
"""

from enum import Enum

from config import get_error_message


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    DUPLICATE_NAME = "duplicate_name"
    INVALID_VALUE = "invalid_value"
    ALREADY_ASSOCIATED = "already_associated"
    NOT_ASSOCIATED = "not_associated"


class DomainError(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind

    def __init__(self, code: str, **params):
        self.code = code
        self.params = params
        self.detail = get_error_message(code, **params)
        super().__init__(self.detail)


class NotFoundError(DomainError):
    """A referenced product or category does not exist."""

    kind = ErrorKind.NOT_FOUND


class DuplicateNameError(DomainError):
    """Another category already uses this name (case-insensitive)."""

    kind = ErrorKind.DUPLICATE_NAME


class InvalidValueError(DomainError):
    """A price or stock rule was violated."""

    kind = ErrorKind.INVALID_VALUE


class AlreadyAssociatedError(DomainError):
    kind = ErrorKind.ALREADY_ASSOCIATED


class NotAssociatedError(DomainError):
    kind = ErrorKind.NOT_ASSOCIATED
