"""
Custom exceptions and error codes for base queries and row upserts.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Typed error codes reported per upsert operation and at the HTTP boundary."""

    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    MTIME_CONFLICT = "mtime_conflict"
    WRITE_ERROR = "write_error"


class BasesError(Exception):
    """Base exception for all base-related errors."""

    code: ErrorCode = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BaseValidationError(BasesError):
    """Raised when a request or a base spec has an invalid shape."""

    code = ErrorCode.VALIDATION_ERROR


class BaseNotFoundError(BasesError):
    """Raised when a `.base` file does not exist."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Base introuvable: {path}")


class NoteNotFoundError(BasesError):
    """Raised when an upsert targets a note that does not exist."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Note introuvable: {path}")


class MtimeConflictError(BasesError):
    """Raised when the optimistic-concurrency guard of an upsert fails."""

    code = ErrorCode.MTIME_CONFLICT

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Conflit mtime (expected={expected}, actual={actual}).")


class FrontmatterWriteError(BasesError):
    """Raised when the storage layer fails to persist a frontmatter change."""

    code = ErrorCode.WRITE_ERROR
