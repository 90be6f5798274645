from __future__ import annotations

from typing import Sequence

from .enums import ErrorKind


class DomainError(Exception):
    """Base exception for business rule violations.

    Carries a machine-readable ``kind`` next to the developer message.
    """

    default_kind = ErrorKind.MISSING_REQUIRED_FIELD

    def __init__(self, message: str, *, kind: ErrorKind | None = None):
        super().__init__(message)
        self.kind = kind or self.default_kind
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "message": self.message}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind | None = None,
        errors: Sequence["ValidationError"] = (),
    ):
        super().__init__(message, kind=kind)
        self.errors = tuple(errors)


class NotFoundError(DomainError):
    """Raised when an id does not reference an existing entity."""

    default_kind = ErrorKind.NOT_FOUND


class CancellationError(DomainError):
    """Raised when a cancellation is not allowed for the requested day."""

    default_kind = ErrorKind.PAST_CUTOFF


class ConcurrencyConflict(DomainError):
    """Raised when a write keeps conflicting after the automatic retry."""

    default_kind = ErrorKind.CONCURRENCY_CONFLICT
