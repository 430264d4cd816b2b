"""Custom exceptions for the record modeling layer."""

from __future__ import annotations

from typing import Iterable


class RedilexError(Exception):
    """Base exception for all redilex failures."""


class ModelShapeError(RedilexError):
    """Raised when a model definition or its options are invalid."""


class ValidationError(RedilexError):
    """Raised when operation input fails field or request validation.

    ``details`` holds one entry per offending item, each a dict with the
    ``index`` of the record (or ``None`` for request-level failures), the
    ``field`` name when known, and a ``message``.
    """

    def __init__(self, message: str, details: list[dict[str, object]] | None = None) -> None:
        super().__init__(message)
        self.details = details or []

    def to_dict(self) -> dict[str, object]:
        return {
            "error": "ValidationError",
            "message": str(self),
            "details": list(self.details),
        }


class NotFoundError(RedilexError):
    """Raised when update/remove references ids with no stored record."""

    def __init__(self, ids: Iterable[str]) -> None:
        self.ids = list(ids)
        super().__init__(f"No record found for id(s): {', '.join(self.ids)}")


class StoreError(RedilexError):
    """Raised when the backing store rejects a command or a batch."""


class HookError(RedilexError):
    """Raised when a user hook fails or returns something other than a mapping."""
