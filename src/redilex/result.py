"""Operation results: ``(error, value)`` pairs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterator, Optional, TypeVar

from redilex.errors import RedilexError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of one model operation.

    Unpacks as ``error, value`` so callers can write
    ``err, ids = users.create(...)``; ``unwrap`` raises instead.
    """

    error: Optional[RedilexError] = None
    value: Optional[T] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def __iter__(self) -> Iterator[object]:
        yield self.error
        yield self.value
