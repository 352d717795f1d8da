"""Typed result values for the non-raising public API.

A ``Result`` either carries a payload with no errors, or one or more
``ErrorDetail`` values describing why the operation did not complete.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Iterable, TypeVar

from packages.cellar_shared.errors import ErrorDetail

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of one public API call."""

    payload: T | None
    errors: list[ErrorDetail] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return True when no errors are present."""
        return len(self.errors) == 0

    @property
    def has_payload(self) -> bool:
        """Return True when payload is present."""
        return self.payload is not None

    @property
    def error(self) -> ErrorDetail | None:
        """Return the first error, or None for successful results."""
        return self.errors[0] if self.errors else None


def success(payload: T) -> Result[T]:
    """Build a successful result with payload and no errors."""
    return Result(payload=payload, errors=[])


def failure(errors: Iterable[ErrorDetail], *, payload: T | None = None) -> Result[T]:
    """Build a failed result with one or more errors."""
    normalized = list(errors)
    if not normalized:
        raise ValueError("failure results require at least one error")
    return Result(payload=payload, errors=normalized)
