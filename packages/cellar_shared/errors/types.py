"""Canonical shared error types for Cellar components.

Errors are plain frozen values so they can be returned inside ``Result``
objects, compared in tests, and logged without carrying live exception
objects across the public API boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Mapping


class ErrorCategory(str, Enum):
    """High-level error categories shared across component boundaries."""

    UNSPECIFIED = "unspecified"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    DEPENDENCY = "dependency"
    INTERNAL = "internal"


@dataclass(frozen=True)
class ErrorDetail:
    """Structured error object carried by result values."""

    code: str
    message: str
    category: ErrorCategory
    retryable: bool = False
    metadata: Mapping[str, str] = field(default_factory=dict)

    def recoded(
        self,
        code: str,
        *,
        message: str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> "ErrorDetail":
        """Return a copy under a new code, keeping category and retryability.

        The previous code is preserved as ``cause_code`` in metadata.
        """
        merged = {**self.metadata, "cause_code": self.code, **(metadata or {})}
        return replace(
            self,
            code=code,
            message=self.message if message is None else message,
            metadata=merged,
        )
