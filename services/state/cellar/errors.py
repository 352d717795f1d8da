"""Error codes and exception taxonomy for the Cellar service.

Each exception carries an ``ErrorDetail`` so the non-raising API can return
it inside a ``Result`` while ``store_or_raise`` raises the exception itself,
chained to the collaborator failure that caused it.
"""

from __future__ import annotations

from typing import ClassVar

from packages.cellar_shared.errors import (
    ErrorDetail,
    exception_to_error,
    internal_error,
    not_found_error,
    validation_error,
)
from resources.substrates.postgres.errors import (
    is_database_error,
    normalize_postgres_error,
)

MUTATION_FAILED = "MUTATION_FAILED"
SERIALIZATION_FAILED = "SERIALIZATION_FAILED"
DESERIALIZATION_FAILED = "DESERIALIZATION_FAILED"
VERSION_NOT_FOUND = "VERSION_NOT_FOUND"
STORE_FAILED = "STORE_FAILED"


class CellarError(Exception):
    """Base class for failures surfaced by the Cellar service."""

    code: ClassVar[str] = "CELLAR_ERROR"

    def __init__(self, message: str, *, detail: ErrorDetail | None = None) -> None:
        super().__init__(message)
        self.detail = detail if detail is not None else self._default_detail(message)

    def _default_detail(self, message: str) -> ErrorDetail:
        return internal_error(message, code=self.code)

    @classmethod
    def wrap(cls, exc: Exception, *, message: str) -> "CellarError":
        """Build this error from a collaborator exception.

        Category and retryability come from the normalized cause.
        """
        if is_database_error(exc):
            cause = normalize_postgres_error(exc)
        else:
            cause = exception_to_error(exc)
        return cls(message, detail=cause.recoded(cls.code, message=message))


class MutationError(CellarError):
    """The base record insert or update failed; no capture was attempted."""

    code = MUTATION_FAILED

    def _default_detail(self, message: str) -> ErrorDetail:
        return validation_error(message, code=self.code)


class SerializationError(CellarError):
    """A record could not be encoded into a version payload."""

    code = SERIALIZATION_FAILED


class DeserializationError(CellarError):
    """A version payload does not decode into the target record type."""

    code = DESERIALIZATION_FAILED

    def _default_detail(self, message: str) -> ErrorDetail:
        return validation_error(message, code=self.code)


class NotFoundError(CellarError):
    """No version matches a point-in-time lookup."""

    code = VERSION_NOT_FOUND

    def _default_detail(self, message: str) -> ErrorDetail:
        return not_found_error(message, code=self.code)


class StoreError(CellarError):
    """The version store failed while writing or reading version rows."""

    code = STORE_FAILED
