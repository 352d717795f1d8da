"""Exception normalization utilities for shared error contracts."""

from __future__ import annotations

from . import codes
from .factories import (
    dependency_error,
    internal_error,
    not_found_error,
    validation_error,
)
from .types import ErrorDetail


def exception_to_error(exc: Exception) -> ErrorDetail:
    """Normalize a non-database exception into a shared ``ErrorDetail``.

    Database driver exceptions go through
    ``resources.substrates.postgres.errors.normalize_postgres_error`` instead.
    """
    metadata = {"exception_type": type(exc).__name__}

    if isinstance(exc, ValueError):
        return validation_error(str(exc), metadata=metadata)

    if isinstance(exc, KeyError):
        return not_found_error(str(exc.args[0]) if exc.args else "", metadata=metadata)

    if isinstance(exc, (TimeoutError, ConnectionError)):
        return dependency_error(
            str(exc) or "dependency unavailable",
            code=codes.DEPENDENCY_UNAVAILABLE,
            retryable=True,
            metadata=metadata,
        )

    return internal_error(
        str(exc) or "unexpected exception",
        code=codes.UNEXPECTED_EXCEPTION,
        metadata=metadata,
    )
