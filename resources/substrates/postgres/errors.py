"""Postgres/SQLAlchemy exception normalization helpers."""

from __future__ import annotations

from packages.cellar_shared.errors import (
    ErrorDetail,
    codes,
    conflict_error,
    dependency_error,
    internal_error,
)


def is_database_error(exc: BaseException) -> bool:
    """Return whether one exception originates from the SQL driver stack."""
    module = type(exc).__module__
    return module.startswith(("sqlalchemy", "psycopg", "sqlite3"))


def normalize_postgres_error(exc: Exception) -> ErrorDetail:
    """Map low-level DB exceptions into shared structured error semantics."""
    exc_type_name = type(exc).__name__
    message = str(exc)
    metadata = {"exception_type": exc_type_name}

    if "UniqueViolation" in exc_type_name or "duplicate key value" in message:
        return conflict_error(
            "resource already exists",
            code=codes.ALREADY_EXISTS,
            metadata=metadata,
        )

    if "IntegrityError" in exc_type_name:
        return conflict_error(
            "constraint violated",
            code=codes.CONFLICT,
            metadata=metadata,
        )

    if "OperationalError" in exc_type_name or "timeout" in message.lower():
        return dependency_error(
            "database unavailable",
            code=codes.DEPENDENCY_UNAVAILABLE,
            retryable=True,
            metadata=metadata,
        )

    if "InterfaceError" in exc_type_name or "ProgrammingError" in exc_type_name:
        return dependency_error(
            "database request failed",
            code=codes.DEPENDENCY_FAILURE,
            retryable=False,
            metadata=metadata,
        )

    return internal_error(
        "unexpected database failure",
        code=codes.UNEXPECTED_EXCEPTION,
        metadata=metadata,
    )
