"""Factory helpers for creating consistent shared errors."""

from __future__ import annotations

from typing import Mapping

from . import codes
from .types import ErrorCategory, ErrorDetail


def validation_error(
    message: str,
    *,
    code: str = codes.VALIDATION_ERROR,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    """Create a validation-category error."""
    return _detail(ErrorCategory.VALIDATION, message, code, False, metadata)


def not_found_error(
    message: str,
    *,
    code: str = codes.NOT_FOUND,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    """Create a not-found-category error."""
    return _detail(ErrorCategory.NOT_FOUND, message, code, False, metadata)


def conflict_error(
    message: str,
    *,
    code: str = codes.CONFLICT,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    """Create a conflict-category error."""
    return _detail(ErrorCategory.CONFLICT, message, code, False, metadata)


def dependency_error(
    message: str,
    *,
    code: str = codes.DEPENDENCY_FAILURE,
    retryable: bool = True,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    """Create a dependency-category error, retryable unless told otherwise."""
    return _detail(ErrorCategory.DEPENDENCY, message, code, retryable, metadata)


def internal_error(
    message: str,
    *,
    code: str = codes.INTERNAL_ERROR,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    """Create an internal-category error."""
    return _detail(ErrorCategory.INTERNAL, message, code, False, metadata)


def _detail(
    category: ErrorCategory,
    message: str,
    code: str,
    retryable: bool,
    metadata: Mapping[str, str] | None,
) -> ErrorDetail:
    return ErrorDetail(
        code=code,
        message=message,
        category=category,
        retryable=retryable,
        metadata={} if metadata is None else dict(metadata),
    )
