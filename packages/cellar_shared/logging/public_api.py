"""Invocation logging for public API methods.

``public_api_logged`` wraps one public method so every call emits a
structured invocation line and a completion line carrying success, duration
and sanitized error summaries. Methods returning ``Result`` values report
their own outcome; methods that raise are logged as failures and the
exception is re-raised unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from time import perf_counter
from typing import Any, Callable, Mapping

from . import fields
from .context import log_context


@dataclass(frozen=True)
class InvocationContext:
    """Structured metadata describing one public API invocation."""

    component_id: str
    api_name: str


@dataclass(frozen=True)
class CompletionContext:
    """Structured metadata describing one completed public API invocation."""

    invocation: InvocationContext
    success: bool
    duration_ms: float
    errors: list[str]


def public_api_logged(
    *,
    logger: Any,
    component_id: str,
    api_name: str | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate one public API method with invocation/completion logging."""

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        method_name = api_name or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            invocation = InvocationContext(
                component_id=component_id, api_name=method_name
            )
            with log_context(_invocation_log_context(invocation)):
                logger.debug("Public API invocation")
            started = perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                _log_completion(
                    logger,
                    CompletionContext(
                        invocation=invocation,
                        success=False,
                        duration_ms=_elapsed_ms(started),
                        errors=[f"{type(exc).__name__}: {exc}"],
                    ),
                )
                raise
            success, errors = _result_summary(result)
            _log_completion(
                logger,
                CompletionContext(
                    invocation=invocation,
                    success=success,
                    duration_ms=_elapsed_ms(started),
                    errors=errors,
                ),
            )
            return result

        return wrapper

    return decorator


def _log_completion(logger: Any, context: CompletionContext) -> None:
    """Emit standardized structured completion log."""
    payload = _invocation_log_context(context.invocation)
    payload.update(
        {
            fields.EVENT: fields.PUBLIC_API_COMPLETION_EVENT,
            fields.SUCCESS: context.success,
            fields.DURATION_MS: context.duration_ms,
            fields.ERRORS: context.errors,
        }
    )
    with log_context(payload):
        if context.success:
            logger.info("Public API completion")
        else:
            logger.warning("Public API completion")


def _elapsed_ms(started: float) -> float:
    return round((perf_counter() - started) * 1000.0, 3)


def _result_summary(result: object) -> tuple[bool, list[str]]:
    """Infer success and sanitized error summaries from a result value."""
    errors = _sanitize_errors(getattr(result, "errors", []))
    ok_value = getattr(result, "ok", None)
    if isinstance(ok_value, bool):
        return ok_value, errors
    return len(errors) == 0, errors


def _sanitize_errors(errors: object) -> list[str]:
    """Return safe one-line error summaries for logs."""
    if not isinstance(errors, list):
        return []
    summaries: list[str] = []
    for item in errors:
        if isinstance(item, Mapping):
            code = item.get("code")
            message = item.get("message")
        else:
            code = getattr(item, "code", None)
            message = getattr(item, "message", None)
        if message in (None, ""):
            continue
        if code in (None, ""):
            summaries.append(str(message))
        else:
            summaries.append(f"{code}: {message}")
    return summaries


def _invocation_log_context(context: InvocationContext) -> dict[str, object]:
    """Build common structured fields for one invocation event."""
    return {
        fields.EVENT: fields.PUBLIC_API_INVOCATION_EVENT,
        fields.COMPONENT_ID: context.component_id,
        fields.API_NAME: context.api_name,
    }
