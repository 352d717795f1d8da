"""Tests for public API invocation and completion logging."""

from __future__ import annotations

import logging

import pytest

from packages.cellar_shared.errors import not_found_error
from packages.cellar_shared.logging import get_logger, public_api_logged
from packages.cellar_shared.result import failure, success

_LOGGER = get_logger("cellar.tests.public_api")


class _Service:
    @public_api_logged(logger=_LOGGER, component_id="service_demo")
    def ok(self) -> object:
        return success("done")

    @public_api_logged(logger=_LOGGER, component_id="service_demo", api_name="lookup")
    def missing(self) -> object:
        return failure([not_found_error("nothing here", code="DEMO_MISSING")])

    @public_api_logged(logger=_LOGGER, component_id="service_demo")
    def explode(self) -> object:
        raise RuntimeError("boom")


def _completions(caplog) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.getMessage() == "Public API completion"]


def test_successful_call_logs_invocation_and_completion(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger=_LOGGER.name)

    assert _Service().ok().payload == "done"

    messages = [record.getMessage() for record in caplog.records]
    assert messages == ["Public API invocation", "Public API completion"]
    [completion] = _completions(caplog)
    assert completion.levelno == logging.INFO


def test_failed_result_logs_warning_completion(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger=_LOGGER.name)

    result = _Service().missing()

    assert not result.ok
    [completion] = _completions(caplog)
    assert completion.levelno == logging.WARNING


def test_raised_exception_is_logged_and_reraised(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger=_LOGGER.name)

    with pytest.raises(RuntimeError, match="boom"):
        _Service().explode()

    [completion] = _completions(caplog)
    assert completion.levelno == logging.WARNING


def test_decorator_preserves_method_metadata() -> None:
    assert _Service.ok.__name__ == "ok"


def test_completion_summary_uses_code_and_message() -> None:
    from packages.cellar_shared.logging.public_api import _result_summary

    ok, errors = _result_summary(
        failure([not_found_error("nothing here", code="DEMO_MISSING")])
    )

    assert ok is False
    assert errors == ["DEMO_MISSING: nothing here"]
