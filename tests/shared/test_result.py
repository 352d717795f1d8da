"""Tests for shared result values."""

from __future__ import annotations

import pytest

from packages.cellar_shared.errors import not_found_error
from packages.cellar_shared.result import failure, success


def test_success_carries_payload_without_errors() -> None:
    result = success([1, 2])

    assert result.ok
    assert result.has_payload
    assert result.payload == [1, 2]
    assert result.error is None


def test_failure_exposes_first_error() -> None:
    first = not_found_error("missing")
    result = failure([first, not_found_error("also missing")])

    assert not result.ok
    assert not result.has_payload
    assert result.error is first


def test_failure_requires_errors() -> None:
    with pytest.raises(ValueError):
        failure([])
