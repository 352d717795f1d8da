"""Tests for SQL substrate readiness checks."""

from __future__ import annotations

from types import SimpleNamespace

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from resources.substrates.postgres.health import ping


class _FakeConnection:
    """Minimal context-managed connection double capturing execute calls."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, object] | None]] = []

    def __enter__(self) -> "_FakeConnection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb

    def execute(self, statement, params=None) -> None:
        self.calls.append((str(statement), params))


class _FakeEngine:
    """Minimal engine double exposing ``connect`` and a dialect name."""

    def __init__(self, conn: _FakeConnection, dialect: str = "postgresql") -> None:
        self._conn = conn
        self.dialect = SimpleNamespace(name=dialect)

    def connect(self) -> _FakeConnection:
        return self._conn


def test_ping_applies_statement_timeout_on_postgres() -> None:
    """Ping should set statement timeout with set_config then run SELECT 1."""
    conn = _FakeConnection()

    assert ping(_FakeEngine(conn), timeout_seconds=1.2) is True
    assert conn.calls[0] == (
        "SELECT set_config('statement_timeout', :timeout_value, false)",
        {"timeout_value": "1200ms"},
    )
    assert conn.calls[1] == ("SELECT 1", None)


def test_ping_skips_statement_timeout_on_other_dialects() -> None:
    conn = _FakeConnection()

    assert ping(_FakeEngine(conn, dialect="sqlite")) is True
    assert conn.calls == [("SELECT 1", None)]


def test_ping_returns_false_when_connection_fails() -> None:
    """Ping should degrade cleanly when the check raises."""

    class _FailingEngine(_FakeEngine):
        def connect(self) -> _FakeConnection:
            raise ConnectionError("refused")

    assert ping(_FailingEngine(_FakeConnection())) is False


def test_ping_succeeds_against_in_memory_sqlite() -> None:
    engine = create_engine("sqlite://", poolclass=StaticPool)
    try:
        assert ping(engine) is True
    finally:
        engine.dispose()
