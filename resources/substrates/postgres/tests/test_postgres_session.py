"""Tests for unit-of-work session helpers."""

from __future__ import annotations

import pytest
from sqlalchemy import Column, Integer, MetaData, Table, create_engine, insert, select
from sqlalchemy.pool import StaticPool

from resources.substrates.postgres.session import (
    create_session_factory,
    transactional_session,
)

_metadata = MetaData()
_items = Table("items", _metadata, Column("id", Integer, primary_key=True))


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    _metadata.create_all(engine)
    yield create_session_factory(engine)
    engine.dispose()


def _count(session_factory) -> int:
    with session_factory() as session:
        return len(session.execute(select(_items)).all())


def test_transactional_session_commits_on_success(session_factory) -> None:
    with transactional_session(session_factory) as session:
        session.execute(insert(_items).values(id=1))

    assert _count(session_factory) == 1


def test_transactional_session_rolls_back_and_reraises(session_factory) -> None:
    with pytest.raises(RuntimeError, match="boom"):
        with transactional_session(session_factory) as session:
            session.execute(insert(_items).values(id=1))
            raise RuntimeError("boom")

    assert _count(session_factory) == 0


def test_session_factory_keeps_instances_loaded_after_commit(session_factory) -> None:
    assert session_factory.kw["expire_on_commit"] is False
