"""Shared fixtures for Cellar service tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from resources.substrates.postgres import create_session_factory
from services.state.cellar.config import CellarServiceSettings
from services.state.cellar.data import SqlVersionRepository, metadata
from services.state.cellar.implementation import DefaultCellarService
from services.state.cellar.tests.sample_records import Base


class ManualClock:
    """Deterministic clock advanced explicitly by tests."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return create_session_factory(engine)


@pytest.fixture()
def repository(session_factory: sessionmaker[Session]) -> SqlVersionRepository:
    return SqlVersionRepository(session_factory)


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock(datetime(2024, 3, 1, 9, 0, 0, tzinfo=UTC))


@pytest.fixture()
def service(repository: SqlVersionRepository, clock: ManualClock) -> DefaultCellarService:
    return DefaultCellarService(
        settings=CellarServiceSettings(),
        repository=repository,
        clock=clock,
    )
