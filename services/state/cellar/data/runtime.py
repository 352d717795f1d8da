"""Cellar-owned Postgres runtime wiring."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from packages.cellar_shared.config import CellarSettings
from resources.substrates.postgres import (
    create_postgres_engine,
    create_session_factory,
    resolve_postgres_settings,
)
from services.state.cellar.data.repository import SqlVersionRepository


@dataclass(frozen=True)
class CellarPostgresRuntime:
    """Concrete handle for the engine and sessions backing the version store."""

    engine: Engine
    session_factory: sessionmaker[Session]
    health_timeout_seconds: float = 1.0

    @classmethod
    def from_settings(cls, settings: CellarSettings) -> "CellarPostgresRuntime":
        """Build the DB runtime from typed application settings."""
        postgres_config = resolve_postgres_settings(settings)
        engine = create_postgres_engine(postgres_config)
        return cls(
            engine=engine,
            session_factory=create_session_factory(engine),
            health_timeout_seconds=postgres_config.health_timeout_seconds,
        )

    def repository(self) -> SqlVersionRepository:
        """Return a version repository bound to this runtime's sessions."""
        return SqlVersionRepository(
            self.session_factory,
            health_timeout_seconds=self.health_timeout_seconds,
        )
