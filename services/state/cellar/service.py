"""Authoritative in-process Python API for the Cellar versioning service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from packages.cellar_shared.config import CellarSettings
from packages.cellar_shared.result import Result
from services.state.cellar.domain import Changeset, HealthStatus
from services.state.cellar.interfaces import VersionRepository


class CellarService(ABC):
    """Public API for capturing and reading point-in-time record versions.

    Every operation accepts keyword-only ``repo`` and ``id_type`` overrides.
    ``repo`` replaces the configured repository for one call; ``id_type``
    names the record attribute used as identity.
    """

    @abstractmethod
    def store(
        self,
        record: Any,
        *,
        repo: VersionRepository | None = None,
        id_type: str | None = None,
    ) -> Result[Any]:
        """Capture the current state of one record as a new version."""

    @abstractmethod
    def store_or_raise(
        self,
        record: Any,
        *,
        repo: VersionRepository | None = None,
        id_type: str | None = None,
    ) -> Any:
        """Capture one record, raising ``CellarError`` on failure."""

    @abstractmethod
    def insert_and_store(
        self,
        changeset: Changeset[Any],
        *,
        repo: VersionRepository | None = None,
        id_type: str | None = None,
    ) -> Result[Any]:
        """Insert a record and capture it atomically."""

    @abstractmethod
    def update_and_store(
        self,
        changeset: Changeset[Any],
        *,
        repo: VersionRepository | None = None,
        id_type: str | None = None,
    ) -> Result[Any]:
        """Update a record and capture its post-update state atomically."""

    @abstractmethod
    def one(
        self,
        record: Any,
        timestamp: datetime,
        *,
        repo: VersionRepository | None = None,
        id_type: str | None = None,
    ) -> Result[Any]:
        """Return the record as it stood at ``timestamp``."""

    @abstractmethod
    def all(
        self,
        record: Any,
        *,
        repo: VersionRepository | None = None,
        id_type: str | None = None,
    ) -> Result[list[Any]]:
        """Return every captured version of the record, oldest first."""

    @abstractmethod
    def health(self) -> Result[HealthStatus]:
        """Return service and version store readiness."""


def build_cellar_service(
    *,
    settings: CellarSettings,
    repository: VersionRepository | None = None,
) -> CellarService:
    """Build the default Cellar implementation from typed settings."""
    from services.state.cellar.config import resolve_cellar_settings
    from services.state.cellar.data import CellarPostgresRuntime
    from services.state.cellar.implementation import DefaultCellarService

    if repository is None:
        repository = CellarPostgresRuntime.from_settings(settings).repository()
    return DefaultCellarService(
        settings=resolve_cellar_settings(settings),
        repository=repository,
    )
