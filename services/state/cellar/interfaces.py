"""Persistence protocol used by the Cellar service."""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Any, Protocol

from sqlalchemy.orm import Session

from services.state.cellar.domain import VersionEntry


class VersionRepository(Protocol):
    """Protocol for records and their versions inside one transaction."""

    def transaction(self) -> AbstractContextManager[Session]:
        """Open a unit of work that commits on exit or rolls back on error."""

    def insert_record(
        self, session: Session, record: Any, changes: Mapping[str, Any]
    ) -> Any:
        """Apply changes to a new record, insert it and return stored state."""

    def update_record(
        self, session: Session, record: Any, changes: Mapping[str, Any]
    ) -> Any:
        """Apply changes to an existing record and return stored state."""

    def insert_version(
        self,
        session: Session,
        *,
        model_name: str,
        model_id: str | None,
        model_inserted_at: datetime | None,
        version: str,
        inserted_at: datetime,
    ) -> VersionEntry:
        """Append one version row."""

    def latest_version(
        self,
        session: Session,
        *,
        model_name: str,
        model_id: str | None,
        at_or_before: datetime,
    ) -> VersionEntry | None:
        """Return the newest version inserted at or before a timestamp."""

    def list_versions(
        self, session: Session, *, model_name: str, model_id: str | None
    ) -> list[VersionEntry]:
        """Return all versions of one record in insertion order."""

    def ping(self) -> bool:
        """Return whether the backing store is reachable."""
