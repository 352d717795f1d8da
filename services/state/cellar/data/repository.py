"""SQL repository for records and their captured versions."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import insert, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session, sessionmaker

from resources.substrates.postgres import ping, transactional_session
from services.state.cellar.domain import VersionEntry
from services.state.cellar.interfaces import VersionRepository

from .schema import versions


class SqlVersionRepository(VersionRepository):
    """Repository over the ``versions`` table and caller-owned record tables."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        health_timeout_seconds: float = 1.0,
    ) -> None:
        self._session_factory = session_factory
        self._health_timeout_seconds = health_timeout_seconds

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        with transactional_session(self._session_factory) as session:
            yield session

    def insert_record(
        self, session: Session, record: Any, changes: Mapping[str, Any]
    ) -> Any:
        """Insert one ORM instance and reload database-generated values."""
        for name, value in changes.items():
            setattr(record, name, value)
        session.add(record)
        session.flush()
        session.refresh(record)
        return record

    def update_record(
        self, session: Session, record: Any, changes: Mapping[str, Any]
    ) -> Any:
        """Apply changes to the stored row with the record's identity.

        Raises ``KeyError`` when no such row exists.
        """
        record_type = type(record)
        identity = sa_inspect(record_type).primary_key_from_instance(record)
        current = None
        if all(value is not None for value in identity):
            current = session.get(record_type, tuple(identity))
        if current is None:
            raise KeyError(
                f"no stored {record_type.__name__} with identity {tuple(identity)!r}"
            )
        for name, value in changes.items():
            setattr(current, name, value)
        session.flush()
        session.refresh(current)
        return current

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
        result = session.execute(
            insert(versions).values(
                model_name=model_name,
                model_id=model_id,
                model_inserted_at=model_inserted_at,
                version=version,
                inserted_at=inserted_at,
            )
        )
        return VersionEntry(
            seq=int(result.inserted_primary_key[0]),
            model_name=model_name,
            model_id=model_id,
            model_inserted_at=_normalize_dt(model_inserted_at),
            version=version,
            inserted_at=_normalize_dt(inserted_at),
        )

    def latest_version(
        self,
        session: Session,
        *,
        model_name: str,
        model_id: str | None,
        at_or_before: datetime,
    ) -> VersionEntry | None:
        row = (
            session.execute(
                select(versions)
                .where(
                    versions.c.model_name == model_name,
                    _model_id_clause(model_id),
                    versions.c.inserted_at <= at_or_before,
                )
                .order_by(versions.c.seq.desc())
                .limit(1)
            )
            .mappings()
            .one_or_none()
        )
        if row is None:
            return None
        return _to_entry(row)

    def list_versions(
        self, session: Session, *, model_name: str, model_id: str | None
    ) -> list[VersionEntry]:
        rows = (
            session.execute(
                select(versions)
                .where(versions.c.model_name == model_name, _model_id_clause(model_id))
                .order_by(versions.c.seq.asc())
            )
            .mappings()
            .all()
        )
        return [_to_entry(row) for row in rows]

    def ping(self) -> bool:
        with self._session_factory() as session:
            return ping(
                session.get_bind(), timeout_seconds=self._health_timeout_seconds
            )


def _model_id_clause(model_id: str | None) -> Any:
    if model_id is None:
        return versions.c.model_id.is_(None)
    return versions.c.model_id == model_id


def _to_entry(row: Mapping[str, Any]) -> VersionEntry:
    """Map one ``versions`` row into a domain entry."""
    return VersionEntry(
        seq=int(row["seq"]),
        model_name=str(row["model_name"]),
        model_id=None if row["model_id"] is None else str(row["model_id"]),
        model_inserted_at=_normalize_dt(row["model_inserted_at"]),
        version=str(row["version"]),
        inserted_at=_row_dt(row["inserted_at"]),
    )


def _row_dt(value: object) -> datetime:
    """Normalize DB datetime values to timezone-aware UTC datetimes."""
    if not isinstance(value, datetime):
        raise ValueError("expected datetime value from database row")
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _normalize_dt(value: object) -> datetime | None:
    if value is None:
        return None
    return _row_dt(value)
