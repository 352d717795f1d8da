"""Concrete Cellar service implementation."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

from sqlalchemy.orm import Session

from packages.cellar_shared.config import CellarSettings
from packages.cellar_shared.errors import validation_error
from packages.cellar_shared.logging import (
    fields,
    get_logger,
    log_context,
    public_api_logged,
)
from packages.cellar_shared.result import Result, failure, success
from services.state.cellar.codec import decode, encode
from services.state.cellar.component import SERVICE_COMPONENT_ID
from services.state.cellar.config import (
    CellarServiceSettings,
    resolve_cellar_settings,
)
from services.state.cellar.data import CellarPostgresRuntime
from services.state.cellar.domain import Changeset, HealthStatus, VersionEntry
from services.state.cellar.errors import (
    CellarError,
    MutationError,
    NotFoundError,
    SerializationError,
    StoreError,
)
from services.state.cellar.interfaces import VersionRepository
from services.state.cellar.records import VersionedRecord, type_name_of
from services.state.cellar.service import CellarService

_LOGGER = get_logger(__name__)

T = TypeVar("T")


def _utc_now() -> datetime:
    return datetime.now(UTC)


class DefaultCellarService(CellarService):
    """Default Cellar implementation over a SQL version repository."""

    def __init__(
        self,
        *,
        settings: CellarServiceSettings,
        repository: VersionRepository,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._settings = settings
        self._repository = repository
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: CellarSettings) -> "DefaultCellarService":
        """Build the service from typed settings and its owned runtime."""
        runtime = CellarPostgresRuntime.from_settings(settings)
        return cls(
            settings=resolve_cellar_settings(settings),
            repository=runtime.repository(),
        )

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def store(
        self,
        record: Any,
        *,
        repo: VersionRepository | None = None,
        id_type: str | None = None,
    ) -> Result[Any]:
        """Capture one record as-is; the record itself is not written."""
        try:
            self._store(record, repo=repo, id_type=id_type)
        except CellarError as exc:
            return self._failure("store", exc)
        return success(record)

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def store_or_raise(
        self,
        record: Any,
        *,
        repo: VersionRepository | None = None,
        id_type: str | None = None,
    ) -> Any:
        self._store(record, repo=repo, id_type=id_type)
        return record

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def insert_and_store(
        self,
        changeset: Changeset[Any],
        *,
        repo: VersionRepository | None = None,
        id_type: str | None = None,
    ) -> Result[Any]:
        """Insert a record and capture its stored state in one transaction."""
        repository = self._repository_for(repo)

        def work(session: Session) -> Any:
            record = self._mutate(
                changeset,
                lambda: repository.insert_record(
                    session, changeset.record, changeset.changes
                ),
            )
            self._capture(repository, session, record, id_type=id_type)
            return record

        try:
            stored = self._in_transaction(repository, work)
        except CellarError as exc:
            return self._failure("insert_and_store", exc)
        return success(stored)

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def update_and_store(
        self,
        changeset: Changeset[Any],
        *,
        repo: VersionRepository | None = None,
        id_type: str | None = None,
    ) -> Result[Any]:
        """Update a record and capture its post-update state in one transaction."""
        repository = self._repository_for(repo)

        def work(session: Session) -> Any:
            record = self._mutate(
                changeset,
                lambda: repository.update_record(
                    session, changeset.record, changeset.changes
                ),
            )
            self._capture(repository, session, record, id_type=id_type)
            return record

        try:
            stored = self._in_transaction(repository, work)
        except CellarError as exc:
            return self._failure("update_and_store", exc)
        return success(stored)

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def one(
        self,
        record: Any,
        timestamp: datetime,
        *,
        repo: VersionRepository | None = None,
        id_type: str | None = None,
    ) -> Result[Any]:
        """Return the newest version inserted at or before ``timestamp``.

        Naive timestamps are read as UTC.
        """
        repository = self._repository_for(repo)
        record_type = type(record)
        model_name = type_name_of(record_type)
        model_id = self._record_id(record, id_type)
        at_or_before = _normalize_utc(timestamp)
        try:
            entry = self._in_transaction(
                repository,
                lambda session: repository.latest_version(
                    session,
                    model_name=model_name,
                    model_id=model_id,
                    at_or_before=at_or_before,
                ),
                message="version lookup failed",
            )
            if entry is None:
                raise NotFoundError(
                    f"no version of {model_name} at or before "
                    f"{at_or_before.isoformat()}"
                )
            restored = decode(entry.version, record_type)
        except CellarError as exc:
            return self._failure("one", exc)
        return success(restored)

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def all(
        self,
        record: Any,
        *,
        repo: VersionRepository | None = None,
        id_type: str | None = None,
    ) -> Result[list[Any]]:
        """Return every version of the record in insertion order."""
        repository = self._repository_for(repo)
        record_type = type(record)
        model_name = type_name_of(record_type)
        model_id = self._record_id(record, id_type)
        try:
            entries = self._in_transaction(
                repository,
                lambda session: repository.list_versions(
                    session, model_name=model_name, model_id=model_id
                ),
                message="version listing failed",
            )
            restored = [decode(entry.version, record_type) for entry in entries]
        except CellarError as exc:
            return self._failure("all", exc)
        return success(restored)

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def health(self) -> Result[HealthStatus]:
        """Return Cellar readiness based on version store reachability."""
        try:
            ready = self._repository.ping()
        except Exception as exc:  # noqa: BLE001
            return self._failure(
                "health", StoreError.wrap(exc, message="health probe failed")
            )
        return success(
            HealthStatus(
                service_ready=True,
                substrate_ready=ready,
                detail="ok" if ready else "version store unreachable",
            )
        )

    def _store(
        self, record: Any, *, repo: VersionRepository | None, id_type: str | None
    ) -> VersionEntry:
        repository = self._repository_for(repo)
        return self._in_transaction(
            repository,
            lambda session: self._capture(
                repository, session, record, id_type=id_type
            ),
        )

    def _capture(
        self,
        repository: VersionRepository,
        session: Session,
        record: Any,
        *,
        id_type: str | None,
    ) -> VersionEntry:
        """Encode one record and append it as a version inside ``session``."""
        if not isinstance(record, VersionedRecord):
            raise SerializationError(
                f"{type(record).__name__} does not declare versioned fields"
            )
        record_type = type(record)
        model_name = type_name_of(record_type)
        model_id = self._record_id(record, id_type)
        with log_context({fields.MODEL_NAME: model_name, fields.MODEL_ID: model_id}):
            payload = encode(record, record_type.field_names())
            try:
                entry = repository.insert_version(
                    session,
                    model_name=model_name,
                    model_id=model_id,
                    model_inserted_at=self._captured_at(record),
                    version=payload,
                    inserted_at=_normalize_utc(self._clock()),
                )
            except Exception as exc:
                raise StoreError.wrap(exc, message="version insert failed") from exc
            _LOGGER.debug("Captured version seq=%s", entry.seq)
        return entry

    def _mutate(self, changeset: Changeset[Any], apply: Callable[[], T]) -> T:
        """Run one record write, mapping its failure to ``MutationError``."""
        record_type = type(changeset.record)
        model_name = type_name_of(record_type)
        declared = set(getattr(record_type, "field_names", tuple)())
        unknown = sorted(name for name in changeset.changes if name not in declared)
        if unknown:
            message = f"unknown fields for {model_name}: {', '.join(unknown)}"
            raise MutationError(
                message,
                detail=validation_error(message, code=MutationError.code),
            )
        try:
            return apply()
        except Exception as exc:
            raise MutationError.wrap(
                exc, message=f"{model_name} write failed"
            ) from exc

    def _in_transaction(
        self,
        repository: VersionRepository,
        work: Callable[[Session], T],
        *,
        message: str = "version store transaction failed",
    ) -> T:
        """Run ``work`` in one unit of work; failures roll back every write."""
        try:
            with repository.transaction() as session:
                return work(session)
        except CellarError:
            raise
        except Exception as exc:
            raise StoreError.wrap(exc, message=message) from exc

    def _repository_for(self, repo: VersionRepository | None) -> VersionRepository:
        return self._repository if repo is None else repo

    def _record_id(self, record: Any, id_type: str | None) -> str | None:
        value = getattr(record, id_type or self._settings.default_id_type, None)
        if value is None:
            return None
        return str(value)

    def _captured_at(self, record: Any) -> datetime | None:
        value = getattr(record, self._settings.inserted_at_field, None)
        if value is None:
            return None
        if not isinstance(value, datetime):
            raise SerializationError(
                f"{self._settings.inserted_at_field} must be a datetime, "
                f"got {type(value).__name__}"
            )
        return _normalize_utc(value)

    def _failure(self, operation: str, exc: CellarError) -> Result[Any]:
        """Log one failed operation and convert it into a result."""
        _LOGGER.warning(
            "Cellar %s failed: code=%s category=%s",
            operation,
            exc.detail.code,
            exc.detail.category.value,
            exc_info=exc,
        )
        return failure([exc.detail])


def _normalize_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
