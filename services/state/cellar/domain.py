"""Domain contracts for Cellar version payloads."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

R = TypeVar("R")


class VersionEntry(BaseModel):
    """One immutable captured version of a record.

    ``model_id`` is ``None`` when the record had no identity value at capture
    time. ``model_inserted_at`` is the record's own creation timestamp, if it
    carries one.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", protected_namespaces=())

    seq: int
    model_name: str
    model_id: str | None
    model_inserted_at: datetime | None
    version: str
    inserted_at: datetime


@dataclass(frozen=True)
class Changeset(Generic[R]):
    """Pending field changes against one record.

    For inserts ``record`` is the new instance; for updates it is the current
    stored state.
    """

    record: R
    changes: Mapping[str, Any] = field(default_factory=dict)


class HealthStatus(BaseModel):
    """Cellar and version store readiness payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_ready: bool
    substrate_ready: bool
    detail: str
