"""Data-layer exports for the Cellar service."""

from services.state.cellar.data.migrations import (
    MigrationExecutionError,
    upgrade_version_store,
)
from services.state.cellar.data.repository import SqlVersionRepository
from services.state.cellar.data.runtime import CellarPostgresRuntime
from services.state.cellar.data.schema import metadata, versions

__all__ = [
    "CellarPostgresRuntime",
    "MigrationExecutionError",
    "SqlVersionRepository",
    "metadata",
    "upgrade_version_store",
    "versions",
]
