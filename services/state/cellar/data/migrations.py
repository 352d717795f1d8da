"""Alembic upgrade entrypoint for the Cellar version store."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from alembic import command
from alembic.config import Config

from packages.cellar_shared.config import CellarSettings
from packages.cellar_shared.logging import get_logger
from resources.substrates.postgres.config import resolve_postgres_settings

MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "migrations"

_LOGGER = get_logger(__name__)


class MigrationExecutionError(RuntimeError):
    """Raised when a version store migration fails."""


def alembic_config(settings: CellarSettings) -> Config:
    """Build an in-memory Alembic config targeting the configured database."""
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    url = resolve_postgres_settings(settings).url
    config.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return config


def upgrade_version_store(
    *,
    settings: CellarSettings,
    revision: str = "head",
    upgrade_fn: Callable[[Config, str], None] = command.upgrade,
) -> None:
    """Upgrade the versions table schema to ``revision``."""
    try:
        upgrade_fn(alembic_config(settings), revision)
    except Exception as exc:
        raise MigrationExecutionError(
            f"version store migration to '{revision}' failed"
        ) from exc
    _LOGGER.info("Version store migrated to %s", revision)
