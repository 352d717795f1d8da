"""Tests for the Cellar Alembic revision."""

from __future__ import annotations

import importlib.util
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from packages.cellar_shared.config import CellarSettings
from services.state.cellar.data.migrations import (
    MIGRATIONS_DIR,
    MigrationExecutionError,
    alembic_config,
    upgrade_version_store,
)

_REVISION = MIGRATIONS_DIR / "versions" / "20261019_0001_create_versions.py"


def _load_revision():
    spec = importlib.util.spec_from_file_location("cellar_rev_0001", _REVISION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_revision_is_the_cellar_root() -> None:
    revision = _load_revision()

    assert revision.revision == "20261019_0001"
    assert revision.down_revision is None


def test_upgrade_and_downgrade_manage_versions_table() -> None:
    revision = _load_revision()
    engine = create_engine("sqlite://")
    with engine.begin() as conn:
        with Operations.context(MigrationContext.configure(conn)):
            revision.upgrade()

        inspector = inspect(conn)
        columns = [column["name"] for column in inspector.get_columns("versions")]
        indexes = [index["name"] for index in inspector.get_indexes("versions")]
        assert columns == [
            "seq",
            "model_name",
            "model_id",
            "model_inserted_at",
            "version",
            "inserted_at",
        ]
        assert indexes == ["ix_versions_model_lookup"]

        with Operations.context(MigrationContext.configure(conn)):
            revision.downgrade()

        assert "versions" not in inspect(conn).get_table_names()
    engine.dispose()


def _sqlite_settings(path: Path) -> CellarSettings:
    return CellarSettings(
        components={"substrate": {"postgres": {"url": f"sqlite:///{path}"}}}
    )


def test_alembic_config_points_at_service_migrations(tmp_path: Path) -> None:
    config = alembic_config(_sqlite_settings(tmp_path / "cellar.db"))

    assert config.get_main_option("script_location") == str(MIGRATIONS_DIR)
    assert config.get_main_option("sqlalchemy.url").endswith("cellar.db")


def test_upgrade_version_store_runs_alembic_head(tmp_path: Path) -> None:
    database = tmp_path / "cellar.db"

    upgrade_version_store(settings=_sqlite_settings(database))

    engine = create_engine(f"sqlite:///{database}")
    try:
        assert "versions" in inspect(engine).get_table_names()
    finally:
        engine.dispose()


def test_upgrade_version_store_wraps_failures(tmp_path: Path) -> None:
    def failing_upgrade(config, revision) -> None:
        del config, revision
        raise RuntimeError("no database")

    with pytest.raises(MigrationExecutionError) as excinfo:
        upgrade_version_store(
            settings=_sqlite_settings(tmp_path / "cellar.db"),
            upgrade_fn=failing_upgrade,
        )

    assert isinstance(excinfo.value.__cause__, RuntimeError)
