"""Tests for pydantic-settings-backed shared configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import BaseModel, ValidationError

from packages.cellar_shared.config import (
    CellarSettings,
    load_settings,
    resolve_component_settings,
)
from resources.substrates.postgres.config import PostgresSettings
from services.state.cellar.component import SERVICE_COMPONENT_ID
from services.state.cellar.config import CellarServiceSettings


def _write_config(path: Path) -> Path:
    path.write_text(
        "\n".join(
            [
                "logging:",
                "  level: WARNING",
                "components:",
                "  service:",
                "    cellar:",
                "      default_id_type: uuid",
                "  substrate:",
                "    postgres:",
                "      pool_size: 7",
                "      max_overflow: 3",
            ]
        ),
        encoding="utf-8",
    )
    return path


def test_load_settings_uses_cellar_precedence_cascade(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Init params should override env, env should override YAML, then defaults."""
    config_file = _write_config(tmp_path / "cellar.yaml")
    monkeypatch.setenv("CELLAR_LOGGING__LEVEL", "ERROR")
    monkeypatch.setenv("CELLAR_COMPONENTS__SUBSTRATE__POSTGRES__POOL_SIZE", "9")

    settings = load_settings(
        cli_params={"logging": {"level": "DEBUG"}},
        config_path=config_file,
    )

    postgres = resolve_component_settings(
        settings=settings,
        component_id="substrate_postgres",
        model=PostgresSettings,
    )
    cellar = resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=CellarServiceSettings,
    )

    assert settings.logging.level == "DEBUG"
    assert postgres.pool_size == 9
    assert postgres.max_overflow == 3
    assert cellar.default_id_type == "uuid"
    assert cellar.inserted_at_field == "inserted_at"


def test_load_settings_falls_back_to_defaults_without_config_file(
    tmp_path: Path,
) -> None:
    settings = load_settings(config_path=tmp_path / "missing.yaml")

    assert settings.logging.level == "INFO"
    assert settings.logging.service == "cellar"
    assert resolve_component_settings(
        settings=settings,
        component_id="substrate_postgres",
        model=PostgresSettings,
    ) == PostgresSettings()


def test_flat_component_keys_are_rejected() -> None:
    with pytest.raises(ValidationError, match="components.service.cellar"):
        CellarSettings(components={"service_cellar": {"default_id_type": "x"}})


def test_resolve_component_settings_rejects_unknown_kind() -> None:
    class _Anything(BaseModel):
        pass

    with pytest.raises(ValueError, match="unsupported component id"):
        resolve_component_settings(
            settings=CellarSettings(),
            component_id="actor_reader",
            model=_Anything,
        )


def test_resolve_component_settings_rejects_non_mapping_values() -> None:
    settings = CellarSettings(components={"service": {"cellar": "oops"}})

    with pytest.raises(TypeError):
        resolve_component_settings(
            settings=settings,
            component_id=SERVICE_COMPONENT_ID,
            model=CellarServiceSettings,
        )
