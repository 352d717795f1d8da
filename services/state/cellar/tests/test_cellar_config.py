"""Tests for Cellar service settings resolution."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from packages.cellar_shared.config import CellarSettings
from services.state.cellar.config import (
    CellarServiceSettings,
    resolve_cellar_settings,
)


def test_defaults() -> None:
    settings = CellarServiceSettings()

    assert settings.default_id_type == "id"
    assert settings.inserted_at_field == "inserted_at"


def test_resolves_from_service_namespace() -> None:
    settings = CellarSettings(
        components={"service": {"cellar": {"default_id_type": " uuid "}}}
    )

    resolved = resolve_cellar_settings(settings)

    assert resolved.default_id_type == "uuid"
    assert resolved.inserted_at_field == "inserted_at"


@pytest.mark.parametrize("value", ["", "   ", "not an attr"])
def test_rejects_unusable_attribute_names(value: str) -> None:
    with pytest.raises(ValidationError):
        CellarServiceSettings(default_id_type=value)


def test_rejects_unknown_keys() -> None:
    with pytest.raises(ValidationError):
        CellarServiceSettings(table="versions")
