"""Pydantic settings for Cellar service behavior."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from packages.cellar_shared.config import CellarSettings, resolve_component_settings
from services.state.cellar.component import SERVICE_COMPONENT_ID


class CellarServiceSettings(BaseModel):
    """Cellar service runtime behavior settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_id_type: str = "id"
    inserted_at_field: str = "inserted_at"

    @field_validator("default_id_type", "inserted_at_field")
    @classmethod
    def _require_attribute_name(cls, value: str, info: ValidationInfo) -> str:
        """Require a usable record attribute name."""
        normalized = value.strip()
        if not normalized.isidentifier():
            raise ValueError(f"{info.field_name} must be a record attribute name")
        return normalized


def resolve_cellar_settings(settings: CellarSettings) -> CellarServiceSettings:
    """Resolve Cellar settings from ``components.service.cellar``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=CellarServiceSettings,
    )
