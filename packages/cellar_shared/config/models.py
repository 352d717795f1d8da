"""Typed configuration models for Cellar runtime settings."""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "cellar" / "cellar.yaml"

_CONFIG_PATH: ContextVar[Path] = ContextVar(
    "cellar_config_path", default=DEFAULT_CONFIG_PATH
)

_COMPONENT_KINDS = ("service", "substrate")


class LoggingSettings(BaseModel):
    """Structured logging configuration shared by Cellar components."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "cellar"
    environment: str = "dev"


class ComponentNamespaceSettings(BaseModel):
    """Namespace map for grouped component settings under ``components.<kind>``."""

    model_config = ConfigDict(extra="allow")


class ComponentsSettings(BaseModel):
    """Typed ``components`` subtree holding component-local settings."""

    model_config = ConfigDict(extra="forbid")

    service: ComponentNamespaceSettings = Field(
        default_factory=ComponentNamespaceSettings
    )
    substrate: ComponentNamespaceSettings = Field(
        default_factory=ComponentNamespaceSettings
    )

    @model_validator(mode="before")
    @classmethod
    def _reject_flat_component_keys(cls, value: object) -> object:
        """Reject flat ``service_x`` keys in favor of grouped namespaces."""
        if not isinstance(value, dict):
            return value
        for key in value:
            if not isinstance(key, str):
                continue
            kind, separator, name = key.partition("_")
            if separator and kind in _COMPONENT_KINDS:
                raise ValueError(
                    f"components.{key} is invalid; use components.{kind}.{name} instead"
                )
        return value


class CellarSettings(BaseSettings):
    """Root runtime settings resolved from init/env/yaml/default sources."""

    model_config = SettingsConfigDict(
        env_prefix="CELLAR_",
        env_nested_delimiter="__",
        extra="ignore",
        nested_model_default_partial_update=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    components: ComponentsSettings = Field(default_factory=ComponentsSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Apply Cellar precedence: init > env > yaml > model defaults."""
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(
                settings_cls,
                yaml_file=_CONFIG_PATH.get(),
                yaml_file_encoding="utf-8",
            ),
        )


TComponentSettings = TypeVar("TComponentSettings", bound=BaseModel)


def resolve_component_settings(
    *,
    settings: CellarSettings,
    component_id: str,
    model: type[TComponentSettings],
) -> TComponentSettings:
    """Resolve one component settings object from grouped ``components`` keys.

    ``service_cellar`` resolves ``components.service.cellar``;
    ``substrate_postgres`` resolves ``components.substrate.postgres``.
    """
    kind, separator, name = component_id.partition("_")
    if not separator or kind not in _COMPONENT_KINDS:
        raise ValueError(f"unsupported component id: {component_id!r}")

    raw_components = settings.components.model_dump(mode="python")
    namespace = raw_components.get(kind, {})
    resolved = namespace.get(name, {}) if isinstance(namespace, dict) else None
    if not isinstance(resolved, dict):
        raise TypeError(f"components.{kind}.{name} must resolve to an object mapping")
    return model.model_validate(resolved)
