"""Public API for shared Cellar configuration utilities."""

from .loader import load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    CellarSettings,
    ComponentsSettings,
    LoggingSettings,
    resolve_component_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "CellarSettings",
    "ComponentsSettings",
    "LoggingSettings",
    "load_settings",
    "resolve_component_settings",
]
