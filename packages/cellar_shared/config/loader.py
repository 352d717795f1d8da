"""Settings loading with deterministic precedence.

The cascade is always:
1) explicit overrides (``cli_params``)
2) environment variables
3) YAML config file (``~/.config/cellar/cellar.yaml`` unless overridden)
4) model defaults

Environment variable format:
- Prefix: ``CELLAR_``
- Nested keys: ``__`` separator
- Example: ``CELLAR_LOGGING__LEVEL=DEBUG`` -> ``logging.level = "DEBUG"``
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from .models import _CONFIG_PATH, DEFAULT_CONFIG_PATH, CellarSettings


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
) -> CellarSettings:
    """Build ``CellarSettings`` from overrides, env, YAML and defaults."""
    resolved = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    token = _CONFIG_PATH.set(resolved)
    try:
        return CellarSettings(**dict(cli_params or {}))
    finally:
        _CONFIG_PATH.reset(token)
