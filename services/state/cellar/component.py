"""Component identity for the Cellar versioning service."""

from __future__ import annotations

SERVICE_COMPONENT_ID = "service_cellar"
