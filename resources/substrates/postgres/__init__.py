"""Shared SQL substrate primitives for Cellar services."""

from resources.substrates.postgres.component import RESOURCE_COMPONENT_ID
from resources.substrates.postgres.config import (
    PostgresSettings,
    resolve_postgres_settings,
)
from resources.substrates.postgres.engine import create_postgres_engine
from resources.substrates.postgres.errors import (
    is_database_error,
    normalize_postgres_error,
)
from resources.substrates.postgres.health import ping
from resources.substrates.postgres.session import (
    create_session_factory,
    transactional_session,
)

__all__ = [
    "RESOURCE_COMPONENT_ID",
    "PostgresSettings",
    "create_postgres_engine",
    "create_session_factory",
    "is_database_error",
    "normalize_postgres_error",
    "ping",
    "resolve_postgres_settings",
    "transactional_session",
]
