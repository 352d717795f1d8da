"""Cellar service native package exports."""

from packages.cellar_shared.errors import ErrorCategory, ErrorDetail
from packages.cellar_shared.result import Result
from services.state.cellar.codec import NATIVE_DATETIME_PREFIX, decode, encode
from services.state.cellar.component import SERVICE_COMPONENT_ID
from services.state.cellar.config import CellarServiceSettings
from services.state.cellar.domain import Changeset, HealthStatus, VersionEntry
from services.state.cellar.errors import (
    CellarError,
    DeserializationError,
    MutationError,
    NotFoundError,
    SerializationError,
    StoreError,
)
from services.state.cellar.implementation import DefaultCellarService
from services.state.cellar.records import VersionedModel, VersionedRecord
from services.state.cellar.service import CellarService, build_cellar_service

__all__ = [
    "SERVICE_COMPONENT_ID",
    "NATIVE_DATETIME_PREFIX",
    "CellarService",
    "CellarServiceSettings",
    "DefaultCellarService",
    "build_cellar_service",
    "Changeset",
    "HealthStatus",
    "VersionEntry",
    "VersionedModel",
    "VersionedRecord",
    "encode",
    "decode",
    "CellarError",
    "MutationError",
    "SerializationError",
    "DeserializationError",
    "NotFoundError",
    "StoreError",
    "Result",
    "ErrorCategory",
    "ErrorDetail",
]
