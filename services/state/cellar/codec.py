"""Snapshot codec: record field values to a JSON version payload and back.

Datetime values are not JSON-native, so they are written as strings carrying
``NATIVE_DATETIME_PREFIX`` followed by ``datetime.isoformat(sep=" ")``. On
decode, a string value that starts with the prefix must carry exactly that
form (date, space, time, optional fraction and offset) and is parsed back
into a ``datetime``.

``date``, ``time``, ``Decimal`` and ``UUID`` values are written as their
canonical strings without a tag. They come back as strings here; record
types restore them from their own field declarations (see
``VersionedModel.from_fields``).

The prefix is this package's own marker. Payloads tagged with any other
prefix decode as plain strings.

Known limitation: a plain string value that happens to start with the prefix
is indistinguishable from a tagged datetime and decodes as one (or fails to
decode when the remainder is not a timestamp). Changing that would change the
stored payload format.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any
from uuid import UUID

from services.state.cellar.errors import (
    CellarError,
    DeserializationError,
    SerializationError,
)
from services.state.cellar.records import (
    VersionedRecord,
    require_known_fields,
    type_name_of,
)

NATIVE_DATETIME_PREFIX = "cellar_native_datetime_"

_CANONICAL_DATETIME = re.compile(
    r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}(\.\d{6})?"
    r"([+-]\d{2}:\d{2}(:\d{2}(\.\d{6})?)?)?"
)


def encode(record: object, field_names: Sequence[str]) -> str:
    """Serialize the named fields of ``record`` into one JSON document."""
    document = {
        name: _encode_value(getattr(record, name, None)) for name in field_names
    }
    try:
        return json.dumps(
            document, sort_keys=True, separators=(",", ":"), allow_nan=False
        )
    except (TypeError, ValueError) as exc:
        field = _first_unserializable(document)
        raise SerializationError(
            f"field {field!r} of {type_name_of(type(record))} is not serializable: {exc}"
        ) from exc


def decode(payload: str, target_type: type) -> Any:
    """Rebuild an instance of ``target_type`` from one JSON version payload."""
    if not isinstance(target_type, type) or not issubclass(
        target_type, VersionedRecord
    ):
        raise DeserializationError(
            f"{target_type!r} does not declare versioned fields"
        )
    try:
        document = json.loads(payload)
    except (TypeError, ValueError) as exc:
        raise DeserializationError(f"version payload is not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise DeserializationError("version payload must be a JSON object")

    require_known_fields(target_type, document)
    values = {name: _decode_value(name, value) for name, value in document.items()}
    try:
        return target_type.from_fields(values)
    except CellarError:
        raise
    except (TypeError, ValueError) as exc:
        raise DeserializationError(
            f"cannot build {type_name_of(target_type)} from version payload: {exc}"
        ) from exc


def _encode_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return f"{NATIVE_DATETIME_PREFIX}{value.isoformat(sep=' ')}"
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    return value


def _decode_value(name: str, value: Any) -> Any:
    if not isinstance(value, str) or not value.startswith(NATIVE_DATETIME_PREFIX):
        return value
    text = value[len(NATIVE_DATETIME_PREFIX) :]
    if _CANONICAL_DATETIME.fullmatch(text) is None:
        raise DeserializationError(
            f"field {name!r} carries a malformed datetime: {text!r}"
        )
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise DeserializationError(
            f"field {name!r} carries a malformed datetime: {text!r}"
        ) from exc


def _first_unserializable(document: Mapping[str, Any]) -> str | None:
    for name in sorted(document):
        try:
            json.dumps(document[name], allow_nan=False)
        except (TypeError, ValueError):
            return name
    return None
