"""Field descriptor contract for record types captured by the Cellar.

A record type declares its own ordered field names and a factory that
rebuilds an instance from a field-name mapping. The factory must reject names
it does not declare, so a stored payload can never introduce attributes the
type does not have.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import date, time
from decimal import Decimal
from typing import Any, ClassVar, Protocol, runtime_checkable
from uuid import UUID

from sqlalchemy import inspect as sa_inspect

from services.state.cellar.errors import DeserializationError

_STRING_RESTORERS: dict[type, Callable[[str], Any]] = {
    date: date.fromisoformat,
    time: time.fromisoformat,
    Decimal: Decimal,
    UUID: UUID,
}


@runtime_checkable
class VersionedRecord(Protocol):
    """Protocol implemented by every versioned record type."""

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Return the ordered field names captured in each version."""

    @classmethod
    def from_fields(cls, values: Mapping[str, Any]) -> Any:
        """Build one instance from decoded field values."""


class VersionedModel:
    """Mixin for SQLAlchemy declarative models captured by the Cellar.

    Field names are the mapped column attributes in declaration order.
    String values decoded for ``Date``, ``Time``, ``Numeric`` and ``Uuid``
    columns are restored to their Python types.
    Set ``__version_type_name__`` to pin the stored type name independently
    of the module path.
    """

    __version_type_name__: ClassVar[str | None] = None

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(attr.key for attr in sa_inspect(cls).column_attrs)

    @classmethod
    def from_fields(cls, values: Mapping[str, Any]) -> Any:
        require_known_fields(cls, values)
        data = dict(values)
        for attr in sa_inspect(cls).column_attrs:
            if attr.key in data:
                data[attr.key] = _restore(attr.key, attr.columns[0], data[attr.key])
                continue
            default = attr.columns[0].default
            if default is not None and default.is_scalar:
                data[attr.key] = default.arg
        return cls(**data)


def require_known_fields(record_type: type, names: Iterable[str]) -> None:
    """Raise ``DeserializationError`` when any name is not a declared field."""
    declared = set(record_type.field_names())
    unknown = sorted(str(name) for name in names if name not in declared)
    if unknown:
        raise DeserializationError(
            f"unknown fields for {type_name_of(record_type)}: {', '.join(unknown)}"
        )


def type_name_of(record_type: type) -> str:
    """Return the stable stored name for one record type."""
    declared = getattr(record_type, "__version_type_name__", None)
    if declared:
        return str(declared)
    return f"{record_type.__module__}.{record_type.__qualname__}"


def _restore(name: str, column: Any, value: Any) -> Any:
    if not isinstance(value, str):
        return value
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value
    restore = _STRING_RESTORERS.get(python_type)
    if restore is None:
        return value
    try:
        return restore(value)
    except (ValueError, ArithmeticError) as exc:
        raise DeserializationError(
            f"field {name!r} cannot be restored as {python_type.__name__}: {value!r}"
        ) from exc
