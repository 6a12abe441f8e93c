"""Record converters built from dataclass and pydantic model fields.

``register_record(registry, Point)`` registers a converter that writes each
field of ``Point`` into a record slot and reads it back with the converter
for the field's annotation. Slots may be renamed with ``aliases`` (for
camelCase documents)::

    @dataclass
    class Point:
        x: float
        y: float
        z: float = 0.0

    register_record(registry, Point)
    registry.encode(Point(1.0, 2.0))   # Record{x, y, z}

On decode, an absent slot falls back to the field default; a field without
default raises :class:`~treeconv.domain.errors.MissingField`.
"""

from __future__ import annotations

import dataclasses
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel

from treeconv.domain.errors import TypeMismatch
from treeconv.domain.tree import Node, Record, expect_record

if TYPE_CHECKING:
    from treeconv.conversion.registry import ConverterRegistry, DecodeFn, EncodeFn

T = TypeVar("T", bound=type)


@dataclass(frozen=True, slots=True)
class RecordField:
    """One attribute of a record type and the slot it is stored in."""

    name: str
    key: str
    annotation: Any
    required: bool


def record_fields(cls: type, aliases: Mapping[str, str] | None = None) -> list[RecordField]:
    """List the fields of a dataclass or pydantic model class.

    Raises:
        TypeError: If *cls* is neither.
    """
    aliases = aliases or {}
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        return [
            RecordField(name, aliases.get(name, name), info.annotation, info.is_required())
            for name, info in cls.model_fields.items()
        ]
    if dataclasses.is_dataclass(cls) and isinstance(cls, type):
        hints = typing.get_type_hints(cls)
        return [
            RecordField(
                f.name,
                aliases.get(f.name, f.name),
                hints.get(f.name, Any),
                f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING,
            )
            for f in dataclasses.fields(cls)
            if f.init
        ]
    msg = f"{cls!r} is not a dataclass or pydantic model"
    raise TypeError(msg)


def record_converter(
    cls: type,
    aliases: Mapping[str, str] | None = None,
) -> tuple[EncodeFn, DecodeFn]:
    """Build the ``(encode, decode)`` pair for *cls*."""
    fields = record_fields(cls, aliases)

    def encode(value: Any, registry: ConverterRegistry) -> Node:
        record = Record()
        for field in fields:
            record[field.key] = registry.encode(getattr(value, field.name), field.annotation)
        return record

    def decode(node: Node, registry: ConverterRegistry) -> Any:
        record = expect_record(node)
        kwargs: dict[str, Any] = {}
        for field in fields:
            if field.key not in record and not field.required:
                continue
            kwargs[field.name] = registry.decode_field(record, field.key, field.annotation)
        try:
            return cls(**kwargs)
        except (TypeError, ValueError) as exc:
            raise TypeMismatch(
                cls.__name__,
                "invalid field values",
                message=f"{cls.__name__} rejected the decoded fields: {exc}",
            ) from exc

    return encode, decode


def register_record(
    registry: ConverterRegistry,
    cls: T,
    *,
    name: str | None = None,
    aliases: Mapping[str, str] | None = None,
) -> T:
    """Register a record converter for *cls* and return *cls*."""
    encode, decode = record_converter(cls, aliases)
    registry.register(cls, encode=encode, decode=decode, name=name)
    return cls
