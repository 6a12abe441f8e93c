"""Converter registry — type-keyed dispatch for encode/decode.

Every target type resolves to exactly one :class:`Converter`. Resolution
order:

1. A converter registered for exactly that type (domain aggregates,
   records, plugin types).
2. ``Optional[U]`` / ``U | None`` when ``U`` resolves.
3. Ordered collections: ``list[U]``, ``tuple[U, ...]`` (bare ``list`` /
   ``tuple`` mean ``U = Any``).
4. Mappings: ``dict[str, U]`` (bare ``dict`` means ``U = Any``).
5. ``Enum`` subclasses, stored by member value.
6. Scalars: ``bool``, ``int``, ``float``, ``str``, ``NoneType``.
7. ``Any`` — dynamic: encode by runtime type, decode to plain data.

Anything else raises :class:`~treeconv.domain.errors.UnresolvableType`.
Resolved converters are memoised per target, so the rule for a type is
chosen once rather than per value. Registration clears the memo.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

from treeconv.domain.errors import UnresolvableType, at_path
from treeconv.domain.tree import Node, Record

logger = logging.getLogger(__name__)

EncodeFn = Callable[[Any, "ConverterRegistry"], Node]
DecodeFn = Callable[[Node, "ConverterRegistry"], Any]
Rule = Literal["registered", "optional", "sequence", "mapping", "enum", "scalar", "dynamic"]

SCALAR_TYPES: dict[str, type] = {
    "bool": bool,
    "int": int,
    "float": float,
    "str": str,
}

_MISSING: Any = object()


@dataclass(frozen=True, slots=True)
class Converter:
    """Encode/decode pair for one target type."""

    target: Any
    encode: EncodeFn
    decode: DecodeFn
    rule: Rule


class ConverterRegistry:
    """Holds registered converters and resolves converters for any target.

    Usage::

        registry = ConverterRegistry()
        registry.register(Vector3, encode=encode_vector3, decode=decode_vector3)
        node = registry.encode([Vector3(x=1.0)], list[Vector3])
        points = registry.decode(node, list[Vector3])
    """

    def __init__(self) -> None:
        self._registered: dict[type, Converter] = {}
        self._names: dict[str, type] = {}
        self._cache: dict[Any, Converter] = {}

    # -- Registration ----------------------------------------------------

    def register(
        self,
        target: type,
        *,
        encode: EncodeFn,
        decode: DecodeFn,
        name: str | None = None,
    ) -> None:
        """Register the converter for *target*.

        Raises:
            TypeError: If *target* is not a class.
            ValueError: If *target* or its name is already registered.
        """
        if not isinstance(target, type):
            msg = f"Converters are registered for classes, got {target!r}"
            raise TypeError(msg)

        resolved_name = (name or target.__name__).strip()
        if not resolved_name:
            msg = "Converter name must not be empty"
            raise ValueError(msg)
        if target in self._registered:
            msg = f"A converter for {target.__name__} is already registered"
            raise ValueError(msg)
        if resolved_name in self._names or resolved_name in SCALAR_TYPES:
            msg = f"Converter name {resolved_name!r} is already in use"
            raise ValueError(msg)

        self._registered[target] = Converter(target, encode, decode, "registered")
        self._names[resolved_name] = target
        self._cache.clear()
        logger.debug("Registered converter: %s", resolved_name)

    def registered_names(self) -> dict[str, type]:
        """Registered type names mapped to their classes, sorted by name."""
        return dict(sorted(self._names.items()))

    def __len__(self) -> int:
        return len(self._registered)

    def copy(self) -> ConverterRegistry:
        """Return an independent registry with the same registrations."""
        clone = ConverterRegistry()
        clone._registered = dict(self._registered)
        clone._names = dict(self._names)
        return clone

    # -- Name lookup -----------------------------------------------------

    def lookup(self, name: str) -> Any:
        """Translate a type name into a target type.

        Accepts registered names, the scalar names ``bool|int|float|str``,
        and ``list[NAME]`` / ``dict[NAME]`` (string-keyed) nesting.

        Raises:
            KeyError: If the name (or a nested name) is unknown.
        """
        text = name.strip()
        for prefix, build in (("list[", _list_of), ("dict[", _dict_of)):
            if text.startswith(prefix) and text.endswith("]"):
                return build(self.lookup(text[len(prefix) : -1]))
        if text in SCALAR_TYPES:
            return SCALAR_TYPES[text]
        if text in self._names:
            return self._names[text]
        known = ", ".join([*SCALAR_TYPES, *sorted(self._names)])
        msg = f"Unknown type name {text!r}. Known: {known}"
        raise KeyError(msg)

    # -- Resolution ------------------------------------------------------

    def resolve(self, target: Any) -> Converter:
        """Return the converter for *target*, building and memoising it once."""
        converter = self._cache.get(target)
        if converter is None:
            converter = self._build(target)
            self._cache[target] = converter
            logger.debug("Resolved %r via %s rule", target, converter.rule)
        return converter

    def _build(self, target: Any) -> Converter:
        from treeconv.conversion import generic

        registered = self._registered.get(target)
        if registered is not None:
            return registered

        for rule in (
            generic.optional_converter,
            generic.sequence_converter,
            generic.mapping_converter,
            generic.enum_converter,
            generic.scalar_converter,
            generic.dynamic_converter,
        ):
            converter = rule(target, self)
            if converter is not None:
                return converter

        msg = f"No converter can be resolved for {target!r}"
        raise UnresolvableType(msg)

    # -- Conversion ------------------------------------------------------

    def encode(self, value: Any, target: Any = None) -> Node:
        """Encode *value* as a tree; *target* defaults to ``type(value)``."""
        if target is None:
            target = type(value)
        return self.resolve(target).encode(value, self)

    def decode(self, node: Node, target: Any) -> Any:
        """Decode *node* into a new value of type *target*.

        Raises:
            ConversionError: If the tree does not match *target*.
        """
        return self.resolve(target).decode(node, self)

    def decode_field(
        self,
        record: Record,
        key: str,
        target: Any,
        default: Any = _MISSING,
    ) -> Any:
        """Decode ``record[key]`` as *target*, annotating failures with *key*.

        An absent slot returns *default* when one is given and raises
        :class:`~treeconv.domain.errors.MissingField` otherwise.
        """
        child = record.get(key)
        if child is None:
            if default is _MISSING:
                return record.require(key)
            return default
        with at_path(key):
            return self.decode(child, target)


def _list_of(element: Any) -> Any:
    return list[element]


def _dict_of(element: Any) -> Any:
    return dict[str, element]
