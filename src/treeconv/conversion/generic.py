"""Generic conversion rules.

Each ``*_converter(target, registry)`` function returns a :class:`Converter`
when its rule applies to *target* and ``None`` otherwise; the registry tries
them in order. Element converters are resolved when the rule is built, so
an unresolvable element type fails at resolution time rather than on the
first value.
"""

from __future__ import annotations

import types
from enum import Enum
from typing import TYPE_CHECKING, Any, Union, get_args, get_origin

from treeconv.conversion.registry import SCALAR_TYPES, Converter
from treeconv.domain.errors import TypeMismatch, UnresolvableType, at_path
from treeconv.domain.tree import (
    Node,
    Record,
    Scalar,
    Sequence,
    expect_record,
    expect_scalar,
    expect_sequence,
    to_plain,
)

if TYPE_CHECKING:
    from treeconv.conversion.registry import ConverterRegistry

_NONE_TYPE = type(None)


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


def scalar_converter(target: Any, registry: ConverterRegistry) -> Converter | None:
    """``bool`` / ``int`` / ``float`` / ``str`` / ``NoneType`` pass-through."""
    if target is not _NONE_TYPE and target not in SCALAR_TYPES.values():
        return None

    def encode(value: Any, registry: ConverterRegistry) -> Node:
        return Scalar(value)

    def decode(node: Node, registry: ConverterRegistry) -> Any:
        return expect_scalar(node).extract(target)

    return Converter(target, encode, decode, "scalar")


def enum_converter(target: Any, registry: ConverterRegistry) -> Converter | None:
    """Enum members stored as their value."""
    if not (isinstance(target, type) and issubclass(target, Enum)):
        return None
    scalar_types = (*SCALAR_TYPES.values(), _NONE_TYPE)
    non_scalar = [member.name for member in target if not isinstance(member.value, scalar_types)]
    if non_scalar:
        msg = f"{target.__name__} members {non_scalar} do not have scalar values"
        raise UnresolvableType(msg)

    def encode(value: Any, registry: ConverterRegistry) -> Node:
        return Scalar(target(value).value)

    def decode(node: Node, registry: ConverterRegistry) -> Any:
        raw = expect_scalar(node).value
        try:
            return target(raw)
        except ValueError:
            choices = ", ".join(str(member.value) for member in target)
            raise TypeMismatch(
                f"one of {choices}",
                repr(raw),
                message=f"{raw!r} is not a valid {target.__name__} (expected one of {choices})",
            ) from None

    return Converter(target, encode, decode, "enum")


# ---------------------------------------------------------------------------
# Optional
# ---------------------------------------------------------------------------


def optional_converter(target: Any, registry: ConverterRegistry) -> Converter | None:
    """``U | None``: null scalar for ``None``, otherwise the ``U`` converter."""
    if get_origin(target) not in (Union, types.UnionType):
        return None
    members = [arg for arg in get_args(target) if arg is not _NONE_TYPE]
    if len(members) != 1 or len(get_args(target)) != 2:
        return None
    inner = registry.resolve(members[0])

    def encode(value: Any, registry: ConverterRegistry) -> Node:
        if value is None:
            return Scalar(None)
        return inner.encode(value, registry)

    def decode(node: Node, registry: ConverterRegistry) -> Any:
        if isinstance(node, Scalar) and node.value is None:
            return None
        return inner.decode(node, registry)

    return Converter(target, encode, decode, "optional")


# ---------------------------------------------------------------------------
# Ordered collections
# ---------------------------------------------------------------------------


def sequence_converter(target: Any, registry: ConverterRegistry) -> Converter | None:
    """``list[U]`` / ``tuple[U, ...]`` as a sequence node, index for index.

    Decoding stops at the first failing element; its error carries the
    element index and no partial collection is returned.
    """
    if target in (list, tuple):
        container, element = target, Any
    else:
        container = get_origin(target)
        args = get_args(target)
        if container is list and len(args) == 1:
            element = args[0]
        elif container is tuple and len(args) == 2 and args[1] is Ellipsis:
            element = args[0]
        else:
            return None
    item = registry.resolve(element)

    def encode(value: Any, registry: ConverterRegistry) -> Node:
        return Sequence([item.encode(element_value, registry) for element_value in value])

    def decode(node: Node, registry: ConverterRegistry) -> Any:
        sequence = expect_sequence(node)
        values: list[Any] = []
        for index, child in enumerate(sequence.items):
            with at_path(index):
                values.append(item.decode(child, registry))
        return tuple(values) if container is tuple else values

    return Converter(target, encode, decode, "sequence")


# ---------------------------------------------------------------------------
# Mappings
# ---------------------------------------------------------------------------


def mapping_converter(target: Any, registry: ConverterRegistry) -> Converter | None:
    """``dict[str, U]`` as a record node, key for key."""
    if target is dict:
        element = Any
    elif get_origin(target) is dict:
        args = get_args(target)
        if len(args) != 2 or args[0] is not str:
            return None
        element = args[1]
    else:
        return None
    item = registry.resolve(element)

    def encode(value: Any, registry: ConverterRegistry) -> Node:
        return Record({str(key): item.encode(child, registry) for key, child in value.items()})

    def decode(node: Node, registry: ConverterRegistry) -> Any:
        record = expect_record(node)
        values: dict[str, Any] = {}
        for key, child in record.items():
            with at_path(key):
                values[key] = item.decode(child, registry)
        return values

    return Converter(target, encode, decode, "mapping")


# ---------------------------------------------------------------------------
# Dynamic
# ---------------------------------------------------------------------------


def dynamic_converter(target: Any, registry: ConverterRegistry) -> Converter | None:
    """``Any``: encode by the runtime type, decode to plain Python data."""
    if target is not Any:
        return None

    def encode(value: Any, registry: ConverterRegistry) -> Node:
        if value is None:
            return Scalar(None)
        return registry.encode(value, type(value))

    def decode(node: Node, registry: ConverterRegistry) -> Any:
        return to_plain(node)

    return Converter(target, encode, decode, "dynamic")

