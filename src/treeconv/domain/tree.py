"""Value tree — the dynamically-typed intermediate between values and text.

A tree is built from exactly three node kinds:

- :class:`Scalar` — a single ``bool | int | float | str | None``.
- :class:`Sequence` — an ordered list of child nodes.
- :class:`Record` — named child nodes in insertion order.

Index access only exists on sequences and records; typed extraction only on
scalars. Code that receives a :data:`Node` narrows it with ``isinstance``
and reports the wrong kind as :class:`~treeconv.domain.errors.ShapeMismatch`
through :func:`expect_sequence` / :func:`expect_record` / :func:`expect_scalar`.

:func:`to_plain` / :func:`from_plain` bridge trees and the plain Python data
that the JSON and YAML codecs produce.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Literal

from treeconv.domain.errors import MissingField, ShapeMismatch, StreamError, TypeMismatch

ScalarValue = bool | int | float | str | None
NodeKind = Literal["scalar", "sequence", "record"]

_SCALAR_NAMES: dict[type, str] = {
    bool: "bool",
    int: "int",
    float: "float",
    str: "str",
    type(None): "null",
}


def scalar_type_name(value: Any) -> str:
    """Short type name for *value* used in mismatch messages."""
    return _SCALAR_NAMES.get(type(value), type(value).__name__)


@dataclass(slots=True)
class Scalar:
    """Leaf node holding one scalar value."""

    value: ScalarValue = None

    def extract(self, target: type) -> Any:
        """Return the stored value coerced to *target*.

        ``float`` accepts any non-bool number, ``int`` accepts integral
        floats, the remaining scalar types require an exact match.

        Raises:
            TypeMismatch: If the stored value cannot be coerced.
        """
        value = self.value
        if target is float:
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                try:
                    return float(value)
                except OverflowError:
                    raise TypeMismatch(
                        "float",
                        "int",
                        message=f"expected float, got {value.bit_length()}-bit int out of float range",
                    ) from None
        elif target is int:
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            if isinstance(value, float) and value.is_integer():
                return int(value)
        elif target is bool:
            if isinstance(value, bool):
                return value
        elif target is str:
            if isinstance(value, str):
                return value
        elif target is type(None):
            if value is None:
                return None
        else:
            msg = f"{target!r} is not a scalar type"
            raise TypeError(msg)
        raise TypeMismatch(_SCALAR_NAMES[target], scalar_type_name(value))


@dataclass(slots=True)
class Sequence:
    """Ordered collection of child nodes."""

    items: list[Node] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Node:
        return self.items[index]

    def __setitem__(self, index: int, node: Node) -> None:
        self.items[index] = node

    def append(self, node: Node) -> None:
        self.items.append(node)

    def resize(self, size: int) -> None:
        """Truncate or pad (with null scalars) to exactly *size* items."""
        if size < 0:
            msg = f"Sequence size must be non-negative, got {size}"
            raise ValueError(msg)
        del self.items[size:]
        self.items.extend(Scalar() for _ in range(size - len(self.items)))


@dataclass(slots=True)
class Record:
    """Named child nodes, kept in insertion order."""

    fields: dict[str, Node] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __getitem__(self, name: str) -> Node:
        return self.fields[name]

    def __setitem__(self, name: str, node: Node) -> None:
        self.fields[name] = node

    def __delitem__(self, name: str) -> None:
        del self.fields[name]

    def get(self, name: str) -> Node | None:
        return self.fields.get(name)

    def require(self, name: str) -> Node:
        """Return the field *name* or raise :class:`MissingField`."""
        try:
            return self.fields[name]
        except KeyError:
            raise MissingField(name) from None

    def items(self) -> Iterator[tuple[str, Node]]:
        return iter(self.fields.items())


Node = Scalar | Sequence | Record


def node_kind(node: Node) -> NodeKind:
    """Return the tag of *node*."""
    if isinstance(node, Scalar):
        return "scalar"
    if isinstance(node, Sequence):
        return "sequence"
    if isinstance(node, Record):
        return "record"
    msg = f"Not a tree node: {node!r}"
    raise TypeError(msg)


def expect_scalar(node: Node) -> Scalar:
    if not isinstance(node, Scalar):
        raise ShapeMismatch("scalar", node_kind(node))
    return node


def expect_sequence(node: Node) -> Sequence:
    if not isinstance(node, Sequence):
        raise ShapeMismatch("sequence", node_kind(node))
    return node


def expect_record(node: Node) -> Record:
    if not isinstance(node, Record):
        raise ShapeMismatch("record", node_kind(node))
    return node


# ---------------------------------------------------------------------------
# Plain-data bridge (used by the document codecs)
# ---------------------------------------------------------------------------


def to_plain(node: Node) -> Any:
    """Convert a tree into nested ``dict`` / ``list`` / scalar values."""
    if isinstance(node, Scalar):
        return node.value
    if isinstance(node, Sequence):
        return [to_plain(item) for item in node.items]
    if isinstance(node, Record):
        return {name: to_plain(child) for name, child in node.fields.items()}
    msg = f"Not a tree node: {node!r}"
    raise TypeError(msg)


def from_plain(data: Any) -> Node:
    """Build a tree from decoded JSON/YAML data.

    Dates and times (YAML timestamps) become ISO strings. Non-string
    mapping keys and unsupported objects raise :class:`StreamError`.
    """
    if data is None or isinstance(data, bool):
        return Scalar(data)
    if isinstance(data, str):
        return Scalar(str(data))
    if isinstance(data, int):
        return Scalar(int(data))
    if isinstance(data, float):
        return Scalar(float(data))
    if isinstance(data, (datetime, date, time)):
        return Scalar(data.isoformat())
    if isinstance(data, Mapping):
        fields: dict[str, Node] = {}
        for key, value in data.items():
            if not isinstance(key, str):
                msg = f"Mapping keys must be strings, got {type(key).__name__}: {key!r}"
                raise StreamError(msg)
            fields[str(key)] = from_plain(value)
        return Record(fields)
    if isinstance(data, (list, tuple)):
        return Sequence([from_plain(item) for item in data])
    msg = f"Unsupported document value of type {type(data).__name__}"
    raise StreamError(msg)
