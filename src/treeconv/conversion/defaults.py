"""Default registry and the module-level ``encode`` / ``decode`` entry points."""

from __future__ import annotations

from typing import Any

from treeconv.conversion.aggregates import register_builtin_converters
from treeconv.conversion.registry import ConverterRegistry
from treeconv.domain.tree import Node


def create_registry() -> ConverterRegistry:
    """Return a new registry with every built-in aggregate registered."""
    registry = ConverterRegistry()
    register_builtin_converters(registry)
    return registry


default_registry = create_registry()


def encode(value: Any, target: Any = None, *, registry: ConverterRegistry | None = None) -> Node:
    """Encode *value* as a tree using the converter resolved for *target*.

    *target* defaults to ``type(value)``; pass it explicitly for typed
    collections (``list[Vector3]``) so elements use their registered converter.
    """
    return (registry or default_registry).encode(value, target)


def decode(node: Node, target: Any, *, registry: ConverterRegistry | None = None) -> Any:
    """Decode *node* into a new value of type *target*.

    Raises:
        ConversionError: If the tree does not have the shape *target* needs.
    """
    return (registry or default_registry).decode(node, target)
