"""Pluggy hook specifications for treeconv extensions.

A plugin contributes converters for its own aggregate types by
implementing ``register_converters`` and calling
:meth:`~treeconv.conversion.registry.ConverterRegistry.register` (or
:func:`~treeconv.conversion.records.register_record`) on the registry it
is handed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from treeconv.conversion.registry import ConverterRegistry

PROJECT_NAME = "treeconv"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class TreeconvHookSpec:
    """Hook specifications for the treeconv plugin system."""

    @hookspec
    def register_converters(self, registry: ConverterRegistry) -> None:
        """Register additional converters on *registry*."""
