"""Plugin discovery, loading, and converter registration."""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import pluggy

from treeconv.plugins.hookspecs import PROJECT_NAME, TreeconvHookSpec

if TYPE_CHECKING:
    from treeconv.conversion.registry import ConverterRegistry

ENTRY_POINT_GROUP = "treeconv.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Discovers plugins and lets them extend a converter registry."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(TreeconvHookSpec)

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins and, if given, single-file plugins in *local_dir*.

        Returns the names of all registered plugins.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_entry_point_classes()
        if local_dir is not None:
            self._discover_local(local_dir)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def apply(self, registry: ConverterRegistry) -> list[str]:
        """Let every plugin register its converters on *registry*.

        Each plugin runs in isolation: one that raises is logged and skipped
        and the others still contribute. Returns the names of plugins whose
        hook completed.
        """
        applied: list[str] = []
        for plugin in self._pm.get_plugins():
            hook = getattr(plugin, "register_converters", None)
            if hook is None:
                continue
            name = self._pm.get_name(plugin) or plugin.__class__.__name__
            try:
                hook(registry=registry)
            except Exception:
                logger.warning("Plugin %s failed to register converters", name, exc_info=True)
                continue
            applied.append(name)
        return applied

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Load each ``*.py`` in *local_dir* (``_``-prefixed files skipped).

        Classes defined in the module that carry hook implementations are
        instantiated and registered. Failures are logged as warnings.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"treeconv_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                sys.modules.pop(module_name, None)
                continue

            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name or not self._has_hook_impls(obj):
                    continue
                try:
                    self.register_plugin(obj(), name=f"{module_name}.{obj.__name__}")
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )

    def _instantiate_entry_point_classes(self) -> None:
        """Replace plugin classes registered by entry points with instances."""
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin) or not self._has_hook_impls(plugin):
                continue
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Failed to instantiate entry-point plugin %s", name, exc_info=True)
                continue
            self._pm.register(instance, name=name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Whether *cls* has a method decorated with ``@hookimpl``.

        ``HookimplMarker("treeconv")`` sets a ``treeconv_impl`` attribute on
        decorated functions.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, "treeconv_impl", None):
                return True
        return False
