"""ConvertService — list, validate, and re-encode typed documents.

Every method resolves a type name through the registry, so aggregates
contributed by plugins are handled the same way as the built-ins.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from treeconv.config.settings import TreeconvSettings
from treeconv.conversion.registry import SCALAR_TYPES, ConverterRegistry
from treeconv.conversion.streams import load_file, save_file
from treeconv.domain.errors import ConversionError
from treeconv.domain.types import DocumentFormat
from treeconv.infrastructure.document import dumps_tree, format_for_path
from treeconv.services.result import ServiceResult

logger = logging.getLogger(__name__)


class ConvertService:
    """Document operations bound to one registry and one settings object.

    Usage::

        service = ConvertService(registry, settings)
        result = service.convert("Stance", Path("stance.json"), to_format=DocumentFormat.YAML)
        if result.ok:
            print(result.data["document"])
    """

    def __init__(self, registry: ConverterRegistry, settings: TreeconvSettings | None = None) -> None:
        self._registry = registry
        self._settings = settings or TreeconvSettings()

    def list_types(self) -> ServiceResult:
        """Every type name that ``check`` and ``convert`` accept."""
        registered = [
            {"name": name, "kind": "aggregate", "qualname": f"{cls.__module__}.{cls.__qualname__}"}
            for name, cls in self._registry.registered_names().items()
        ]
        scalars = [{"name": name, "kind": "scalar", "qualname": name} for name in SCALAR_TYPES]
        types = [*scalars, *registered]
        return ServiceResult(ok=True, op="types", data={"types": types, "count": len(types)})

    def check(self, type_name: str, path: Path) -> ServiceResult:
        """Decode the document at *path* as *type_name* and report the outcome."""
        op = "check"
        loaded = self._load(op, type_name, path)
        if isinstance(loaded, ServiceResult):
            return loaded
        return ServiceResult(
            ok=True,
            op=op,
            data={"type": type_name, "path": str(path), "valid": True},
        )

    def convert(
        self,
        type_name: str,
        path: Path,
        *,
        to_format: DocumentFormat | None = None,
        output: Path | None = None,
    ) -> ServiceResult:
        """Decode *path* as *type_name* and re-encode it.

        The output format is *to_format*, else the suffix of *output*, else
        the configured ``[document] format``. Without *output* the rendered
        document is returned in ``data["document"]``.
        """
        op = "convert"
        loaded = self._load(op, type_name, path)
        if isinstance(loaded, ServiceResult):
            return loaded
        target, value = loaded

        fmt = to_format
        if fmt is None and output is not None:
            fmt = format_for_path(output, self._settings.document.format)
        fmt = fmt or self._settings.document.format
        indent = self._settings.document.indent

        data: dict[str, Any] = {"type": type_name, "source": str(path), "format": str(fmt)}
        try:
            if output is None:
                node = self._registry.encode(value, target)
                data["document"] = dumps_tree(node, fmt=fmt, indent=indent)
            else:
                save_file(output, value, target, fmt=fmt, indent=indent, registry=self._registry)
                data["output"] = str(output)
        except ConversionError as exc:
            return _conversion_failure(op, exc)

        logger.debug("Converted %s (%s) to %s", path, type_name, fmt)
        return ServiceResult(ok=True, op=op, data=data)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load(self, op: str, type_name: str, path: Path) -> tuple[Any, Any] | ServiceResult:
        """Return ``(target, value)`` or the failure result for *op*."""
        try:
            target = self._registry.lookup(type_name)
        except KeyError as exc:
            return ServiceResult.failure(op, "UNKNOWN_TYPE", exc.args[0], {"type": type_name})

        try:
            fmt = format_for_path(path, self._settings.document.format)
            value = load_file(path, target, fmt=fmt, registry=self._registry)
        except ConversionError as exc:
            return _conversion_failure(op, exc)
        return target, value


def _conversion_failure(op: str, exc: ConversionError) -> ServiceResult:
    logger.debug("%s failed: %s", op, exc)
    return ServiceResult.failure(op, exc.code, str(exc), exc.to_detail())
