"""Round-trip entry points: values to document streams and back.

``serialize`` encodes into a fresh tree and hands it to the document
writer; ``deserialize`` reads a tree and only then decodes it, so a
malformed document is reported as :class:`StreamError` before any
conversion is attempted. The file variants resolve the format from the
file suffix.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, TextIO

from treeconv.conversion.defaults import default_registry
from treeconv.conversion.registry import ConverterRegistry
from treeconv.domain.errors import StreamError
from treeconv.domain.types import DocumentFormat
from treeconv.infrastructure.document import format_for_path, read_tree, write_tree

logger = logging.getLogger(__name__)


def serialize(
    value: Any,
    out: TextIO,
    target: Any = None,
    *,
    fmt: DocumentFormat = DocumentFormat.JSON,
    indent: int | None = None,
    registry: ConverterRegistry | None = None,
) -> None:
    """Encode *value* and write it to *out*.

    Raises:
        StreamError: If the document cannot be written.
    """
    node = (registry or default_registry).encode(value, target)
    write_tree(node, out, fmt=fmt, indent=indent)
    logger.debug("Serialized %s as %s", type(value).__name__, fmt)


def deserialize(
    inp: TextIO,
    target: Any,
    *,
    fmt: DocumentFormat = DocumentFormat.JSON,
    registry: ConverterRegistry | None = None,
) -> Any:
    """Read a document from *inp* and decode it as *target*.

    Raises:
        StreamError: If the document cannot be read or parsed.
        ConversionError: If the tree does not match *target*.
    """
    node = read_tree(inp, fmt=fmt)
    value = (registry or default_registry).decode(node, target)
    logger.debug("Deserialized %s document as %r", fmt, target)
    return value


def save_file(
    path: Path,
    value: Any,
    target: Any = None,
    *,
    fmt: DocumentFormat | None = None,
    indent: int | None = None,
    registry: ConverterRegistry | None = None,
) -> None:
    """Serialize *value* to *path*, creating parent directories.

    The format defaults to the one implied by the suffix of *path*.
    """
    resolved = fmt or format_for_path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as out:
            serialize(value, out, target, fmt=resolved, indent=indent, registry=registry)
    except OSError as exc:
        msg = f"Cannot write {path}: {exc}"
        raise StreamError(msg) from exc


def load_file(
    path: Path,
    target: Any,
    *,
    fmt: DocumentFormat | None = None,
    registry: ConverterRegistry | None = None,
) -> Any:
    """Deserialize the document at *path* as *target*."""
    resolved = fmt or format_for_path(path)
    try:
        with path.open(encoding="utf-8") as inp:
            return deserialize(inp, target, fmt=resolved, registry=registry)
    except OSError as exc:
        msg = f"Cannot read {path}: {exc}"
        raise StreamError(msg) from exc
