"""Textual document codecs for value trees.

JSON goes through the standard ``json`` module, YAML through ruamel.yaml's
round-trip loader/dumper, which keeps record slots in insertion order.
Both directions pass through plain Python data
(:func:`~treeconv.domain.tree.to_plain` / :func:`~treeconv.domain.tree.from_plain`).

Every codec or I/O failure is re-raised as
:class:`~treeconv.domain.errors.StreamError` with the original exception
chained, so callers only handle one error type at this boundary.
"""

from __future__ import annotations

import json
from io import StringIO
from pathlib import Path
from typing import TextIO

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from treeconv.domain.errors import StreamError
from treeconv.domain.tree import Node, from_plain, to_plain
from treeconv.domain.types import DocumentFormat

SUFFIX_FORMATS: dict[str, DocumentFormat] = {
    ".json": DocumentFormat.JSON,
    ".yaml": DocumentFormat.YAML,
    ".yml": DocumentFormat.YAML,
}


def _new_yaml() -> YAML:
    """Create a fresh block-style YAML codec.

    ruamel.yaml's YAML object is stateful; a new instance per call keeps a
    failed dump from leaking emitter state into the next operation.
    """
    y = YAML()
    y.default_flow_style = False
    return y


def format_for_path(path: Path, default: DocumentFormat | None = None) -> DocumentFormat:
    """Infer the document format from the suffix of *path*.

    Raises:
        ValueError: If the suffix is unknown and no *default* is given.
    """
    fmt = SUFFIX_FORMATS.get(path.suffix.lower(), default)
    if fmt is None:
        known = ", ".join(SUFFIX_FORMATS)
        msg = f"Cannot infer document format from {path.name!r} (known suffixes: {known})"
        raise ValueError(msg)
    return fmt


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def write_tree(
    node: Node,
    out: TextIO,
    *,
    fmt: DocumentFormat = DocumentFormat.JSON,
    indent: int | None = None,
) -> None:
    """Write *node* to the text stream *out*.

    *indent* only applies to JSON; ``None`` writes a single line.
    """
    data = to_plain(node)
    try:
        if fmt == DocumentFormat.YAML:
            _new_yaml().dump(data, out)
        else:
            json.dump(data, out, indent=indent)
            out.write("\n")
    except (OSError, ValueError, YAMLError) as exc:
        msg = f"Failed to write {fmt} document: {exc}"
        raise StreamError(msg) from exc


def dumps_tree(
    node: Node,
    *,
    fmt: DocumentFormat = DocumentFormat.JSON,
    indent: int | None = None,
) -> str:
    """Render *node* as document text."""
    buf = StringIO()
    write_tree(node, buf, fmt=fmt, indent=indent)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def read_tree(inp: TextIO, *, fmt: DocumentFormat = DocumentFormat.JSON) -> Node:
    """Read one document from the text stream *inp*.

    An empty YAML document reads as a null scalar; an empty JSON document
    is malformed.
    """
    try:
        text = inp.read()
    except (OSError, ValueError) as exc:
        msg = f"Failed to read {fmt} document: {exc}"
        raise StreamError(msg) from exc
    return loads_tree(text, fmt=fmt)


def loads_tree(text: str, *, fmt: DocumentFormat = DocumentFormat.JSON) -> Node:
    """Parse document text into a tree."""
    try:
        if fmt == DocumentFormat.YAML:
            data = _new_yaml().load(text)
        else:
            data = json.loads(text)
    except (ValueError, YAMLError) as exc:
        msg = f"Malformed {fmt} document: {exc}"
        raise StreamError(msg) from exc
    return from_plain(data)
