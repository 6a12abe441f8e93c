"""Command: re-encode a typed document."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from treeconv.commands._base import TreeCommand
from treeconv.domain.types import DocumentFormat

if TYPE_CHECKING:
    from treeconv.commands._context import AppContext


@click.command(
    cls=TreeCommand,
    examples="""\
  treeconv convert Stance stance.json --to yaml
  treeconv convert Grasp grasp.yaml -o grasp.json
  treeconv convert "list[Vector3]" points.json""",
)
@click.argument("type_name", metavar="TYPE")
@click.argument("path", type=click.Path(path_type=Path, dir_okay=False))
@click.option(
    "--to",
    "to_format",
    type=click.Choice([f.value for f in DocumentFormat]),
    default=None,
    help="Output format (default: output suffix, then [document] format).",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Write to a file instead of stdout.",
)
@click.pass_obj
def convert(
    app: AppContext,
    type_name: str,
    path: Path,
    to_format: str | None,
    output: Path | None,
) -> None:
    """Decode PATH as TYPE and write it back out, normalised."""
    from treeconv.services.convert import ConvertService

    fmt = DocumentFormat(to_format) if to_format else None
    svc = ConvertService(app.registry, app.settings)
    app.emit(svc.convert(type_name, path, to_format=fmt, output=output))
