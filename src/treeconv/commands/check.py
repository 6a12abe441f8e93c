"""Command: validate a document against a type."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from treeconv.commands._base import TreeCommand

if TYPE_CHECKING:
    from treeconv.commands._context import AppContext


@click.command(
    cls=TreeCommand,
    examples="""\
  treeconv check Stance stance.json
  treeconv check "list[IKGoal]" goals.yaml
  treeconv --json check Grasp grasp.json""",
)
@click.argument("type_name", metavar="TYPE")
@click.argument("path", type=click.Path(path_type=Path, dir_okay=False))
@click.pass_obj
def check(app: AppContext, type_name: str, path: Path) -> None:
    """Check that the document at PATH decodes as TYPE."""
    from treeconv.services.convert import ConvertService

    app.emit(ConvertService(app.registry, app.settings).check(type_name, path))
