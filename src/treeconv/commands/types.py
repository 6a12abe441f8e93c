"""Command: list convertible type names."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from treeconv.commands._base import TreeCommand

if TYPE_CHECKING:
    from treeconv.commands._context import AppContext


@click.command(
    cls=TreeCommand,
    examples="""\
  treeconv types
  treeconv --json types""",
)
@click.pass_obj
def types(app: AppContext) -> None:
    """List the type names accepted by check and convert."""
    from treeconv.services.convert import ConvertService

    app.emit(ConvertService(app.registry, app.settings).list_types())
