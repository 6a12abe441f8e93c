"""Subcommand modules for treeconv.

register_commands() imports them lazily to keep ``treeconv --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach every subcommand to the root group."""
    from treeconv.commands.check import check
    from treeconv.commands.convert import convert
    from treeconv.commands.types import types

    cli.add_command(types)
    cli.add_command(check)
    cli.add_command(convert)
