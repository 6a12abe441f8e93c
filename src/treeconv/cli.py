"""Root CLI group for treeconv with global flags and command registration."""

from __future__ import annotations

import click

from treeconv import __version__
from treeconv.commands import register_commands
from treeconv.commands._base import TreeGroup
from treeconv.commands._context import AppContext
from treeconv.config.settings import TreeconvSettings


@click.group(
    cls=TreeGroup,
    invoke_without_command=True,
    examples="""\
  treeconv types
  treeconv check Stance stance.json
  treeconv -c ./treeconv.toml convert Grasp grasp.json --to yaml""",
)
@click.version_option(version=__version__, prog_name="treeconv")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """treeconv — typed robot resource documents in JSON and YAML."""
    settings = TreeconvSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
