"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. The converter registry (with plugin converters) is
built lazily so ``--help`` and ``--version`` never load plugins.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from treeconv.config.logging import configure_logging
from treeconv.output.formatters import format_result

if TYPE_CHECKING:
    from treeconv.config.settings import TreeconvSettings
    from treeconv.conversion.registry import ConverterRegistry
    from treeconv.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Settings, lazily built registry, and result emission."""

    def __init__(self, settings: TreeconvSettings) -> None:
        self.settings = settings
        self._registry: ConverterRegistry | None = None
        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

    @property
    def registry(self) -> ConverterRegistry:
        """Built-in converters plus those contributed by enabled plugins."""
        if self._registry is None:
            from treeconv.conversion.defaults import default_registry

            registry = default_registry.copy()
            if self.settings.plugins.enabled:
                from treeconv.plugins.manager import PluginManager

                manager = PluginManager()
                names = manager.discover_and_load(local_dir=self.settings.plugin_dir)
                applied = manager.apply(registry)
                logger.debug("Plugins loaded: %s (applied: %s)", names, applied)
            self._registry = registry
        return self._registry

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; failures go to stderr and exit with status 1."""
        output = format_result(
            result,
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
        )
        if result.ok:
            if output:
                click.echo(output)
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
