"""Extension layer — plugin system via pluggy.

Discovery: entry points in the ``treeconv.plugins`` group plus single-file
plugins in the project's local plugin directory.
Plugin failures are warnings, never errors.
"""

from treeconv.plugins.hookspecs import hookimpl
from treeconv.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
