"""Observer hooks via pluggy.

Discovery: entry_points (pip-installed) in the ``stargate.plugins`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from stargate.plugins.hookspecs import hookimpl
from stargate.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
