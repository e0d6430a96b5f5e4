"""Extension layer: ledger events delivered to pluggy plugins.

Plugins are found through the ``fundctl.plugins`` entry-point group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from fundctl.plugins.event_bus import EventBus
from fundctl.plugins.manager import load_ledger_plugins, new_plugin_manager

__all__ = ["EventBus", "load_ledger_plugins", "new_plugin_manager"]
