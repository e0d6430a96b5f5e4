"""Building the pluggy manager that receives ledger events.

Ledger plugins come from installed distributions advertising the
``fundctl.plugins`` entry-point group, plus the built-in activity log.
Names listed in ``[plugins] disabled`` are blocked before anything loads,
so a misbehaving third-party plugin can be switched off from
``fundctl.toml`` without uninstalling it.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING

import pluggy

from fundctl.plugins.builtins.activity import ActivityLogPlugin
from fundctl.plugins.hookspecs import FundctlHookSpec

if TYPE_CHECKING:
    from fundctl.config.models import PluginsConfig

ENTRY_POINT_GROUP = "fundctl.plugins"
ACTIVITY_LOG = "activity-log-builtin"

logger = logging.getLogger(__name__)


def new_plugin_manager() -> pluggy.PluginManager:
    """An empty manager that knows the ledger hook specifications."""
    pm = pluggy.PluginManager("fundctl")
    pm.add_hookspecs(FundctlHookSpec)
    return pm


def load_ledger_plugins(
    config: PluginsConfig,
    pm: pluggy.PluginManager | None = None,
) -> pluggy.PluginManager:
    """Register every plugin the ledger's ``[plugins]`` section allows.

    Entry points load first; plugin classes among them are then replaced
    by instances. The activity log is registered last when enabled.
    """
    pm = pm or new_plugin_manager()
    for name in config.disabled:
        pm.set_blocked(name)

    found = pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
    dropped = instantiate_plugin_classes(pm)

    if config.activity_log and not pm.is_blocked(ACTIVITY_LOG):
        pm.register(ActivityLogPlugin(), name=ACTIVITY_LOG)

    logger.debug(
        "Ledger plugins: %d from entry points, %d dropped, active: %s",
        found,
        len(dropped),
        ", ".join(plugin_names(pm)) or "none",
    )
    return pm


def instantiate_plugin_classes(pm: pluggy.PluginManager) -> list[str]:
    """Swap each plugin registered as a class for an instance of it.

    A hook bound to a class has no ``self`` and fails when an event
    fires. Classes whose constructor raises are unregistered; their
    names are returned.
    """
    dropped: list[str] = []
    for name, plugin in list(pm.list_name_plugin()):
        if plugin is None or not inspect.isclass(plugin):
            continue
        pm.unregister(name=name)
        try:
            instance = plugin()
        except Exception:
            logger.warning("Plugin %s could not be constructed; skipping it", name, exc_info=True)
            dropped.append(name)
            continue
        pm.register(instance, name=name)
    return dropped


def plugin_names(pm: pluggy.PluginManager) -> list[str]:
    """Names of the registered (not blocked) plugins, sorted."""
    return sorted(name for name, plugin in pm.list_name_plugin() if plugin is not None)
