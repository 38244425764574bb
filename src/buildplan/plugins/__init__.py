"""Build-time plugin selection.

Each target owns an ordered rule table mapping a condition on the
environment snapshot to a plugin reference. Selection is a single pass
over that table; nothing here instantiates or runs a plugin.

Key names:

* :class:`Condition`, :class:`Always`, :class:`FlagSet` -- rule guards.
* :class:`PluginRule` -- one row of a rule table.
* :data:`PLUGIN_RULES` -- the built-in tables per target.
* :func:`select_plugins` -- evaluate a table against a snapshot.

Example::

    from buildplan.plugins import select_plugins

    plugins = select_plugins(Target.UI, env)
    print([p.name for p in plugins])
"""

from buildplan.plugins.base import Always, Condition, FlagSet, PluginRule
from buildplan.plugins.rules import PLUGIN_RULES
from buildplan.plugins.selector import select_plugins

__all__ = [
    "Always",
    "Condition",
    "FlagSet",
    "PluginRule",
    "PLUGIN_RULES",
    "select_plugins",
]
