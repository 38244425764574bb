"""Plugin catalogue and the per-target rule tables.

Ordering inside a table is significant: plugins that transform source syntax
come before plugins that only observe the output, so the visualizer is
always last in any table that has one.
"""

from __future__ import annotations

from buildplan.environment import FLAG_DEV, visualizer_flag
from buildplan.models import PluginRef, Target
from buildplan.plugins.base import Always, FlagSet, PluginRule

VISUALIZER = PluginRef(
    name="visualizer", package="rollup-plugin-visualizer", options={"open": True}
)
UI_COMPILER = PluginRef(
    name="uiCompiler", package="@vitejs/plugin-react-swc", options={"tsDecorators": True}
)
CSS_UTILITY = PluginRef(name="cssUtility", package="@tailwindcss/vite")
SOURCE_INSPECTION = PluginRef(
    name="sourceInspection", package="code-inspector-plugin", options={"bundler": "vite"}
)

PLUGIN_RULES: dict[Target, tuple[PluginRule, ...]] = {
    Target.HOST: (
        PluginRule(VISUALIZER, FlagSet(visualizer_flag(Target.HOST))),
    ),
    Target.BRIDGE: (
        PluginRule(UI_COMPILER, Always()),
    ),
    Target.UI: (
        PluginRule(CSS_UTILITY, Always()),
        PluginRule(UI_COMPILER, Always()),
        PluginRule(SOURCE_INSPECTION, FlagSet(FLAG_DEV), dev_only=True),
        PluginRule(VISUALIZER, FlagSet(visualizer_flag(Target.UI))),
    ),
}
