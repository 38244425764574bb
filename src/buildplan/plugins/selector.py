"""Plugin selection -- evaluate a target's rule table against a snapshot."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from buildplan.environment import EnvironmentSnapshot
from buildplan.models import PluginRef, Target
from buildplan.plugins.base import PluginRule
from buildplan.plugins.rules import PLUGIN_RULES

logger = logging.getLogger(__name__)


def select_plugins(
    target: Target,
    env: EnvironmentSnapshot,
    rules: Optional[Iterable[PluginRule]] = None,
) -> tuple[PluginRef, ...]:
    """Return the ordered plugin sequence for *target*.

    Rules are evaluated in declaration order and matching plugins keep that
    order. A rule marked ``dev_only`` never contributes outside development,
    even when its own condition holds.

    Args:
        target: Target being composed.
        env: The run's environment snapshot.
        rules: Explicit rule table to use instead of :data:`PLUGIN_RULES`.

    Returns:
        The selected plugins as an immutable tuple.
    """
    if rules is None:
        rules = PLUGIN_RULES[target]

    selected: list[PluginRef] = []
    for rule in rules:
        if not rule.condition.evaluate(env):
            logger.debug(
                "Plugin '%s' skipped for '%s' (%s)",
                rule.plugin.name,
                target.value,
                rule.condition.description,
            )
            continue
        if rule.dev_only and not env.is_dev:
            logger.warning(
                "Plugin '%s' is development-only, not selected for '%s'",
                rule.plugin.name,
                target.value,
            )
            continue
        selected.append(rule.plugin)

    logger.debug(
        "Selected plugins for '%s': %s", target.value, [p.name for p in selected]
    )
    return tuple(selected)
