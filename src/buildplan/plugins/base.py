"""Conditions and rules for build-time plugin selection.

A :class:`PluginRule` pairs a :class:`~buildplan.models.PluginRef` with a
:class:`Condition`. Rules are grouped per target into ordered tables (see
:mod:`buildplan.plugins.rules`) and evaluated top to bottom by
:func:`~buildplan.plugins.selector.select_plugins`.

Example:
    A rule that adds a plugin only in development::

        PluginRule(
            plugin=PluginRef(name="inspect", package="code-inspector-plugin"),
            condition=FlagSet(FLAG_DEV),
        )
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from buildplan.environment import EnvironmentSnapshot
from buildplan.models import PluginRef


class Condition(ABC):
    """Predicate over an :class:`~buildplan.environment.EnvironmentSnapshot`.

    Subclasses must implement :attr:`description` and :meth:`evaluate`.
    Conditions must be pure: the same snapshot always yields the same result.
    """

    @property
    @abstractmethod
    def description(self) -> str:
        """Short human-readable form shown by ``buildplan inspect plugins``."""
        ...

    @abstractmethod
    def evaluate(self, env: EnvironmentSnapshot) -> bool:
        """Return ``True`` when the guarded plugin should be included."""
        ...


class Always(Condition):
    """Condition that holds for every snapshot."""

    @property
    def description(self) -> str:
        return "always"

    def evaluate(self, env: EnvironmentSnapshot) -> bool:
        return True

    def __repr__(self) -> str:
        return "Always()"


class FlagSet(Condition):
    """Condition that holds when a named feature flag is set."""

    def __init__(self, flag: str) -> None:
        self.flag = flag

    @property
    def description(self) -> str:
        return f"if {self.flag}"

    def evaluate(self, env: EnvironmentSnapshot) -> bool:
        return env.flag(self.flag)

    def __repr__(self) -> str:
        return f"FlagSet({self.flag!r})"


@dataclass(frozen=True)
class PluginRule:
    """One row of a target's plugin rule table.

    Attributes:
        plugin: The plugin included when the rule matches.
        condition: Guard evaluated against the environment snapshot.
        dev_only: The plugin may never be selected outside development,
            whatever its condition says.
    """

    plugin: PluginRef
    condition: Condition
    dev_only: bool = False
