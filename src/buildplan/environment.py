"""Environment snapshot and feature flags.

Composition never reads ``os.environ`` directly. Instead an
:class:`EnvironmentSnapshot` is captured once at the start of a run and
passed explicitly to every builder, so a flag cannot change value halfway
through a composition and tests can build snapshots from plain dicts.

Variables consulted:

* ``NODE_ENV`` -- ``development`` sets ``isDev``, ``production`` sets
  ``isProd``. Any other value (or none) sets neither.
* ``VISUALIZER_MAIN``, ``VISUALIZER_PRELOAD``, ``VISUALIZER_RENDERER`` --
  enable the bundle-size visualizer for one target. Any non-empty value
  counts as set, including ``0`` and ``false``.

Unknown flag names resolve to ``False``.
"""

from __future__ import annotations

import logging
import os
from typing import Annotated, Mapping, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, PlainSerializer

from buildplan.models import Mode, Target, freeze, thaw

logger = logging.getLogger(__name__)

MODE_VARIABLE = "NODE_ENV"
FLAG_DEV = "isDev"
FLAG_PROD = "isProd"


def visualizer_variable(target: Target) -> str:
    """Name of the environment variable enabling the visualizer for *target*."""
    return f"VISUALIZER_{target.value.upper()}"


def visualizer_flag(target: Target) -> str:
    """Name of the feature flag enabling the visualizer for *target*."""
    return f"visualizer.{target.value}"


CONSULTED_VARIABLES: tuple[str, ...] = (MODE_VARIABLE,) + tuple(
    visualizer_variable(t) for t in Target
)


def _is_enabled(value: Optional[str]) -> bool:
    return bool(value)


class EnvironmentSnapshot(BaseModel):
    """Read-only view of the environment variables composition depends on.

    Attributes:
        variables: The consulted variables that were present at capture time.
        flags: Every feature flag, computed once at capture time.
    """

    model_config = ConfigDict(frozen=True)

    variables: Annotated[
        Mapping[str, str], AfterValidator(freeze), PlainSerializer(thaw)
    ]
    flags: Annotated[
        Mapping[str, bool], AfterValidator(freeze), PlainSerializer(thaw)
    ]

    @classmethod
    def capture(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        overrides: Optional[Mapping[str, Optional[str]]] = None,
    ) -> EnvironmentSnapshot:
        """Copy the consulted variables and derive all feature flags.

        Args:
            environ: Source mapping. Defaults to ``os.environ``.
            overrides: Values that replace the source for this snapshot
                only. A ``None`` value removes the variable.

        Returns:
            A frozen snapshot.
        """
        source = os.environ if environ is None else environ
        variables = {
            name: str(source[name]) for name in CONSULTED_VARIABLES if name in source
        }
        for name, value in (overrides or {}).items():
            if value is None:
                variables.pop(name, None)
            else:
                variables[name] = value

        mode = variables.get(MODE_VARIABLE)
        flags = {
            FLAG_DEV: mode == Mode.DEVELOPMENT.value,
            FLAG_PROD: mode == Mode.PRODUCTION.value,
        }
        for target in Target:
            flags[visualizer_flag(target)] = _is_enabled(
                variables.get(visualizer_variable(target))
            )

        logger.debug("Captured environment flags: %s", flags)
        return cls(variables=variables, flags=flags)

    def flag(self, name: str) -> bool:
        """Return the value of the flag *name*, or ``False`` if unknown."""
        return self.flags.get(name, False)

    @property
    def is_dev(self) -> bool:
        return self.flag(FLAG_DEV)

    @property
    def is_prod(self) -> bool:
        return self.flag(FLAG_PROD)

    @property
    def mode(self) -> Optional[Mode]:
        """The recognised build mode, or ``None`` when neither flag is set."""
        if self.is_dev:
            return Mode.DEVELOPMENT
        if self.is_prod:
            return Mode.PRODUCTION
        return None

    def visualizer_enabled_for(self, target: Target) -> bool:
        return self.flag(visualizer_flag(target))
