"""Profile composition -- combine every builder's output into one plan.

:func:`compose_plan` is the single entry point a build driver needs: given
an :class:`~buildplan.environment.EnvironmentSnapshot` and a
:class:`~buildplan.models.Workspace` it returns a frozen
:class:`~buildplan.models.WorkspacePlan` with the host, bridge and UI
profiles in that order.

Composition is a pure function of its inputs. Package metadata is loaded
before any profile is built, so a metadata failure aborts the whole run
rather than leaving the plan partially composed. A duplicate alias or page
declaration likewise raises before any plan is returned.
"""

from __future__ import annotations

import logging
from typing import Optional

from buildplan.aliases import build_alias_map
from buildplan.entries import build_entry_set
from buildplan.environment import EnvironmentSnapshot
from buildplan.externals import load_package_metadata, resolve_externals
from buildplan.models import (
    BuildProfile,
    OptimizationToggles,
    OutputOptions,
    PackageMetadata,
    Target,
    Workspace,
    WorkspacePlan,
)
from buildplan.plugins import select_plugins

logger = logging.getLogger(__name__)

COMMONJS_IN_ESM_WARNING = "COMMONJS_VARIABLE_IN_ESM"

TOGGLES_USED: dict[Target, frozenset[str]] = {
    Target.HOST: frozenset(
        {"sourcemap", "strip_legal_comments", "no_dependency_discovery"}
    ),
    Target.BRIDGE: frozenset({"sourcemap"}),
    Target.UI: frozenset({"sourcemap", "strip_legal_comments"}),
}
"""Which mode-derived toggles each target applies; the rest stay off."""

OUTPUT_OPTIONS: dict[Target, OutputOptions] = {
    Target.HOST: OutputOptions(
        single_file=True,
        suppressed_warnings=(COMMONJS_IN_ESM_WARNING,),
    ),
    Target.BRIDGE: OutputOptions(),
    Target.UI: OutputOptions(
        build_target="esnext",
        worker_format="es",
        suppressed_warnings=(COMMONJS_IN_ESM_WARNING,),
        optimize_deps_exclude=("pyodide",),
    ),
}


def derive_toggles(target: Target, env: EnvironmentSnapshot) -> OptimizationToggles:
    """Compute the optimisation toggles *target* uses for this snapshot.

    Source maps and disabled dependency discovery follow ``isDev``;
    legal-comment stripping follows ``isProd``.
    """
    values = {
        "sourcemap": env.is_dev,
        "strip_legal_comments": env.is_prod,
        "no_dependency_discovery": env.is_dev,
    }
    used = TOGGLES_USED[target]
    return OptimizationToggles(
        **{name: value and name in used for name, value in values.items()}
    )


def compose_profile(
    target: Target,
    env: EnvironmentSnapshot,
    workspace: Workspace,
    metadata: Optional[PackageMetadata] = None,
) -> BuildProfile:
    """Build the profile of a single target.

    Args:
        target: Target to compose.
        env: The run's environment snapshot.
        workspace: Absolute workspace layout.
        metadata: Pre-loaded package metadata. Only the host target needs
            it; when omitted for the host it is loaded from
            ``workspace.package``.

    Raises:
        AliasConflictError: If the target declares a prefix twice.
        EntryConflictError: If the UI declares a page twice.
        MetadataError: If the host's package metadata cannot be loaded.
    """
    entries = None
    externals = None
    if target is Target.UI:
        entries = build_entry_set(workspace.ui_root)
    if target is Target.HOST:
        if metadata is None:
            metadata = load_package_metadata(workspace.package)
        externals = resolve_externals(
            workspace.static_externals, metadata.dependencies
        )

    profile = BuildProfile(
        target=target,
        aliases=build_alias_map(target, workspace.root),
        plugins=select_plugins(target, env),
        entries=entries,
        externals=externals,
        toggles=derive_toggles(target, env),
        output=OUTPUT_OPTIONS[target],
    )
    logger.debug(
        "Composed '%s': %d aliases, plugins=%s",
        target.value,
        len(profile.aliases),
        profile.plugin_names,
    )
    return profile


def compose_plan(
    env: EnvironmentSnapshot,
    workspace: Workspace,
    metadata: Optional[PackageMetadata] = None,
) -> WorkspacePlan:
    """Compose the profiles of all targets into a :class:`WorkspacePlan`.

    Args:
        env: The run's environment snapshot.
        workspace: Absolute workspace layout.
        metadata: Pre-loaded package metadata; loaded from
            ``workspace.package`` when omitted.

    Returns:
        The frozen plan, profiles ordered host, bridge, UI.

    Raises:
        CompositionError: On a duplicate alias prefix or page name.
        MetadataError: If package metadata is missing or malformed.
    """
    if metadata is None:
        metadata = load_package_metadata(workspace.package)

    profiles = tuple(
        compose_profile(target, env, workspace, metadata) for target in Target
    )
    plan = WorkspacePlan(mode=env.mode, profiles=profiles)
    logger.info(
        "Composed build plan for %d targets (mode: %s)",
        len(profiles),
        env.mode.value if env.mode else "unset",
    )
    return plan
