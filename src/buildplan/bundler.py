"""Render a :class:`~buildplan.models.WorkspacePlan` into bundler sections.

The bundler consumes one section per process, keyed ``main``, ``preload``
and ``renderer``, each in the usual ``plugins`` / ``resolve`` / ``build`` /
``esbuild`` / ``optimizeDeps`` / ``worker`` layout. Keys a profile does not
use are left out so the bundler's own defaults apply.

Example::

    >>> sections = to_bundler_config(plan)
    >>> sections["main"]["build"]["rollupOptions"]["external"][:2]
    ['bufferutil', 'utf-8-validate']
"""

from __future__ import annotations

from typing import Any

from buildplan.composer import TOGGLES_USED
from buildplan.models import BuildProfile, WorkspacePlan, thaw


def render_profile(profile: BuildProfile) -> dict[str, Any]:
    """Render a single profile into its bundler section."""
    used = TOGGLES_USED[profile.target]
    toggles = profile.toggles
    output = profile.output

    section: dict[str, Any] = {
        "plugins": [
            {"name": p.name, "package": p.package, "options": thaw(p.options)}
            for p in profile.plugins
        ],
    }
    if profile.aliases:
        section["resolve"] = {"alias": profile.alias_map}

    rollup: dict[str, Any] = {}
    if profile.externals is not None:
        rollup["external"] = list(profile.externals)
    if profile.entries is not None:
        rollup["input"] = profile.entry_map
    if output.single_file:
        rollup["output"] = {"manualChunks": None, "inlineDynamicImports": True}
    if output.suppressed_warnings:
        rollup["suppressWarnings"] = list(output.suppressed_warnings)

    build: dict[str, Any] = {"sourcemap": toggles.sourcemap}
    if output.build_target:
        build["target"] = output.build_target
    if rollup:
        build["rollupOptions"] = rollup
    section["build"] = build

    if "strip_legal_comments" in used:
        section["esbuild"] = (
            {"legalComments": "none"} if toggles.strip_legal_comments else {}
        )

    optimize: dict[str, Any] = {}
    if "no_dependency_discovery" in used:
        optimize["noDiscovery"] = toggles.no_dependency_discovery
    if output.optimize_deps_exclude:
        optimize["exclude"] = list(output.optimize_deps_exclude)
    if output.build_target:
        optimize["esbuildOptions"] = {"target": output.build_target}
    if optimize:
        section["optimizeDeps"] = optimize

    if output.worker_format:
        section["worker"] = {"format": output.worker_format}
    return section


def to_bundler_config(plan: WorkspacePlan) -> dict[str, dict[str, Any]]:
    """Render every profile of *plan*, keyed by target section name."""
    return {profile.target.value: render_profile(profile) for profile in plan.profiles}
