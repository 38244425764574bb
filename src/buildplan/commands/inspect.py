"""Inspect commands -- examine individual builder outputs.

Provides the ``buildplan inspect`` sub-command group. Each command runs a
single builder for the resolved workspace and environment and prints the
result as a table, which makes it easy to see why a plugin was or was not
selected without reading the whole plan.
"""

from __future__ import annotations

from typing import Optional

import typer

from buildplan.commands import exit_on_error, resolve_run
from buildplan.models import Target
from buildplan.output import print_table


inspect_app = typer.Typer(no_args_is_help=True)

_TARGET_OPTION = typer.Option(
    None, "--target", "-t", case_sensitive=False, help="Limit to one target."
)
_MODE_OPTION = typer.Option(None, "--mode", "-m", help="Build mode override.")


def _targets(target: Optional[Target]) -> list[Target]:
    return [target] if target is not None else list(Target)


@inspect_app.command("flags")
def inspect_flags(
    ctx: typer.Context,
    mode: Optional[str] = _MODE_OPTION,
) -> None:
    """Show the feature flags of the current environment snapshot.

    Example::

        VISUALIZER_RENDERER=1 buildplan inspect flags
    """
    with exit_on_error():
        _, env, _ = resolve_run(ctx, mode)

    rows = [[name, "yes" if value else "no"] for name, value in env.flags.items()]
    print_table(["Flag", "Set"], rows, title="Feature flags")


@inspect_app.command("aliases")
def inspect_aliases(
    ctx: typer.Context,
    target: Optional[Target] = _TARGET_OPTION,
) -> None:
    """List the resolved import aliases per target."""
    from buildplan.aliases import build_alias_map

    rows: list[list[str]] = []
    with exit_on_error():
        _, _, workspace = resolve_run(ctx)
        for t in _targets(target):
            for alias in build_alias_map(t, workspace.root):
                rows.append([t.value, alias.prefix, alias.path])

    print_table(["Target", "Prefix", "Path"], rows, title=f"Aliases ({len(rows)})")


@inspect_app.command("plugins")
def inspect_plugins(
    ctx: typer.Context,
    target: Optional[Target] = _TARGET_OPTION,
    mode: Optional[str] = _MODE_OPTION,
) -> None:
    """Show every plugin rule, its condition and whether it is selected.

    Example::

        buildplan inspect plugins -t renderer --mode development
    """
    from buildplan.plugins import PLUGIN_RULES, select_plugins

    rows: list[list[str]] = []
    with exit_on_error():
        _, env, _ = resolve_run(ctx, mode)
        for t in _targets(target):
            selected = {p.name for p in select_plugins(t, env)}
            for rule in PLUGIN_RULES[t]:
                condition = rule.condition.description
                if rule.dev_only:
                    condition += " (development only)"
                rows.append([
                    t.value,
                    rule.plugin.name,
                    rule.plugin.package,
                    condition,
                    "yes" if rule.plugin.name in selected else "",
                ])

    print_table(
        ["Target", "Plugin", "Package", "Condition", "Selected"],
        rows,
        title="Plugin rules",
    )


@inspect_app.command("entries")
def inspect_entries(ctx: typer.Context) -> None:
    """List the UI window pages and their HTML sources."""
    from buildplan.entries import build_entry_set

    with exit_on_error():
        _, _, workspace = resolve_run(ctx)
        entries = build_entry_set(workspace.ui_root)

    rows = [[e.page, e.path] for e in entries]
    print_table(["Page", "Path"], rows, title=f"UI entries ({len(rows)})")


@inspect_app.command("externals")
def inspect_externals(ctx: typer.Context) -> None:
    """List the modules left out of the host bundle and where each comes from."""
    from buildplan.externals import load_package_metadata, resolve_externals

    with exit_on_error():
        _, _, workspace = resolve_run(ctx)
        metadata = load_package_metadata(workspace.package)

    static = set(workspace.static_externals)
    rows = [
        [name, "static" if name in static else "dependency"]
        for name in resolve_externals(workspace.static_externals, metadata.dependencies)
    ]
    print_table(["Module", "Source"], rows, title=f"Host externals ({len(rows)})")
