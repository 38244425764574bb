"""Compose command -- derive the workspace plan and print it.

The plan goes to stdout (or ``-o FILE``) so a build driver can hand it to
the bundler; a one-line summary goes to stderr.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from buildplan.commands import exit_on_error, resolve_run
from buildplan.models import Target
from buildplan.output import format_response, info


def compose_command(
    ctx: typer.Context,
    mode: Optional[str] = typer.Option(
        None, "--mode", "-m", help="Build mode (development/production); overrides NODE_ENV."
    ),
    target: Optional[Target] = typer.Option(
        None, "--target", "-t", case_sensitive=False, help="Only print this target."
    ),
    bundler: bool = typer.Option(
        False, "--bundler", help="Print bundler sections instead of the raw plan."
    ),
) -> None:
    """Compose the build plan for all targets.

    Every target is always composed, so a conflict in any target aborts
    the run even when ``--target`` selects another one.

    Example::

        buildplan compose --mode production --json
        buildplan compose --bundler -t renderer
    """
    from buildplan.bundler import to_bundler_config
    from buildplan.composer import compose_plan

    with exit_on_error():
        _, env, workspace = resolve_run(ctx, mode)
        plan = compose_plan(env, workspace)

    data: Any
    if bundler:
        data = to_bundler_config(plan)
        if target is not None:
            data = {target.value: data[target.value]}
    elif target is not None:
        data = plan.get(target).model_dump(mode="json")
    else:
        data = plan.model_dump(mode="json")

    format_response(data)
    mode_name = plan.mode.value if plan.mode else "unset"
    info(f"Composed {len(plan.profiles)} profiles (mode: {mode_name})")
