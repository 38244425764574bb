"""Built-in CLI sub-commands for buildplan.

* :mod:`~buildplan.commands.compose` -- compose and print the plan.
* :mod:`~buildplan.commands.inspect` -- tables of individual builder outputs.
* :mod:`~buildplan.commands.init` -- write ``buildplan.json``.

The helpers below are shared by all of them: :func:`resolve_run` turns the
root callback's options into the configuration, snapshot and workspace of
one run, and :func:`exit_on_error` maps :class:`BuildPlanError` to a clean
exit with the error's code.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

import typer

from buildplan.environment import EnvironmentSnapshot
from buildplan.exceptions import BuildPlanError
from buildplan.models import ProjectConfig, Workspace
from buildplan.output import debug, error


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Print a :class:`BuildPlanError` and exit with its ``exit_code``."""
    try:
        yield
    except BuildPlanError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def resolve_run(
    ctx: typer.Context, mode: Optional[str] = None
) -> tuple[ProjectConfig, EnvironmentSnapshot, Workspace]:
    """Resolve config, capture the snapshot and lay out the workspace.

    Args:
        ctx: Typer context carrying the root ``--root`` / ``--package``
            options in ``ctx.obj``.
        mode: Command-level ``--mode`` override.

    Raises:
        ConfigError: If ``buildplan.json`` is invalid.
        InvalidUsageError: If *mode* is not a known mode.
    """
    from buildplan.config import capture_environment, resolve_config

    obj = ctx.obj or {}
    config = resolve_config(
        cli_root=obj.get("root"),
        cli_package=obj.get("package"),
        cli_mode=mode,
    )
    env = capture_environment(config)
    workspace = Workspace.from_config(config)
    debug(f"Workspace root: {workspace.root}")
    return config, env, workspace
