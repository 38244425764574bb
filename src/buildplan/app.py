"""Typer application and CLI entry point for buildplan.

This module wires together the top-level Typer application and registers
the built-in commands (``compose``, ``inspect``, ``init``). The root
callback installs the global :class:`~buildplan.output.OutputManager`
and stores the workspace options shared by every command.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any, Optional

import typer

from buildplan import __version__
from buildplan.commands.compose import compose_command
from buildplan.commands.init import init_command
from buildplan.commands.inspect import inspect_app
from buildplan.exit_codes import EXIT_GENERIC_FAILURE

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="buildplan",
    help="Compose per-process build profiles for multi-process desktop apps.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("compose")(compose_command)
app.command("init")(init_command)
app.add_typer(inspect_app, name="inspect", help="Inspect individual builder outputs.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"buildplan {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    root: Optional[str] = typer.Option(
        None, "--root", "-r", help="Workspace root (overrides BUILDPLAN_ROOT)."
    ),
    package: Optional[str] = typer.Option(
        None, "--package", help="Package metadata file, relative to the root."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write the plan to this file."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the output manager, routes library logging to stderr and
    stores ``root`` / ``package`` in ``ctx.obj`` for
    :func:`~buildplan.commands.resolve_run`.
    """
    from buildplan.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
        output_file=output_file,
    )
    output.configure_logging()
    set_output(output)

    ctx.ensure_object(dict)
    ctx.obj["root"] = root
    ctx.obj["package"] = package


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``buildplan`` console script.

    :class:`~buildplan.exceptions.BuildPlanError` instances that escape a
    command exit with the error's ``exit_code``; anything else is reported
    (with a traceback under ``--verbose``) and exits with
    :data:`~buildplan.exit_codes.EXIT_GENERIC_FAILURE`.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from buildplan.exceptions import BuildPlanError
        from buildplan.output import error

        if isinstance(exc, BuildPlanError):
            error(str(exc))
            sys.exit(exc.exit_code)
        logger.debug("Unhandled exception", exc_info=True)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
