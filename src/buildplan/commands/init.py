"""Init command -- write a project-local ``buildplan.json``."""

from __future__ import annotations

from typing import Optional

import typer

from buildplan.commands import exit_on_error
from buildplan.output import error, info, success


def init_command(
    root: str = typer.Option(".", "--root", help="Workspace root directory."),
    package: str = typer.Option(
        "package.json", "--package", help="Package metadata file, relative to the root."
    ),
    ui_root: str = typer.Option(
        "src/renderer", "--ui-root", help="Directory holding the window pages."
    ),
    mode: Optional[str] = typer.Option(
        None, "--mode", "-m", help="Pin a build mode instead of reading NODE_ENV."
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file."),
) -> None:
    """Create ``buildplan.json`` in the current directory.

    Refuses to overwrite an existing file unless ``--force`` is given.

    Example::

        buildplan init --root ../desktop-app
        buildplan init --mode production --force
    """
    from buildplan.config import parse_mode, project_config_path, save_project_config
    from buildplan.models import ProjectConfig

    path = project_config_path()
    if path.exists() and not force:
        error(f"{path} already exists (use --force to overwrite)")
        raise typer.Exit(code=2)

    with exit_on_error():
        config = ProjectConfig(
            root=root,
            package=package,
            ui_root=ui_root,
            mode=parse_mode(mode) if mode is not None else None,
        )
        written = save_project_config(config)

    success(f"Wrote {written}")
    info("Next: buildplan compose")
