"""Shared test fixtures for buildplan.

Provides an isolated environment (no inherited ``NODE_ENV`` or visualizer
variables), a temporary workspace with a ``package.json``, snapshot
factories and a CLI runner. These fixtures are discovered automatically by
pytest.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from buildplan.environment import CONSULTED_VARIABLES, EnvironmentSnapshot
from buildplan.models import PackageMetadata, Workspace
from buildplan.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and package logger after every test.

    The manager caches the streams that were current when it was created;
    once CliRunner restores them those references are closed. The CLI
    callback also detaches the ``buildplan`` logger from the root logger,
    which would hide records from ``caplog`` in later tests.
    """
    yield
    reset_output()
    package_logger = logging.getLogger("buildplan")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Clear every variable buildplan reads and chdir into *tmp_path*.

    Returns:
        The tmp_path root directory.
    """
    for var in CONSULTED_VARIABLES + ("BUILDPLAN_ROOT", "BUILDPLAN_PACKAGE", "NO_COLOR"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_env() -> Callable[..., EnvironmentSnapshot]:
    """Factory building snapshots from keyword variables.

    Example::

        env = make_env(NODE_ENV="development", VISUALIZER_RENDERER="1")
    """

    def _make(**variables: str) -> EnvironmentSnapshot:
        return EnvironmentSnapshot.capture(variables)

    return _make


@pytest.fixture
def dev_env(make_env) -> EnvironmentSnapshot:
    return make_env(NODE_ENV="development")


@pytest.fixture
def prod_env(make_env) -> EnvironmentSnapshot:
    return make_env(NODE_ENV="production")


# ---------------------------------------------------------------------------
# Workspace fixtures
# ---------------------------------------------------------------------------


def _write_package_json(
    root: Path, dependencies: Optional[dict[str, str]] = None, **extra: Any
) -> Path:
    data: dict[str, Any] = {"name": "desktop-app", "version": "1.0.0", **extra}
    if dependencies is not None:
        data["dependencies"] = dependencies
    path = root / "package.json"
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def write_package_json() -> Callable[..., Path]:
    """Factory writing ``package.json`` into a directory and returning its path."""
    return _write_package_json


@pytest.fixture
def workspace_root(isolated_env: Path) -> Path:
    """A workspace directory with a package.json declaring two dependencies."""
    _write_package_json(isolated_env, {"axios": "^1.7.0", "zod": "^3.23.0"})
    return isolated_env


@pytest.fixture
def workspace(workspace_root: Path) -> Workspace:
    return Workspace(
        root=workspace_root,
        ui_root=workspace_root / "src" / "renderer",
        package=workspace_root / "package.json",
    )


@pytest.fixture
def metadata() -> PackageMetadata:
    return PackageMetadata(dependencies={"axios": "^1.7.0", "zod": "^3.23.0"})


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
