"""Project configuration with atomic writes and precedence resolution.

This module handles everything the CLI needs before composition starts:

* **Project config** -- an optional ``./buildplan.json`` deserialised into
  :class:`~buildplan.models.ProjectConfig`. Managed via
  :func:`load_project_config` and :func:`save_project_config`.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project config and defaults into the effective
  configuration.
* **Snapshot capture** -- :func:`capture_environment` takes the one
  environment snapshot a composition run uses, applying a configured mode
  as an override rather than touching ``os.environ``.

File writes use a temp-file-then-rename strategy (:func:`_atomic_write`)
so an interrupted ``buildplan init`` never leaves a truncated config.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Mapping, Optional

from buildplan.environment import MODE_VARIABLE, EnvironmentSnapshot
from buildplan.exceptions import ConfigError, InvalidUsageError
from buildplan.models import Mode, ProjectConfig

PROJECT_CONFIG_FILENAME = "buildplan.json"

ENV_ROOT = "BUILDPLAN_ROOT"
ENV_PACKAGE = "BUILDPLAN_PACKAGE"

_MODE_ALIASES = {
    "dev": Mode.DEVELOPMENT,
    "prod": Mode.PRODUCTION,
}


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and the error re-raised.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


# --- Project-local config ---


def project_config_path(cwd: Optional[Path] = None) -> Path:
    """Path of ``buildplan.json`` in *cwd* (default: current directory)."""
    return (cwd if cwd is not None else Path.cwd()) / PROJECT_CONFIG_FILENAME


def load_project_config(cwd: Optional[Path] = None) -> Optional[ProjectConfig]:
    """Load ``buildplan.json`` from *cwd*.

    Returns:
        The validated config, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = project_config_path(cwd)
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ProjectConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc


def save_project_config(config: ProjectConfig, cwd: Optional[Path] = None) -> Path:
    """Persist *config* atomically as ``buildplan.json`` and return its path."""
    path = project_config_path(cwd)
    data = config.model_dump(mode="json", exclude_none=True)
    _atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path


# --- Precedence resolution ---


def parse_mode(value: str) -> Mode:
    """Parse a mode name (``development``/``dev``, ``production``/``prod``).

    Raises:
        InvalidUsageError: If *value* names no known mode.
    """
    key = value.strip().lower()
    if key in _MODE_ALIASES:
        return _MODE_ALIASES[key]
    try:
        return Mode(key)
    except ValueError:
        raise InvalidUsageError(
            f"Unknown mode '{value}' (expected development or production)"
        ) from None


def resolve_config(
    cli_root: Optional[str] = None,
    cli_package: Optional[str] = None,
    cli_mode: Optional[str] = None,
    cwd: Optional[Path] = None,
) -> ProjectConfig:
    """Resolve the effective project configuration.

    Precedence (high to low):
        1. CLI flags (``cli_root``, ``cli_package``, ``cli_mode``)
        2. Environment variables (``BUILDPLAN_ROOT``, ``BUILDPLAN_PACKAGE``)
        3. Project config (``./buildplan.json``)
        4. Defaults

    Raises:
        ConfigError: If the project config file is invalid.
        InvalidUsageError: If ``cli_mode`` is not a known mode.
    """
    # 4 + 3
    config = load_project_config(cwd) or ProjectConfig()

    updates: dict[str, object] = {}
    # 2
    env_root = os.environ.get(ENV_ROOT)
    if env_root:
        updates["root"] = env_root
    env_package = os.environ.get(ENV_PACKAGE)
    if env_package:
        updates["package"] = env_package
    # 1
    if cli_root is not None:
        updates["root"] = cli_root
    if cli_package is not None:
        updates["package"] = cli_package
    if cli_mode is not None:
        updates["mode"] = parse_mode(cli_mode)

    return config.model_copy(update=updates)


def capture_environment(
    config: ProjectConfig, environ: Optional[Mapping[str, str]] = None
) -> EnvironmentSnapshot:
    """Capture the run's snapshot, letting a configured mode win over ``NODE_ENV``."""
    overrides = {MODE_VARIABLE: config.mode.value} if config.mode is not None else None
    return EnvironmentSnapshot.capture(environ, overrides=overrides)
