"""Host-process externals -- modules the runtime supplies at execution time.

The host process runs inside a runtime that already provides its native
add-ons and its own host module, and installs every declared runtime
dependency next to the bundle. Those modules are left out of the bundle and
loaded through the runtime's module system instead.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Union

from pydantic import ValidationError

from buildplan.exceptions import MetadataError
from buildplan.models import PackageMetadata


def load_package_metadata(path: Union[str, Path]) -> PackageMetadata:
    """Load and validate ``package.json``.

    Args:
        path: Path to the package metadata file.

    Returns:
        The validated :class:`~buildplan.models.PackageMetadata`. A file
        without a ``dependencies`` key yields an empty mapping.

    Raises:
        MetadataError: If the file is missing, is not valid JSON, is not a
            JSON object, or declares ``dependencies`` in the wrong shape.
    """
    path = Path(path)
    if not path.is_file():
        raise MetadataError(f"Package metadata not found at {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise MetadataError(f"Cannot read package metadata at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise MetadataError(f"Package metadata at {path} must be a JSON object")
    try:
        return PackageMetadata.model_validate(data)
    except ValidationError as exc:
        raise MetadataError(f"Invalid package metadata at {path}: {exc}") from exc


def resolve_externals(
    static: Iterable[str], dependencies: Iterable[str]
) -> tuple[str, ...]:
    """Union of the static exclusions and the declared dependency names.

    Static names come first, then dependencies in declaration order; the
    first occurrence of a name wins.
    """
    # dict keeps insertion order
    merged = dict.fromkeys(static)
    merged.update(dict.fromkeys(dependencies))
    return tuple(merged)
