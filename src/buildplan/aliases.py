"""Per-target import alias maps.

Each target owns a hand-curated list of ``(prefix, relative path)``
declarations. Aliases used by more than one target are declared once in
:data:`SHARED_ALIASES` and each target opts in to the ones it needs by
prefix, so the shared locations cannot drift apart between targets.

Target sets are never merged: importing a host-only alias from UI code must
fail in the bundler as an unresolved import.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from buildplan.exceptions import AliasConflictError
from buildplan.models import AliasEntry, Target

logger = logging.getLogger(__name__)

AliasDeclaration = tuple[str, str]

SHARED_ALIASES: dict[str, str] = {
    "@shared": "packages/shared",
    "@types": "src/renderer/src/types",
    "@mcp-trace/trace-core": "packages/mcp-trace/trace-core",
}


def shared(*prefixes: str) -> tuple[AliasDeclaration, ...]:
    """Opt in to shared aliases by prefix.

    Raises:
        KeyError: If a prefix is not declared in :data:`SHARED_ALIASES`.
    """
    return tuple((prefix, SHARED_ALIASES[prefix]) for prefix in prefixes)


TARGET_ALIASES: dict[Target, tuple[AliasDeclaration, ...]] = {
    Target.HOST: (
        ("@main", "src/main"),
        *shared("@types", "@shared"),
        ("@logger", "src/main/services/LoggerService"),
        *shared("@mcp-trace/trace-core"),
        ("@mcp-trace/trace-node", "packages/mcp-trace/trace-node"),
    ),
    Target.BRIDGE: shared("@shared", "@mcp-trace/trace-core"),
    Target.UI: (
        ("@renderer", "src/renderer/src"),
        *shared("@shared", "@types"),
        ("@logger", "src/renderer/src/services/LoggerService"),
        ("@cherrystudio/ai-core", "packages/aiCore/src"),
        ("@cherrystudio/extension-table-plus", "packages/extension-table-plus/src"),
    ),
}


def build_alias_map(
    target: Target,
    root: Union[str, Path],
    declarations: Optional[Iterable[AliasDeclaration]] = None,
) -> tuple[AliasEntry, ...]:
    """Resolve a target's alias declarations against the workspace root.

    Args:
        target: The target whose declarations are resolved.
        root: Workspace root; made absolute before joining.
        declarations: Explicit declarations to use instead of
            :data:`TARGET_ALIASES`.

    Returns:
        Alias entries in declaration order.

    Raises:
        AliasConflictError: If two declarations share a prefix.
    """
    if declarations is None:
        declarations = TARGET_ALIASES[target]
    base = Path(root).absolute()

    seen: set[str] = set()
    entries: list[AliasEntry] = []
    for prefix, relative in declarations:
        if prefix in seen:
            raise AliasConflictError(target.value, prefix)
        seen.add(prefix)
        entries.append(AliasEntry(prefix=prefix, path=str(base / relative)))

    logger.debug("Resolved %d aliases for target '%s'", len(entries), target.value)
    return tuple(entries)
