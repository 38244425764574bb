"""Canonical Pydantic models shared across all buildplan modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Configuration models** -- read from ``buildplan.json`` or ``package.json``:
    :class:`ProjectConfig` and :class:`PackageMetadata`.

**Topology** -- the resolved, absolute layout of the workspace:
    :class:`Target` and :class:`Workspace`.

**Plan models** -- produced by the composer and handed to the bundler:
    :class:`AliasEntry`, :class:`PluginRef`, :class:`Entry`,
    :class:`OptimizationToggles`, :class:`OutputOptions`,
    :class:`BuildProfile` and :class:`WorkspacePlan`.

Plan models are frozen. A composed plan is never modified; a different
environment requires a fresh composition.
"""

from __future__ import annotations

import enum
from pathlib import Path
from types import MappingProxyType
from typing import Annotated, Any, Mapping, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer

DEFAULT_STATIC_EXTERNALS: tuple[str, ...] = ("bufferutil", "utf-8-validate", "electron")
"""Native add-ons and the runtime host module, always supplied at run time."""


def freeze(value: Any) -> Any:
    """Recursively replace mappings and lists with read-only equivalents."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of :func:`freeze`, producing plain JSON-compatible containers."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw(v) for v in value]
    return value


ReadOnlyMapping = Annotated[
    Mapping[str, Any], AfterValidator(freeze), PlainSerializer(thaw)
]
"""A mapping field that cannot be modified after validation, even in place."""


class Target(str, enum.Enum):
    """The three independently bundled process roles.

    Values are the section names the bundler expects. Declaration order is
    the order profiles appear in a :class:`WorkspacePlan`.
    """

    HOST = "main"
    BRIDGE = "preload"
    UI = "renderer"


class Mode(str, enum.Enum):
    """Build modes understood by the ``NODE_ENV`` selector."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"


# --- Configuration models ---


class ProjectConfig(BaseModel):
    """Project-local configuration persisted as ``./buildplan.json``.

    Relative paths are interpreted against the directory the command runs
    in (for ``root``) or against ``root`` (for everything else). See
    :func:`~buildplan.config.resolve_config` for the precedence chain.
    """

    root: str = Field(default=".", description="Workspace root directory")
    package: str = Field(
        default="package.json", description="Package metadata file, relative to root"
    )
    ui_root: str = Field(
        default="src/renderer", description="UI source root holding the window pages"
    )
    static_externals: list[str] = Field(
        default_factory=lambda: list(DEFAULT_STATIC_EXTERNALS),
        description="Modules never bundled into the host process",
    )
    mode: Optional[Mode] = Field(
        default=None, description="Overrides NODE_ENV when set"
    )


class PackageMetadata(BaseModel):
    """The subset of ``package.json`` the composer reads.

    Only ``dependencies`` matters for composition; other keys are kept in
    ``model_extra`` untouched.
    """

    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    version: Optional[str] = None
    dependencies: dict[str, str] = Field(default_factory=dict)


class Workspace(BaseModel):
    """Absolute workspace layout every builder resolves against."""

    model_config = ConfigDict(frozen=True)

    root: Path
    ui_root: Path
    package: Path
    static_externals: tuple[str, ...] = DEFAULT_STATIC_EXTERNALS

    @classmethod
    def from_config(cls, config: ProjectConfig, cwd: Optional[Path] = None) -> Workspace:
        """Resolve a :class:`ProjectConfig` into absolute paths.

        Args:
            config: The effective project configuration.
            cwd: Directory a relative ``root`` is resolved against. Defaults
                to the current working directory.
        """
        base = cwd if cwd is not None else Path.cwd()
        root = Path(config.root)
        if not root.is_absolute():
            root = base / root
        root = root.absolute()
        return cls(
            root=root,
            ui_root=root / config.ui_root,
            package=root / config.package,
            static_externals=tuple(config.static_externals),
        )


# --- Plan models ---


class AliasEntry(BaseModel):
    """A symbolic import prefix and the absolute path it stands for."""

    model_config = ConfigDict(frozen=True)

    prefix: str
    path: str


class PluginRef(BaseModel):
    """Opaque handle to a build-time plugin and its instantiation options.

    The composer never looks inside ``options``; it only decides whether and
    where a plugin appears in a target's sequence.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    package: str
    options: ReadOnlyMapping = Field(default_factory=dict, validate_default=True)


class Entry(BaseModel):
    """One independent UI window: logical page name and its HTML source."""

    model_config = ConfigDict(frozen=True)

    page: str
    path: str


class OptimizationToggles(BaseModel):
    """Mode-derived optimisation switches."""

    model_config = ConfigDict(frozen=True)

    sourcemap: bool = False
    strip_legal_comments: bool = False
    no_dependency_discovery: bool = False


class OutputOptions(BaseModel):
    """Static output shape of a target's bundle."""

    model_config = ConfigDict(frozen=True)

    single_file: bool = Field(
        default=False, description="Disable chunk splitting and inline dynamic imports"
    )
    build_target: Optional[str] = None
    worker_format: Optional[str] = None
    suppressed_warnings: tuple[str, ...] = ()
    optimize_deps_exclude: tuple[str, ...] = ()


class BuildProfile(BaseModel):
    """The complete configuration for one target's bundle.

    ``entries`` is only set for :attr:`Target.UI` and ``externals`` only
    for :attr:`Target.HOST`; both are ``None`` elsewhere.
    """

    model_config = ConfigDict(frozen=True)

    target: Target
    aliases: tuple[AliasEntry, ...] = ()
    plugins: tuple[PluginRef, ...] = ()
    entries: Optional[tuple[Entry, ...]] = None
    externals: Optional[tuple[str, ...]] = None
    toggles: OptimizationToggles = Field(default_factory=OptimizationToggles)
    output: OutputOptions = Field(default_factory=OutputOptions)

    @property
    def alias_map(self) -> dict[str, str]:
        """Aliases as a ``prefix -> path`` mapping, in declaration order."""
        return {a.prefix: a.path for a in self.aliases}

    @property
    def entry_map(self) -> dict[str, str]:
        """Entries as a ``page -> path`` mapping (empty for non-UI targets)."""
        return {e.page: e.path for e in self.entries or ()}

    @property
    def plugin_names(self) -> list[str]:
        return [p.name for p in self.plugins]


class WorkspacePlan(BaseModel):
    """All three build profiles for one build invocation, in target order."""

    model_config = ConfigDict(frozen=True)

    mode: Optional[Mode] = None
    profiles: tuple[BuildProfile, ...]

    def get(self, target: Target) -> BuildProfile:
        """Return the profile for *target*.

        Raises:
            KeyError: If the plan holds no profile for *target*.
        """
        for profile in self.profiles:
            if profile.target == target:
                return profile
        raise KeyError(target.value)

    def to_json(self) -> str:
        """Serialise the plan as deterministic, indented JSON."""
        return self.model_dump_json(indent=2)
