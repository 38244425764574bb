"""Exception hierarchy for buildplan.

All exceptions inherit from :class:`BuildPlanError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`buildplan.exit_codes`.
The top-level error handler in :func:`buildplan.app.main` catches
``BuildPlanError`` and exits with the appropriate code.

Subclass hierarchy::

    BuildPlanError (exit 1)
    +-- InvalidUsageError       (exit 2)
    +-- ConfigError             (exit 1)
    +-- CompositionError        (exit 3)
    |   +-- AliasConflictError
    |   +-- EntryConflictError
    +-- MetadataError           (exit 4)
"""

from buildplan.exit_codes import (
    EXIT_COMPOSITION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_METADATA_ERROR,
)


class BuildPlanError(Exception):
    """Base exception for all buildplan errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`buildplan.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(BuildPlanError):
    """Raised for invalid CLI arguments (unknown target, unknown mode)."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(BuildPlanError):
    """Raised for project configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE


class CompositionError(BuildPlanError):
    """Raised when the static declarations of a target are inconsistent.

    This is a programmer error in the declarations, never a runtime
    condition, so the whole composition is aborted.

    Args:
        target: Value of the target whose declarations conflict.
        key: The duplicated prefix or page name.
        message: Optional explicit message; derived from *target* and *key*
            when omitted.
    """

    exit_code = EXIT_COMPOSITION_ERROR
    kind: str = "declaration"

    def __init__(self, target: str, key: str, message: str | None = None):
        self.target = target
        self.key = key
        super().__init__(
            message or f"Duplicate {self.kind} '{key}' in target '{target}'"
        )


class AliasConflictError(CompositionError):
    """Raised when two alias entries of one target share a prefix."""

    kind = "alias prefix"


class EntryConflictError(CompositionError):
    """Raised when two UI entries share a page name."""

    kind = "entry page"


class MetadataError(BuildPlanError):
    """Raised when package metadata is absent or malformed."""

    exit_code = EXIT_METADATA_ERROR
