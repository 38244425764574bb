"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~buildplan.exceptions.BuildPlanError` subclass.
Build drivers (CI scripts, npm hooks) can inspect the exit code to tell a
static configuration bug apart from missing package metadata without
parsing stderr.

Example::

    $ buildplan compose
    $ echo $?
    3   # EXIT_COMPOSITION_ERROR -- duplicate alias prefix in a target
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (including invalid project config)."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_COMPOSITION_ERROR = 3
"""The static declarations conflict (duplicate alias prefix or page name)."""

EXIT_METADATA_ERROR = 4
"""Package metadata is missing or malformed."""
