"""buildplan -- Compose per-process build profiles for multi-process desktop apps.

A desktop application built from one repository ships three separately
bundled processes: the *host* (main) process, the privileged *bridge*
(preload) script, and the *UI* (renderer) windows. This package derives the
bundler configuration for each of them from a snapshot of the environment
and a fixed workspace topology, so that the same inputs always produce the
same plan.

Typical workflow::

    buildplan compose                   # print the full workspace plan
    buildplan compose --bundler --json  # bundler-shaped sections as JSON
    buildplan inspect plugins -t renderer

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    environment: Environment snapshot and feature flags.
    composer: Profile composition across the three targets.
    config: Project-local configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
