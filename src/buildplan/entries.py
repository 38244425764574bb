"""UI entry set -- one HTML page per independent application window."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

from buildplan.exceptions import EntryConflictError
from buildplan.models import Entry, Target

WINDOW_PAGES: tuple[str, ...] = (
    "index",  # primary window
    "miniWindow",
    "selectionToolbar",
    "selectionAction",
    "traceWindow",
)


def build_entry_set(
    ui_root: Union[str, Path],
    pages: Optional[Iterable[str]] = None,
) -> tuple[Entry, ...]:
    """Map every window page to ``<ui_root>/<page>.html``.

    The set is static and does not depend on any flag. Whether the files
    exist is checked by the bundler, not here.

    Args:
        ui_root: Directory holding the window HTML files.
        pages: Explicit page names to use instead of :data:`WINDOW_PAGES`.

    Raises:
        EntryConflictError: If a page name appears twice, or no page is
            given at all.
    """
    if pages is None:
        pages = WINDOW_PAGES
    base = Path(ui_root).absolute()

    entries: list[Entry] = []
    seen: set[str] = set()
    for page in pages:
        if page in seen:
            raise EntryConflictError(Target.UI.value, page)
        seen.add(page)
        entries.append(Entry(page=page, path=str(base / f"{page}.html")))

    if not entries:
        raise EntryConflictError(
            Target.UI.value, "", message="UI entry set must contain at least one page"
        )
    return tuple(entries)
