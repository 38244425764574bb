"""Tests for buildplan.entries -- the UI window entry set."""

from __future__ import annotations

from pathlib import Path

import pytest

from buildplan.entries import WINDOW_PAGES, build_entry_set
from buildplan.exceptions import EntryConflictError


def test_five_fixed_pages(tmp_path: Path) -> None:
    entries = build_entry_set(tmp_path)
    assert [e.page for e in entries] == [
        "index",
        "miniWindow",
        "selectionToolbar",
        "selectionAction",
        "traceWindow",
    ]


def test_primary_window_comes_first() -> None:
    assert WINDOW_PAGES[0] == "index"


def test_paths_point_at_html_pages(tmp_path: Path) -> None:
    entries = {e.page: e.path for e in build_entry_set(tmp_path / "src" / "renderer")}
    assert entries["miniWindow"] == str(tmp_path / "src" / "renderer" / "miniWindow.html")


def test_files_need_not_exist(tmp_path: Path) -> None:
    entries = build_entry_set(tmp_path / "missing")
    assert len(entries) == 5


def test_duplicate_page_raises(tmp_path: Path) -> None:
    with pytest.raises(EntryConflictError) as exc_info:
        build_entry_set(tmp_path, ["index", "traceWindow", "index"])
    assert exc_info.value.key == "index"
    assert exc_info.value.target == "renderer"


def test_empty_page_list_raises(tmp_path: Path) -> None:
    with pytest.raises(EntryConflictError, match="at least one page"):
        build_entry_set(tmp_path, [])
