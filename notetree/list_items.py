"""Rows shown in list panes: files, wiki links, and content-search hits.

All three variants expose ``title``, ``description`` and ``filter_key`` so
the render layer can draw any list without knowing what it holds.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path

from .file_tree_model import Entry
from .notes.wikilinks import WikiLink
from .search.content import SearchMatch

DESCRIPTION_MAX_CHARS = 80


def format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def format_age(mtime: float, now: float | None = None) -> str:
    """Human relative age; falls back to a date after one year."""
    now = time.time() if now is None else now
    diff = max(0.0, now - mtime)
    day = 24 * 60 * 60
    if diff < day:
        return "today"
    if diff < 7 * day:
        return f"{int(diff // day)} day(s) ago"
    if diff < 30 * day:
        return f"{int(diff // (7 * day))} week(s) ago"
    if diff < 365 * day:
        return f"{int(diff // (30 * day))} month(s) ago"
    return time.strftime("%d/%m/%Y", time.localtime(mtime))


@dataclass(frozen=True)
class FileItem:
    entry: Entry

    @property
    def path(self) -> Path:
        return self.entry.path

    @property
    def title(self) -> str:
        entry = self.entry
        if entry.error is not None:
            return entry.name
        if entry.is_dir:
            return f"📁 {entry.name}/"
        if entry.is_note:
            return f"📝 {entry.name}"
        return f"📄 {entry.name}"

    @property
    def description(self) -> str:
        entry = self.entry
        if entry.error is not None:
            return str(entry.path)
        if entry.is_dir:
            return "Directory"
        return f"{format_size(entry.size)} • {format_age(entry.mtime)}"

    @property
    def filter_key(self) -> str:
        return self.entry.name


@dataclass(frozen=True)
class LinkItem:
    link: WikiLink

    @property
    def path(self) -> Path | None:
        return self.link.path

    @property
    def title(self) -> str:
        if self.link.resolved:
            return f"🔗 {self.link.token}"
        return f"❓ {self.link.token} (missing)"

    @property
    def description(self) -> str:
        if self.link.path is not None:
            return str(self.link.path)
        return "Press Enter to create this note"

    @property
    def filter_key(self) -> str:
        return self.link.token


@dataclass(frozen=True)
class SearchMatchItem:
    match: SearchMatch

    @property
    def path(self) -> Path:
        return self.match.path

    @property
    def title(self) -> str:
        return f"📝 {self.match.path.name}:{self.match.line}"

    @property
    def description(self) -> str:
        text = self.match.text
        if len(text) > DESCRIPTION_MAX_CHARS:
            return text[:DESCRIPTION_MAX_CHARS] + "..."
        return text

    @property
    def filter_key(self) -> str:
        return self.match.text


ListItem = FileItem | LinkItem | SearchMatchItem


__all__ = [
    "FileItem",
    "LinkItem",
    "ListItem",
    "SearchMatchItem",
    "format_age",
    "format_size",
]
