"""Filesystem scanning helpers: one-directory snapshots and recursive walks."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

from .types import Entry, Snapshot


def _name_key(name: str) -> tuple[str, str]:
    return (name.casefold(), name)


def _entry_from_dir_entry(child: os.DirEntry[str]) -> Entry | None:
    """Build an ``Entry`` from a scandir record, or ``None`` when stat fails."""
    try:
        is_dir = child.is_dir(follow_symlinks=True)
        stat = child.stat(follow_symlinks=True)
    except OSError:
        return None
    return Entry(
        name=child.name,
        path=Path(child.path),
        is_dir=is_dir,
        size=0 if is_dir else int(stat.st_size),
        mtime=float(stat.st_mtime),
    )


def error_entry(directory: Path, exc: OSError) -> Entry:
    """Synthetic row shown in place of an unreadable directory listing."""
    reason = exc.strerror or exc.__class__.__name__
    return Entry(
        name=f"[Error: {reason}]",
        path=directory,
        is_dir=False,
        error=reason,
    )


def read_snapshot(directory: Path) -> Snapshot:
    """List immediate children of ``directory`` sorted by name.

    Never raises for filesystem problems: an unreadable directory produces a
    one-element snapshot holding an error entry so callers always have a row
    to render. Children whose metadata cannot be read are skipped.
    """
    entries: list[Entry] = []
    try:
        with os.scandir(directory) as children:
            for child in children:
                entry = _entry_from_dir_entry(child)
                if entry is not None:
                    entries.append(entry)
    except OSError as exc:
        return (error_entry(directory, exc),)

    entries.sort(key=lambda item: _name_key(item.name))
    return tuple(entries)


def walk_entries(root: Path, *, files_only: bool = False) -> Iterator[Entry]:
    """Yield every entry below ``root`` in depth-first pre-order.

    Siblings are visited in name order; ``root`` itself is not yielded.
    Symlinked directories are listed but not descended into. Unreadable
    directories are skipped silently. The walk is lazy, so callers can stop
    early.
    """
    try:
        with os.scandir(root) as children:
            records = sorted(children, key=lambda item: _name_key(item.name))
    except OSError:
        return

    for child in records:
        entry = _entry_from_dir_entry(child)
        if entry is None:
            continue
        if not (files_only and entry.is_dir):
            yield entry
        if entry.is_dir:
            try:
                is_link = child.is_symlink()
            except OSError:
                is_link = True
            if not is_link:
                yield from walk_entries(entry.path, files_only=files_only)


def count_entries(snapshot: Snapshot) -> tuple[int, int]:
    """Return ``(file_count, dir_count)`` ignoring synthetic error rows."""
    files = 0
    dirs = 0
    for entry in snapshot:
        if entry.error is not None:
            continue
        if entry.is_dir:
            dirs += 1
        else:
            files += 1
    return files, dirs


__all__ = [
    "error_entry",
    "read_snapshot",
    "walk_entries",
    "count_entries",
]
