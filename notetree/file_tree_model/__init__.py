"""Domain model for directory snapshots and the displayed entry list.

This package contains non-UI primitives:
- immutable entry datatypes plus filter/sort state
- filesystem snapshot reads and recursive walks
- the filter/sort pipeline producing the displayed list
"""

from __future__ import annotations

from .types import NOTE_EXTENSION, Entry, ExtensionFilter, FilterState, Snapshot, SortMode
from .fs import count_entries, error_entry, read_snapshot, walk_entries
from .filtering import displayed_entries, filter_entries, is_excluded, sort_entries

__all__ = [
    "NOTE_EXTENSION",
    "Entry",
    "ExtensionFilter",
    "FilterState",
    "Snapshot",
    "SortMode",
    "count_entries",
    "error_entry",
    "read_snapshot",
    "walk_entries",
    "displayed_entries",
    "filter_entries",
    "is_excluded",
    "sort_entries",
]
