"""Derive the displayed entry list from a snapshot plus filter/sort state."""

from __future__ import annotations

from collections.abc import Iterable

from .types import NOTE_EXTENSION, Entry, ExtensionFilter, FilterState, SortMode


def is_excluded(entry: Entry, filters: FilterState) -> str | None:
    """Return the name of the filter that rejects ``entry``, or ``None``.

    ``"hidden"`` wins over ``"extension"`` when both would apply.
    """
    if not filters.show_hidden and entry.is_hidden:
        return "hidden"
    if (
        filters.extension_only is ExtensionFilter.MD
        and not entry.is_dir
        and entry.error is None
        and not entry.name.endswith(NOTE_EXTENSION)
    ):
        return "extension"
    return None


def filter_entries(entries: Iterable[Entry], filters: FilterState) -> list[Entry]:
    return [entry for entry in entries if is_excluded(entry, filters) is None]


def sort_entries(entries: Iterable[Entry], sort_mode: SortMode) -> list[Entry]:
    """Stable ordering; ``NAME`` keeps incoming (already name-sorted) order."""
    items = list(entries)
    if sort_mode is SortMode.MODIFIED_DESC:
        return sorted(items, key=lambda entry: -entry.mtime)
    if sort_mode is SortMode.SIZE_DESC:
        return sorted(items, key=lambda entry: -entry.size)
    return items


def displayed_entries(
    snapshot: Iterable[Entry],
    filters: FilterState,
    sort_mode: SortMode,
) -> list[Entry]:
    return sort_entries(filter_entries(snapshot, filters), sort_mode)


__all__ = [
    "is_excluded",
    "filter_entries",
    "sort_entries",
    "displayed_entries",
]
