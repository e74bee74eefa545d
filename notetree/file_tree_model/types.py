"""Domain datatypes for directory entries and list filter/sort state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

NOTE_EXTENSION = ".md"


@dataclass(frozen=True)
class Entry:
    """One filesystem node observed during a scan.

    ``error`` is only set on the synthetic entry returned for unreadable
    directories.
    """

    name: str
    path: Path
    is_dir: bool
    size: int = 0
    mtime: float = 0.0
    error: str | None = None

    @property
    def is_hidden(self) -> bool:
        return self.name.startswith(".")

    @property
    def is_note(self) -> bool:
        return not self.is_dir and Path(self.name).suffix == NOTE_EXTENSION


Snapshot = tuple[Entry, ...]


class ExtensionFilter(Enum):
    NONE = "none"
    MD = "md"


class SortMode(Enum):
    NAME = 0
    MODIFIED_DESC = 1
    SIZE_DESC = 2

    def next(self) -> SortMode:
        """Cycle name -> modified -> size -> name."""
        members = list(SortMode)
        return members[(members.index(self) + 1) % len(members)]

    @classmethod
    def from_value(cls, value: object) -> SortMode:
        if isinstance(value, bool) or not isinstance(value, int):
            return cls.NAME
        try:
            return cls(value)
        except ValueError:
            return cls.NAME


@dataclass(frozen=True)
class FilterState:
    show_hidden: bool = False
    extension_only: ExtensionFilter = ExtensionFilter.NONE

    def toggled_hidden(self) -> FilterState:
        return FilterState(show_hidden=not self.show_hidden, extension_only=self.extension_only)

    def toggled_md_only(self) -> FilterState:
        extension_only = ExtensionFilter.NONE if self.extension_only is ExtensionFilter.MD else ExtensionFilter.MD
        return FilterState(show_hidden=self.show_hidden, extension_only=extension_only)


__all__ = [
    "NOTE_EXTENSION",
    "Entry",
    "Snapshot",
    "ExtensionFilter",
    "SortMode",
    "FilterState",
]
