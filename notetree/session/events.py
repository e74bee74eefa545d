"""Events fed into ``dispatch`` and effects requested by it.

Events describe something that happened (a key press, a finished read).
Effects describe work the dispatcher wants done outside the pure state
transition; ``EffectRunner`` turns each one into follow-up events.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

from ..file_tree_model import Snapshot
from ..fileops import FileClipboard, FileOpResult
from ..notes.wikilinks import WikiLink
from ..search.content import SearchMatch
from ..search.fuzzy import TreeIndex


class FileAction(Enum):
    CREATE_NOTE = "create-note"
    CREATE_LINKED_NOTE = "create-linked-note"
    CREATE_DIR = "create-dir"
    RENAME = "rename"
    DELETE = "delete"
    PASTE = "paste"


# events


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class DirectoryLoaded:
    path: Path
    snapshot: Snapshot
    select_path: Path | None = None


@dataclass(frozen=True)
class TreeIndexBuilt:
    root: Path
    index: TreeIndex


@dataclass(frozen=True)
class NoteLoaded:
    path: Path
    raw: str
    preview: str
    error: str | None = None


@dataclass(frozen=True)
class LinksResolved:
    note_path: Path
    links: tuple[WikiLink, ...]


@dataclass(frozen=True)
class FileOpCompleted:
    action: FileAction
    result: FileOpResult
    source: Path | None = None


@dataclass(frozen=True)
class StatusReported:
    message: str


@dataclass(frozen=True)
class StatusExpired:
    message: str


@dataclass(frozen=True)
class EditorFinished:
    path: Path
    error: str | None = None


@dataclass(frozen=True)
class ContentSearchCompleted:
    generation: int
    matches: tuple[SearchMatch, ...]


Event = Union[
    KeyPressed,
    DirectoryLoaded,
    TreeIndexBuilt,
    NoteLoaded,
    LinksResolved,
    FileOpCompleted,
    StatusReported,
    StatusExpired,
    EditorFinished,
    ContentSearchCompleted,
]


# effects


@dataclass(frozen=True)
class LoadDirectory:
    path: Path
    select_path: Path | None = None


@dataclass(frozen=True)
class BuildTreeIndex:
    """Index ``root``, reusing ``current`` when it already covers it."""

    root: Path
    current: TreeIndex | None = None


@dataclass(frozen=True)
class LoadNote:
    path: Path
    root: Path
    query: str = ""


@dataclass(frozen=True)
class RenderNote:
    """Re-render an already loaded note, e.g. with a new highlight query."""

    path: Path
    raw: str
    root: Path
    query: str = ""


@dataclass(frozen=True)
class ResolveLinks:
    note_path: Path
    raw: str
    root: Path


@dataclass(frozen=True)
class CreateNote:
    directory: Path
    name: str
    body: str = ""


@dataclass(frozen=True)
class CreateLinkedNote:
    directory: Path
    token: str


@dataclass(frozen=True)
class CreateDirectory:
    directory: Path
    name: str


@dataclass(frozen=True)
class RenameEntry:
    path: Path
    new_name: str


@dataclass(frozen=True)
class DeleteEntry:
    path: Path


@dataclass(frozen=True)
class PasteEntry:
    clipboard: FileClipboard
    destination: Path


@dataclass(frozen=True)
class CopyPath:
    path: Path


@dataclass(frozen=True)
class CopyContent:
    path: Path


@dataclass(frozen=True)
class OpenEditor:
    path: Path


@dataclass(frozen=True)
class StartContentSearch:
    root: Path
    query: str
    generation: int


@dataclass(frozen=True)
class CancelContentSearch:
    pass


Effect = Union[
    LoadDirectory,
    BuildTreeIndex,
    LoadNote,
    RenderNote,
    ResolveLinks,
    CreateNote,
    CreateLinkedNote,
    CreateDirectory,
    RenameEntry,
    DeleteEntry,
    PasteEntry,
    CopyPath,
    CopyContent,
    OpenEditor,
    StartContentSearch,
    CancelContentSearch,
]


__all__ = [
    "BuildTreeIndex",
    "CancelContentSearch",
    "ContentSearchCompleted",
    "CopyContent",
    "CopyPath",
    "CreateDirectory",
    "CreateLinkedNote",
    "CreateNote",
    "DeleteEntry",
    "DirectoryLoaded",
    "EditorFinished",
    "Effect",
    "Event",
    "FileAction",
    "FileOpCompleted",
    "KeyPressed",
    "LinksResolved",
    "LoadDirectory",
    "LoadNote",
    "NoteLoaded",
    "OpenEditor",
    "PasteEntry",
    "RenameEntry",
    "RenderNote",
    "ResolveLinks",
    "StartContentSearch",
    "StatusExpired",
    "StatusReported",
    "TreeIndexBuilt",
]
