"""Session state: the single mutable aggregate owned by the event loop.

The active modal is one optional tagged value rather than a set of flags, so
at most one modal can be open at a time by construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import ClassVar, Union

from ..config import SavedSession, Settings
from ..file_tree_model import Entry, FilterState, Snapshot, SortMode, displayed_entries
from ..fileops import FileClipboard
from ..list_items import FileItem, LinkItem, ListItem, SearchMatchItem
from ..navigation import NavigationHistory
from ..notes.wikilinks import WikiLink
from ..search.content import SearchMatch
from ..search.fuzzy import TreeIndex
from ..ui_theme import normalize_theme_index

DEFAULT_MAX_RECENT_FILES = 10
DEFAULT_PAGE_SIZE = 20


class ViewMode(Enum):
    HOME = "home"
    BROWSER = "browser"


class ModalKind(Enum):
    CREATE_NOTE = "create-note"
    CONFIRM_DELETE = "confirm-delete"
    RENAME = "rename"
    CREATE_DIR = "create-dir"
    RECENT_FILES = "recent-files"
    BOOKMARKS = "bookmarks"
    HELP = "help"
    LINKS = "links"
    LIST_SEARCH = "in-list-search"
    NOTE_SEARCH = "in-note-search"
    CONTENT_SEARCH = "content-search"


@dataclass
class CreateNoteModal:
    kind: ClassVar[ModalKind] = ModalKind.CREATE_NOTE
    name: str = ""
    body: str = ""
    editing_body: bool = False


@dataclass
class ConfirmDeleteModal:
    kind: ClassVar[ModalKind] = ModalKind.CONFIRM_DELETE
    path: Path
    name: str


@dataclass
class RenameModal:
    kind: ClassVar[ModalKind] = ModalKind.RENAME
    path: Path
    original_name: str
    value: str


@dataclass
class CreateDirModal:
    kind: ClassVar[ModalKind] = ModalKind.CREATE_DIR
    value: str = ""


@dataclass
class RecentFilesModal:
    kind: ClassVar[ModalKind] = ModalKind.RECENT_FILES
    paths: list[Path] = field(default_factory=list)
    selected: int = 0


@dataclass
class BookmarksModal:
    kind: ClassVar[ModalKind] = ModalKind.BOOKMARKS
    paths: list[Path] = field(default_factory=list)
    selected: int = 0


@dataclass
class HelpModal:
    kind: ClassVar[ModalKind] = ModalKind.HELP


@dataclass
class LinksModal:
    kind: ClassVar[ModalKind] = ModalKind.LINKS
    links: list[WikiLink] = field(default_factory=list)
    selected: int = 0


@dataclass
class ListSearchModal:
    kind: ClassVar[ModalKind] = ModalKind.LIST_SEARCH
    query: str = ""
    results: list[Entry] = field(default_factory=list)
    selected: int = 0
    indexing: bool = True


@dataclass
class NoteSearchModal:
    kind: ClassVar[ModalKind] = ModalKind.NOTE_SEARCH
    query: str = ""


@dataclass
class ContentSearchModal:
    kind: ClassVar[ModalKind] = ModalKind.CONTENT_SEARCH
    query: str = ""
    submitted_query: str = ""
    results: list[SearchMatch] = field(default_factory=list)
    selected: int = 0
    running: bool = False


Modal = Union[
    CreateNoteModal,
    ConfirmDeleteModal,
    RenameModal,
    CreateDirModal,
    RecentFilesModal,
    BookmarksModal,
    HelpModal,
    LinksModal,
    ListSearchModal,
    NoteSearchModal,
    ContentSearchModal,
]


@dataclass
class Session:
    """Everything the render layer reads and the dispatcher mutates."""

    root: Path
    current_dir: Path
    mode: ViewMode = ViewMode.HOME
    filters: FilterState = FilterState()
    sort_mode: SortMode = SortMode.NAME
    history: NavigationHistory = field(default_factory=NavigationHistory)
    snapshot: Snapshot = ()
    entries: list[Entry] = field(default_factory=list)
    selected: int = 0
    tree_index: TreeIndex | None = None
    modal: Modal | None = None
    note_path: Path | None = None
    note_raw: str = ""
    preview: str = ""
    preview_offset: int = 0
    bookmarks: list[Path] = field(default_factory=list)
    recent_files: list[Path] = field(default_factory=list)
    max_recent_files: int = DEFAULT_MAX_RECENT_FILES
    clipboard: FileClipboard | None = None
    status: str = ""
    theme_index: int = 0
    pending_key: str = ""
    content_search_generation: int = 0
    page_size: int = DEFAULT_PAGE_SIZE
    quit_requested: bool = False

    # list helpers
    def apply_filters(self) -> None:
        """Recompute the displayed list and keep the selection in range."""
        self.entries = displayed_entries(self.snapshot, self.filters, self.sort_mode)
        self.clamp_selection()

    def clamp_selection(self) -> None:
        self.selected = max(0, min(self.selected, len(self.entries) - 1))

    def select_path(self, path: Path) -> bool:
        for idx, entry in enumerate(self.entries):
            if entry.path == path:
                self.selected = idx
                return True
        return False

    def selected_entry(self) -> Entry | None:
        """Currently highlighted entry, ignoring synthetic error rows."""
        if not 0 <= self.selected < len(self.entries):
            return None
        entry = self.entries[self.selected]
        if entry.error is not None:
            return None
        return entry

    def displayed_items(self) -> list[ListItem]:
        """Rows of the main list, replaced by search results while searching."""
        modal = self.modal
        if isinstance(modal, ListSearchModal):
            return [FileItem(entry) for entry in modal.results]
        if isinstance(modal, ContentSearchModal):
            return [SearchMatchItem(match) for match in modal.results]
        return [FileItem(entry) for entry in self.entries]

    def modal_items(self) -> list[ListItem]:
        modal = self.modal
        if isinstance(modal, LinksModal):
            return [LinkItem(link) for link in modal.links]
        return []

    # preview helpers
    def clear_preview(self) -> None:
        self.note_path = None
        self.note_raw = ""
        self.preview = ""
        self.preview_offset = 0

    # personal lists
    def track_recent(self, path: Path) -> None:
        """Move ``path`` to the front of the bounded recent-files list."""
        self.recent_files = [path] + [recent for recent in self.recent_files if recent != path]
        del self.recent_files[max(1, self.max_recent_files) :]

    def toggle_bookmark(self, path: Path) -> bool:
        """Add or remove ``path``; returns whether it is now bookmarked."""
        if path in self.bookmarks:
            self.bookmarks.remove(path)
            return False
        self.bookmarks.append(path)
        return True

    def is_bookmarked(self, path: Path) -> bool:
        return path in self.bookmarks

    # status-bar data
    def set_status(self, message: str) -> None:
        self.status = message

    def filter_tags(self) -> list[str]:
        tags: list[str] = []
        if self.filters.extension_only.value == "md":
            tags.append("[.md only]")
        if self.filters.show_hidden:
            tags.append("[hidden]")
        if self.sort_mode is SortMode.MODIFIED_DESC:
            tags.append("[↓ date]")
        elif self.sort_mode is SortMode.SIZE_DESC:
            tags.append("[↓ size]")
        return tags

    def mode_label(self) -> str:
        if self.mode is ViewMode.HOME:
            return "Home"
        if isinstance(self.modal, ListSearchModal):
            return "Search"
        if isinstance(self.modal, NoteSearchModal):
            return "Search in Note"
        if isinstance(self.modal, ContentSearchModal):
            return "Content Search"
        return "Browser"


def new_session(start_dir: Path, settings: Settings, saved: SavedSession) -> Session:
    """Build the startup session on the home screen for ``start_dir``."""
    theme = saved.last_theme if saved.last_theme is not None else settings.theme
    session = Session(
        root=start_dir,
        current_dir=start_dir,
        filters=settings.filters,
        sort_mode=settings.sort_mode,
        bookmarks=list(saved.bookmarks),
        recent_files=list(saved.recent_files)[: settings.max_recent_files],
        max_recent_files=settings.max_recent_files,
        theme_index=normalize_theme_index(theme),
    )
    session.history.visit(start_dir)
    return session


def saved_session_from(session: Session) -> SavedSession:
    """Snapshot what the next launch should restore."""
    return SavedSession(
        last_directory=session.current_dir,
        last_theme=session.theme_index,
        recent_files=tuple(session.recent_files),
        bookmarks=tuple(session.bookmarks),
    )


__all__ = [
    "BookmarksModal",
    "ConfirmDeleteModal",
    "ContentSearchModal",
    "CreateDirModal",
    "CreateNoteModal",
    "HelpModal",
    "LinksModal",
    "ListSearchModal",
    "Modal",
    "ModalKind",
    "NoteSearchModal",
    "RecentFilesModal",
    "RenameModal",
    "Session",
    "ViewMode",
    "new_session",
    "saved_session_from",
]
