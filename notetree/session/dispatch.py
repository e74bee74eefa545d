"""Pure session transitions.

``dispatch(session, event)`` mutates only the in-memory ``Session`` and
returns the effects the caller must run. Nothing here touches the disk, so
every transition can be exercised in tests by feeding events directly.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from ..fileops import ClipboardMode, FileClipboard, validate_name
from ..notes.preview import count_matches
from ..search.fuzzy import search_index
from ..ui_theme import next_theme_index
from . import events as ev
from .keys import KeyRegistry, is_text_key
from .state import (
    BookmarksModal,
    ConfirmDeleteModal,
    ContentSearchModal,
    CreateDirModal,
    CreateNoteModal,
    HelpModal,
    LinksModal,
    ListSearchModal,
    NoteSearchModal,
    RecentFilesModal,
    RenameModal,
    Session,
    ViewMode,
)

logger = logging.getLogger(__name__)

PREVIEW_SCROLL_STEP = 3


def _is_within(path: Path, ancestor: Path) -> bool:
    return path == ancestor or ancestor in path.parents


def _rebase(path: Path, source: Path, target: Path) -> Path:
    """Map ``path`` under ``source`` onto ``target``; other paths pass through."""
    if not _is_within(path, source):
        return path
    return target / path.relative_to(source)


def _move_index(selected: int, delta: int, count: int) -> int:
    if count <= 0:
        return 0
    return max(0, min(count - 1, selected + delta))


class _Dispatcher:
    """Handles one event against ``session``, collecting requested effects."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.effects: list[ev.Effect] = []

    # shared transitions
    def visit(self, path: Path, select_path: Path | None = None) -> None:
        """Push ``path`` on the history and load it."""
        self.session.history.visit(path)
        self.enter_directory(path, select_path)

    def enter_directory(self, path: Path, select_path: Path | None = None) -> None:
        session = self.session
        session.mode = ViewMode.BROWSER
        session.current_dir = path
        session.selected = 0
        session.pending_key = ""
        session.clear_preview()
        self.effects.append(ev.LoadDirectory(path, select_path))

    def reveal(self, path: Path) -> None:
        """Visit the directory holding ``path`` and select it there."""
        self.visit(path.parent, select_path=path)

    def preview_selected(self) -> None:
        session = self.session
        entry = session.selected_entry()
        if entry is None or entry.is_dir:
            session.clear_preview()
            return
        if entry.path == session.note_path:
            return
        self.open_note(entry.path)

    def open_note(self, path: Path) -> None:
        session = self.session
        session.note_path = path
        session.note_raw = ""
        session.preview = ""
        session.preview_offset = 0
        self.effects.append(ev.LoadNote(path, session.root))

    def move_selection(self, delta: int) -> None:
        session = self.session
        moved = _move_index(session.selected, delta, len(session.entries))
        if moved == session.selected:
            return
        session.selected = moved
        self.preview_selected()

    def select_index(self, index: int) -> None:
        self.move_selection(index - self.session.selected)

    def refilter(self) -> None:
        """Re-run filter/sort keeping the selected path when still shown."""
        session = self.session
        entry = session.selected_entry()
        session.apply_filters()
        if entry is not None and not session.select_path(entry.path):
            session.selected = 0
        self.preview_selected()

    def reload_current(self, select_path: Path | None = None) -> None:
        self.effects.append(ev.LoadDirectory(self.session.current_dir, select_path))

    def close_modal(self) -> None:
        self.session.modal = None

    # browser actions
    def quit(self) -> None:
        self.session.quit_requested = True

    def open_selected(self) -> None:
        session = self.session
        entry = session.selected_entry()
        if entry is None:
            return
        if entry.is_dir:
            self.visit(entry.path)
            return
        session.track_recent(entry.path)
        if entry.path != session.note_path:
            self.open_note(entry.path)

    def visit_parent(self) -> None:
        current = self.session.current_dir
        parent = current.parent
        if parent == current:
            return
        self.visit(parent, select_path=current)

    def visit_home(self) -> None:
        session = self.session
        home = Path.home()
        session.root = home
        session.tree_index = None
        self.visit(home)

    def go_first(self) -> None:
        session = self.session
        if session.pending_key == "g":
            session.pending_key = ""
            self.select_index(0)
            return
        session.pending_key = "g"

    def go_last(self) -> None:
        self.select_index(len(self.session.entries) - 1)

    def half_page_down(self) -> None:
        self.move_selection(max(1, self.session.page_size // 2))

    def half_page_up(self) -> None:
        self.move_selection(-max(1, self.session.page_size // 2))

    def history_back(self) -> None:
        history = self.session.history
        if history.back() and history.current is not None:
            self.enter_directory(history.current)

    def history_forward(self) -> None:
        history = self.session.history
        if history.forward() and history.current is not None:
            self.enter_directory(history.current)

    def scroll_preview(self, delta: int) -> None:
        session = self.session
        if session.note_path is None:
            return
        session.preview_offset = max(0, session.preview_offset + delta)

    def confirm_delete(self) -> None:
        entry = self.session.selected_entry()
        if entry is not None:
            self.session.modal = ConfirmDeleteModal(path=entry.path, name=entry.name)

    def start_rename(self) -> None:
        entry = self.session.selected_entry()
        if entry is not None:
            self.session.modal = RenameModal(path=entry.path, original_name=entry.name, value=entry.name)

    def edit_selected(self) -> None:
        entry = self.session.selected_entry()
        if entry is None:
            return
        if entry.is_dir:
            self.session.set_status("Cannot edit a directory")
            return
        self.effects.append(ev.OpenEditor(entry.path))

    def cycle_theme(self) -> None:
        self.session.theme_index = next_theme_index(self.session.theme_index)

    def show_help(self) -> None:
        self.session.modal = HelpModal()

    def new_note(self) -> None:
        self.session.modal = CreateNoteModal()

    def new_directory(self) -> None:
        self.session.modal = CreateDirModal()

    def toggle_md_only(self) -> None:
        session = self.session
        session.filters = session.filters.toggled_md_only()
        self.refilter()

    def toggle_hidden(self) -> None:
        session = self.session
        session.filters = session.filters.toggled_hidden()
        self.refilter()

    def cycle_sort(self) -> None:
        session = self.session
        session.sort_mode = session.sort_mode.next()
        self.refilter()

    def copy_path(self) -> None:
        entry = self.session.selected_entry()
        if entry is not None:
            self.effects.append(ev.CopyPath(entry.path))

    def copy_content(self) -> None:
        entry = self.session.selected_entry()
        if entry is None or entry.is_dir:
            return
        self.effects.append(ev.CopyContent(entry.path))

    def clip(self, mode: ClipboardMode) -> None:
        session = self.session
        entry = session.selected_entry()
        if entry is None:
            return
        session.clipboard = FileClipboard(path=entry.path, mode=mode)
        verb = "Copied" if mode is ClipboardMode.COPY else "Cut"
        session.set_status(f"{verb}: {entry.name} (p to paste)")

    def paste(self) -> None:
        session = self.session
        if session.clipboard is None:
            session.set_status("Clipboard is empty")
            return
        self.effects.append(ev.PasteEntry(session.clipboard, session.current_dir))

    def toggle_bookmark(self) -> None:
        session = self.session
        entry = session.selected_entry()
        if entry is None or entry.is_dir:
            return
        if session.toggle_bookmark(entry.path):
            session.set_status(f"Bookmarked: {entry.name}")
        else:
            session.set_status(f"Bookmark removed: {entry.name}")

    def show_bookmarks(self) -> None:
        self.session.modal = BookmarksModal(paths=list(self.session.bookmarks))

    def show_recent(self) -> None:
        self.session.modal = RecentFilesModal(paths=list(self.session.recent_files))

    def show_links(self) -> None:
        session = self.session
        if session.note_path is None:
            session.set_status("No note open")
            return
        self.effects.append(ev.ResolveLinks(session.note_path, session.note_raw, session.root))

    def search_in_note(self) -> None:
        session = self.session
        if session.note_path is None:
            session.set_status("Open a note first")
            return
        session.modal = NoteSearchModal()

    def search_list(self) -> None:
        session = self.session
        session.modal = ListSearchModal()
        self.effects.append(ev.BuildTreeIndex(session.root, session.tree_index))

    def search_content(self) -> None:
        self.session.modal = ContentSearchModal()

    def refresh(self) -> None:
        session = self.session
        session.tree_index = None
        entry = session.selected_entry()
        session.clear_preview()
        self.effects.append(ev.BuildTreeIndex(session.root))
        self.reload_current(entry.path if entry is not None else None)
        session.set_status("Refreshed")

    def browser_registry(self) -> KeyRegistry:
        registry = KeyRegistry()
        for keys, handler in (
            (("q", "CTRL_C"), self.quit),
            (("ENTER", "RIGHT", "l"), self.open_selected),
            (("LEFT", "h", "-"), self.visit_parent),
            (("~",), self.visit_home),
            (("UP", "k"), lambda: self.move_selection(-1)),
            (("DOWN", "j"), lambda: self.move_selection(1)),
            (("g",), self.go_first),
            (("G", "END"), self.go_last),
            (("HOME",), lambda: self.select_index(0)),
            (("CTRL_D", "PAGE_DOWN"), self.half_page_down),
            (("CTRL_U", "PAGE_UP"), self.half_page_up),
            (("CTRL_O",), self.history_back),
            (("TAB",), self.history_forward),
            (("u",), lambda: self.scroll_preview(-PREVIEW_SCROLL_STEP)),
            (("d",), lambda: self.scroll_preview(PREVIEW_SCROLL_STEP)),
            (("D",), self.confirm_delete),
            (("r",), self.start_rename),
            (("e",), self.edit_selected),
            (("t",), self.cycle_theme),
            (("?",), self.show_help),
            (("n",), self.new_note),
            (("N",), self.new_directory),
            (("m",), self.toggle_md_only),
            ((".",), self.toggle_hidden),
            (("s",), self.cycle_sort),
            (("y",), self.copy_path),
            (("Y",), self.copy_content),
            (("c",), lambda: self.clip(ClipboardMode.COPY)),
            (("x",), lambda: self.clip(ClipboardMode.CUT)),
            (("p",), self.paste),
            (("b",), self.toggle_bookmark),
            (("B",), self.show_bookmarks),
            (("L",), self.show_links),
            (("CTRL_R",), self.show_recent),
            (("F",), self.search_in_note),
            (("/",), self.search_list),
            (("S",), self.search_content),
            (("R",), self.refresh),
        ):
            registry.bind(*keys)(handler)
        return registry

    def home_registry(self) -> KeyRegistry:
        registry = KeyRegistry()
        registry.bind("q", "CTRL_C")(self.quit)
        registry.bind("ENTER", "RIGHT", "l")(lambda: self.visit(self.session.current_dir))
        registry.bind("t")(self.cycle_theme)
        registry.bind("?")(self.show_help)
        registry.bind("CTRL_R")(self.show_recent)
        registry.bind("B")(self.show_bookmarks)
        return registry

    # key routing
    def handle_key(self, key: str) -> None:
        session = self.session
        if session.modal is not None:
            self.handle_modal_key(key)
            return
        if session.mode is ViewMode.HOME:
            self.home_registry().dispatch(key)
            return
        if key != "g":
            session.pending_key = ""
        self.browser_registry().dispatch(key)

    def handle_modal_key(self, key: str) -> None:
        modal = self.session.modal
        handlers: dict[type, Callable[[str], None]] = {
            CreateNoteModal: self.create_note_key,
            ConfirmDeleteModal: self.confirm_delete_key,
            RenameModal: self.rename_key,
            CreateDirModal: self.create_dir_key,
            RecentFilesModal: self.path_list_key,
            BookmarksModal: self.path_list_key,
            HelpModal: self.help_key,
            LinksModal: self.links_key,
            ListSearchModal: self.list_search_key,
            NoteSearchModal: self.note_search_key,
            ContentSearchModal: self.content_search_key,
        }
        handlers[type(modal)](key)

    # modal keys
    def create_note_key(self, key: str) -> None:
        modal = self.session.modal
        assert isinstance(modal, CreateNoteModal)
        if key == "ESC":
            self.close_modal()
        elif key == "TAB":
            modal.editing_body = not modal.editing_body
        elif key == "CTRL_S":
            error = validate_name(modal.name)
            if error is not None:
                self.session.set_status(error)
                return
            self.close_modal()
            self.effects.append(ev.CreateNote(self.session.current_dir, modal.name.strip(), modal.body))
        elif key == "ENTER":
            if modal.editing_body:
                modal.body += "\n"
            else:
                modal.editing_body = True
        elif key == "BACKSPACE":
            if modal.editing_body:
                modal.body = modal.body[:-1]
            else:
                modal.name = modal.name[:-1]
        elif is_text_key(key):
            if modal.editing_body:
                modal.body += key
            else:
                modal.name += key

    def confirm_delete_key(self, key: str) -> None:
        modal = self.session.modal
        assert isinstance(modal, ConfirmDeleteModal)
        if key in {"y", "Y"}:
            self.close_modal()
            self.effects.append(ev.DeleteEntry(modal.path))
        elif key in {"n", "N", "ESC"}:
            self.close_modal()

    def rename_key(self, key: str) -> None:
        modal = self.session.modal
        assert isinstance(modal, RenameModal)
        if key == "ESC":
            self.close_modal()
        elif key == "ENTER":
            error = validate_name(modal.value)
            if error is not None:
                self.session.set_status(error)
                return
            self.close_modal()
            new_name = modal.value.strip()
            if new_name == modal.original_name:
                self.session.set_status("Name unchanged")
                return
            self.effects.append(ev.RenameEntry(modal.path, new_name))
        elif key == "BACKSPACE":
            modal.value = modal.value[:-1]
        elif is_text_key(key):
            modal.value += key

    def create_dir_key(self, key: str) -> None:
        modal = self.session.modal
        assert isinstance(modal, CreateDirModal)
        if key == "ESC":
            self.close_modal()
        elif key == "ENTER":
            error = validate_name(modal.value)
            if error is not None:
                self.session.set_status(error)
                return
            self.close_modal()
            self.effects.append(ev.CreateDirectory(self.session.current_dir, modal.value.strip()))
        elif key == "BACKSPACE":
            modal.value = modal.value[:-1]
        elif is_text_key(key):
            modal.value += key

    def path_list_key(self, key: str) -> None:
        session = self.session
        modal = session.modal
        assert isinstance(modal, (RecentFilesModal, BookmarksModal))
        if key == "ESC":
            self.close_modal()
        elif key in {"UP", "k"}:
            modal.selected = _move_index(modal.selected, -1, len(modal.paths))
        elif key in {"DOWN", "j"}:
            modal.selected = _move_index(modal.selected, 1, len(modal.paths))
        elif key == "ENTER" and modal.paths:
            path = modal.paths[modal.selected]
            self.close_modal()
            self.reveal(path)
        elif key == "D" and isinstance(modal, BookmarksModal) and modal.paths:
            removed = modal.paths[modal.selected]
            if session.is_bookmarked(removed):
                session.toggle_bookmark(removed)
            modal.paths = list(session.bookmarks)
            modal.selected = _move_index(modal.selected, 0, len(modal.paths))
            session.set_status(f"Bookmark removed: {removed.name}")

    def help_key(self, key: str) -> None:
        if key in {"ESC", "?", "q"}:
            self.close_modal()

    def links_key(self, key: str) -> None:
        session = self.session
        modal = session.modal
        assert isinstance(modal, LinksModal)
        if key == "ESC":
            self.close_modal()
        elif key in {"UP", "k"}:
            modal.selected = _move_index(modal.selected, -1, len(modal.links))
        elif key in {"DOWN", "j"}:
            modal.selected = _move_index(modal.selected, 1, len(modal.links))
        elif key == "ENTER" and modal.links:
            link = modal.links[modal.selected]
            self.close_modal()
            if link.path is not None:
                session.track_recent(link.path)
                self.reveal(link.path)
            else:
                self.effects.append(ev.CreateLinkedNote(session.current_dir, link.token))

    def refresh_list_search(self, modal: ListSearchModal) -> None:
        index = self.session.tree_index
        modal.selected = 0
        if index is None:
            modal.results = []
            return
        modal.results = search_index(index, modal.query)

    def list_search_key(self, key: str) -> None:
        modal = self.session.modal
        assert isinstance(modal, ListSearchModal)
        if key == "ESC":
            self.close_modal()
        elif key == "UP":
            modal.selected = _move_index(modal.selected, -1, len(modal.results))
        elif key == "DOWN":
            modal.selected = _move_index(modal.selected, 1, len(modal.results))
        elif key == "ENTER":
            if not modal.results:
                return
            entry = modal.results[modal.selected]
            self.close_modal()
            self.reveal(entry.path)
        elif key == "BACKSPACE":
            if modal.query:
                modal.query = modal.query[:-1]
                self.refresh_list_search(modal)
        elif is_text_key(key):
            modal.query += key
            self.refresh_list_search(modal)

    def rerender_note(self, query: str) -> None:
        session = self.session
        if session.note_path is None:
            return
        self.effects.append(ev.RenderNote(session.note_path, session.note_raw, session.root, query))

    def note_search_key(self, key: str) -> None:
        session = self.session
        modal = session.modal
        assert isinstance(modal, NoteSearchModal)
        if key == "ESC":
            self.close_modal()
            self.rerender_note("")
        elif key == "ENTER":
            self.close_modal()
            if modal.query:
                matches = count_matches(session.note_raw, modal.query)
                session.set_status(f"{matches} match(es) for '{modal.query}'")
        elif key == "UP":
            self.scroll_preview(-1)
        elif key == "DOWN":
            self.scroll_preview(1)
        elif key in {"CTRL_U", "PAGE_UP"}:
            self.scroll_preview(-max(1, session.page_size // 2))
        elif key in {"CTRL_D", "PAGE_DOWN"}:
            self.scroll_preview(max(1, session.page_size // 2))
        elif key == "BACKSPACE":
            if modal.query:
                modal.query = modal.query[:-1]
                self.rerender_note(modal.query)
        elif is_text_key(key):
            modal.query += key
            self.rerender_note(modal.query)

    def content_search_key(self, key: str) -> None:
        session = self.session
        modal = session.modal
        assert isinstance(modal, ContentSearchModal)
        if key == "ESC":
            self.close_modal()
            if modal.running:
                self.effects.append(ev.CancelContentSearch())
        elif key == "UP":
            modal.selected = _move_index(modal.selected, -1, len(modal.results))
        elif key == "DOWN":
            modal.selected = _move_index(modal.selected, 1, len(modal.results))
        elif key == "ENTER":
            query = modal.query.strip()
            if query and query != modal.submitted_query:
                session.content_search_generation += 1
                modal.submitted_query = query
                modal.results = []
                modal.selected = 0
                modal.running = True
                self.effects.append(
                    ev.StartContentSearch(session.root, query, session.content_search_generation)
                )
            elif modal.results:
                match = modal.results[modal.selected]
                self.close_modal()
                session.track_recent(match.path)
                self.reveal(match.path)
            elif not query:
                session.set_status("Type a search query")
        elif key == "BACKSPACE":
            modal.query = modal.query[:-1]
        elif is_text_key(key):
            modal.query += key

    # background results
    def directory_loaded(self, event: ev.DirectoryLoaded) -> None:
        session = self.session
        if event.path != session.current_dir:
            logger.debug("discarding stale listing of %s", event.path)
            return
        session.snapshot = event.snapshot
        session.apply_filters()
        if event.select_path is not None and session.select_path(event.select_path):
            self.preview_selected()

    def tree_index_built(self, event: ev.TreeIndexBuilt) -> None:
        session = self.session
        if event.root != session.root:
            logger.debug("discarding index built for old root %s", event.root)
            return
        session.tree_index = event.index
        modal = session.modal
        if isinstance(modal, ListSearchModal):
            modal.indexing = False
            self.refresh_list_search(modal)

    def note_loaded(self, event: ev.NoteLoaded) -> None:
        session = self.session
        if event.path != session.note_path:
            return
        session.note_raw = event.raw
        session.preview = event.preview
        if event.error is not None:
            session.set_status(f"Cannot read {event.path.name}: {event.error}")

    def links_resolved(self, event: ev.LinksResolved) -> None:
        session = self.session
        if event.note_path != session.note_path or session.modal is not None:
            return
        if not event.links:
            session.set_status("No links found in this note")
            return
        session.modal = LinksModal(links=list(event.links))

    def rebase_personal_paths(self, source: Path, target: Path) -> None:
        session = self.session
        session.bookmarks = [_rebase(path, source, target) for path in session.bookmarks]
        session.recent_files = [_rebase(path, source, target) for path in session.recent_files]
        if session.note_path is not None and _is_within(session.note_path, source):
            session.clear_preview()

    def forget_personal_paths(self, source: Path) -> None:
        session = self.session
        session.bookmarks = [path for path in session.bookmarks if not _is_within(path, source)]
        session.recent_files = [path for path in session.recent_files if not _is_within(path, source)]
        if session.clipboard is not None and _is_within(session.clipboard.path, source):
            session.clipboard = None
        if session.note_path is not None and _is_within(session.note_path, source):
            session.clear_preview()

    def file_op_completed(self, event: ev.FileOpCompleted) -> None:
        session = self.session
        result = event.result
        session.set_status(result.message)
        if not result.success:
            return
        session.tree_index = None
        action = event.action
        if action is ev.FileAction.DELETE:
            if event.source is not None:
                self.forget_personal_paths(event.source)
            self.reload_current()
            return
        if action is ev.FileAction.RENAME and event.source is not None and result.path is not None:
            self.rebase_personal_paths(event.source, result.path)
        elif action is ev.FileAction.PASTE and session.clipboard is not None:
            clipboard = session.clipboard
            if clipboard.mode is ClipboardMode.CUT:
                session.clipboard = None
                if result.path is not None:
                    self.rebase_personal_paths(clipboard.path, result.path)
        elif action is ev.FileAction.CREATE_LINKED_NOTE and result.path is not None:
            session.track_recent(result.path)
        self.reload_current(result.path)

    def editor_finished(self, event: ev.EditorFinished) -> None:
        session = self.session
        if event.error is not None:
            session.set_status(event.error)
            return
        if event.path == session.note_path:
            session.note_path = None
        self.reload_current(event.path)

    def content_search_completed(self, event: ev.ContentSearchCompleted) -> None:
        session = self.session
        modal = session.modal
        if event.generation != session.content_search_generation or not isinstance(modal, ContentSearchModal):
            logger.debug("discarding content search generation %d", event.generation)
            return
        modal.running = False
        modal.results = list(event.matches)
        modal.selected = 0
        if modal.results:
            session.set_status(f"Found {len(modal.results)} match(es)")
        else:
            session.set_status(f"No matches for '{modal.submitted_query}'")

    def status_expired(self, event: ev.StatusExpired) -> None:
        if self.session.status == event.message:
            self.session.status = ""

    def handle(self, event: ev.Event) -> list[ev.Effect]:
        if isinstance(event, ev.KeyPressed):
            self.handle_key(event.key)
        elif isinstance(event, ev.DirectoryLoaded):
            self.directory_loaded(event)
        elif isinstance(event, ev.TreeIndexBuilt):
            self.tree_index_built(event)
        elif isinstance(event, ev.NoteLoaded):
            self.note_loaded(event)
        elif isinstance(event, ev.LinksResolved):
            self.links_resolved(event)
        elif isinstance(event, ev.FileOpCompleted):
            self.file_op_completed(event)
        elif isinstance(event, ev.StatusReported):
            self.session.set_status(event.message)
        elif isinstance(event, ev.StatusExpired):
            self.status_expired(event)
        elif isinstance(event, ev.EditorFinished):
            self.editor_finished(event)
        elif isinstance(event, ev.ContentSearchCompleted):
            self.content_search_completed(event)
        return self.effects


def dispatch(session: Session, event: ev.Event) -> list[ev.Effect]:
    """Apply ``event`` to ``session`` and return the effects to run."""
    return _Dispatcher(session).handle(event)


__all__ = ["PREVIEW_SCROLL_STEP", "dispatch"]
