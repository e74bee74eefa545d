"""Effect execution: the only place session work touches disk or processes.

Each handler takes one effect and returns follow-up events for
``dispatch``. Unexpected ``OSError`` from any handler is logged and turned
into a ``StatusReported`` event so the event loop keeps running.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from .. import fileops
from ..file_tree_model import read_snapshot
from ..notes.preview import DEFAULT_STYLE, read_error_preview, read_text, render_note
from ..notes.wikilinks import parse_links, resolve_links
from ..search.content import ContentSearchRunner
from ..search.fuzzy import ensure_indexed
from . import events as ev

logger = logging.getLogger(__name__)

EditorLauncher = Callable[[Path], str | None]


def _no_editor(path: Path) -> str | None:
    return "Cannot edit: no terminal attached"


class EffectRunner:
    """Perform effects requested by ``dispatch``."""

    def __init__(
        self,
        *,
        content_search: ContentSearchRunner | None = None,
        launch_editor: EditorLauncher = _no_editor,
        style: str = DEFAULT_STYLE,
        no_color: bool = False,
    ) -> None:
        self.content_search = content_search if content_search is not None else ContentSearchRunner()
        self.launch_editor = launch_editor
        self.style = style
        self.no_color = no_color
        self._handlers: dict[type, Callable[..., list[ev.Event]]] = {
            ev.LoadDirectory: self._load_directory,
            ev.BuildTreeIndex: self._build_tree_index,
            ev.LoadNote: self._load_note,
            ev.RenderNote: self._render_note,
            ev.ResolveLinks: self._resolve_links,
            ev.CreateNote: self._create_note,
            ev.CreateLinkedNote: self._create_linked_note,
            ev.CreateDirectory: self._create_directory,
            ev.RenameEntry: self._rename_entry,
            ev.DeleteEntry: self._delete_entry,
            ev.PasteEntry: self._paste_entry,
            ev.CopyPath: self._copy_path,
            ev.CopyContent: self._copy_content,
            ev.OpenEditor: self._open_editor,
            ev.StartContentSearch: self._start_content_search,
            ev.CancelContentSearch: self._cancel_content_search,
        }

    def run(self, effect: ev.Effect) -> list[ev.Event]:
        handler = self._handlers[type(effect)]
        try:
            return handler(effect)
        except OSError as exc:
            logger.warning("effect %s failed: %s", type(effect).__name__, exc)
            return [ev.StatusReported(f"Error: {exc.strerror or exc}")]

    def _render(self, path: Path, raw: str, root: Path, query: str) -> str:
        return render_note(path, raw, root, query=query, style=self.style, no_color=self.no_color)

    def _load_directory(self, effect: ev.LoadDirectory) -> list[ev.Event]:
        return [ev.DirectoryLoaded(effect.path, read_snapshot(effect.path), effect.select_path)]

    def _build_tree_index(self, effect: ev.BuildTreeIndex) -> list[ev.Event]:
        index = ensure_indexed(effect.current, effect.root)
        if index is not effect.current:
            logger.debug("indexed %d entries under %s", len(index), effect.root)
        return [ev.TreeIndexBuilt(effect.root, index)]

    def _load_note(self, effect: ev.LoadNote) -> list[ev.Event]:
        try:
            raw = read_text(effect.path)
        except OSError as exc:
            logger.debug("cannot read note %s: %s", effect.path, exc)
            return [
                ev.NoteLoaded(
                    effect.path,
                    "",
                    read_error_preview(effect.path, exc),
                    error=exc.strerror or str(exc),
                )
            ]
        return [ev.NoteLoaded(effect.path, raw, self._render(effect.path, raw, effect.root, effect.query))]

    def _render_note(self, effect: ev.RenderNote) -> list[ev.Event]:
        preview = self._render(effect.path, effect.raw, effect.root, effect.query)
        return [ev.NoteLoaded(effect.path, effect.raw, preview)]

    def _resolve_links(self, effect: ev.ResolveLinks) -> list[ev.Event]:
        links = resolve_links(parse_links(effect.raw), effect.root)
        return [ev.LinksResolved(effect.note_path, tuple(links))]

    def _create_note(self, effect: ev.CreateNote) -> list[ev.Event]:
        result = fileops.create_note(effect.directory, effect.name, effect.body)
        return [ev.FileOpCompleted(ev.FileAction.CREATE_NOTE, result)]

    def _create_linked_note(self, effect: ev.CreateLinkedNote) -> list[ev.Event]:
        result = fileops.create_note(effect.directory, Path(effect.token).name)
        return [ev.FileOpCompleted(ev.FileAction.CREATE_LINKED_NOTE, result)]

    def _create_directory(self, effect: ev.CreateDirectory) -> list[ev.Event]:
        result = fileops.create_directory(effect.directory, effect.name)
        return [ev.FileOpCompleted(ev.FileAction.CREATE_DIR, result)]

    def _rename_entry(self, effect: ev.RenameEntry) -> list[ev.Event]:
        result = fileops.rename_entry(effect.path, effect.new_name)
        return [ev.FileOpCompleted(ev.FileAction.RENAME, result, source=effect.path)]

    def _delete_entry(self, effect: ev.DeleteEntry) -> list[ev.Event]:
        result = fileops.delete_entry(effect.path)
        return [ev.FileOpCompleted(ev.FileAction.DELETE, result, source=effect.path)]

    def _paste_entry(self, effect: ev.PasteEntry) -> list[ev.Event]:
        result = fileops.paste_entry(effect.clipboard, effect.destination)
        return [ev.FileOpCompleted(ev.FileAction.PASTE, result, source=effect.clipboard.path)]

    def _copy_path(self, effect: ev.CopyPath) -> list[ev.Event]:
        return [ev.StatusReported(fileops.copy_path_message(effect.path))]

    def _copy_content(self, effect: ev.CopyContent) -> list[ev.Event]:
        return [ev.StatusReported(fileops.copy_content_message(effect.path))]

    def _open_editor(self, effect: ev.OpenEditor) -> list[ev.Event]:
        return [ev.EditorFinished(effect.path, self.launch_editor(effect.path))]

    def _start_content_search(self, effect: ev.StartContentSearch) -> list[ev.Event]:
        self.content_search.start(effect.root, effect.query, effect.generation)
        return []

    def _cancel_content_search(self, effect: ev.CancelContentSearch) -> list[ev.Event]:
        self.content_search.cancel()
        return []

    def poll_content_search(self, timeout_seconds: float = 0.0) -> list[ev.Event]:
        """Turn finished background searches into completion events."""
        return [
            ev.ContentSearchCompleted(generation, tuple(matches))
            for generation, matches in self.content_search.poll(timeout_seconds)
        ]


__all__ = ["EditorLauncher", "EffectRunner"]
