"""Frame composition for the terminal view.

Builds full-screen ANSI frames from a ``Session``: home screen, list pane,
note preview, modal overlay and status line. Nothing here mutates the
session; the runtime decides when to repaint.
"""

from __future__ import annotations

from dataclasses import dataclass

from .ansi import display_width, fit_ansi_line
from .file_tree_model import count_entries
from .list_items import ListItem
from .session.state import (
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
from .ui_theme import UITheme, resolve_theme

CURSOR = "▏"
MIN_LIST_WIDTH = 24

HELP_LINES: tuple[str, ...] = (
    "NAVIGATION",
    "j/k ↑/↓    move            Enter/l/→  open",
    "h/←/-      parent          ~          home as root",
    "gg / G     first / last    Ctrl+D/U   half page",
    "Ctrl+O     back            Tab        forward",
    "u / d      scroll preview",
    "",
    "FILES",
    "n / N      new note / dir  r          rename",
    "D          delete          e          edit",
    "c / x / p  copy/cut/paste  y / Y      path / content",
    "b / B      bookmark / list Ctrl+R     recent files",
    "",
    "VIEW + SEARCH",
    "m          .md only        .          hidden files",
    "s          cycle sort      t          theme",
    "/          find file       S          search contents",
    "F          find in note    L          note links",
    "R          refresh         ?          help",
    "q          quit",
)

HOME_LINES: tuple[str, ...] = (
    "Enter  browse notes",
    "Ctrl+R recent files",
    "B      bookmarks",
    "t      theme",
    "?      help",
    "q      quit",
)


@dataclass(frozen=True)
class FrameSize:
    width: int
    height: int

    @property
    def body_rows(self) -> int:
        return max(1, self.height - 2)

    @property
    def list_width(self) -> int:
        return max(min(self.width, MIN_LIST_WIDTH), (self.width * 2) // 5)

    @property
    def preview_width(self) -> int:
        return max(0, self.width - self.list_width - 1)


def list_page_rows(height: int) -> int:
    """Rows available to the entry list for a terminal ``height``."""
    return FrameSize(1, height).body_rows


def _window_start(selected: int, count: int, rows: int) -> int:
    if count <= rows:
        return 0
    start = selected - rows // 2
    return max(0, min(start, count - rows))


def _item_row(item: ListItem, width: int, selected: bool, theme: UITheme) -> str:
    title = item.title
    description = item.description
    if selected:
        text = f"{theme.reverse}{title}  {description}"
        return fit_ansi_line(text, width, theme.reset)
    color = theme.entry_default
    if title.startswith("📁"):
        color = theme.entry_dir
    elif title.startswith("📝"):
        color = theme.entry_note
    text = f"{color}{title}{theme.reset}  {theme.description}{description}"
    return fit_ansi_line(text, width, theme.reset)


def _list_selection(session: Session) -> int:
    modal = session.modal
    if isinstance(modal, (ListSearchModal, ContentSearchModal)):
        return modal.selected
    return session.selected


def list_pane_lines(session: Session, width: int, rows: int, theme: UITheme) -> list[str]:
    items = session.displayed_items()
    selected = _list_selection(session)
    start = _window_start(selected, len(items), rows)
    lines = [
        _item_row(item, width, start + offset == selected, theme)
        for offset, item in enumerate(items[start : start + rows])
    ]
    if not items:
        modal = session.modal
        if isinstance(modal, ListSearchModal) and modal.indexing:
            empty = "indexing…"
        elif isinstance(modal, ContentSearchModal) and modal.running:
            empty = "searching…"
        else:
            empty = "(empty)"
        lines.append(fit_ansi_line(f"{theme.description}{empty}", width, theme.reset))
    lines.extend(" " * width for _ in range(rows - len(lines)))
    return lines


def preview_pane_lines(session: Session, width: int, rows: int) -> list[str]:
    if width <= 0:
        return [""] * rows
    source = session.preview.splitlines()
    offset = max(0, min(session.preview_offset, max(0, len(source) - rows)))
    lines = [fit_ansi_line(line, width, "\033[0m" if "\033" in line else "") for line in source[offset : offset + rows]]
    lines.extend(" " * width for _ in range(rows - len(lines)))
    return lines


def _with_cursor(value: str, active: bool) -> str:
    return f"{value}{CURSOR}" if active else value


def _path_rows(paths, selected: int, empty: str) -> list[str]:
    if not paths:
        return [empty]
    return [("> " if idx == selected else "  ") + f"{path.name}  ({path.parent})" for idx, path in enumerate(paths)]


def modal_lines(session: Session) -> tuple[str, list[str], str] | None:
    """Return ``(title, body, footer)`` for the active overlay modal, if any.

    Search modals draw into the list pane and status line instead.
    """
    modal = session.modal
    if isinstance(modal, CreateNoteModal):
        body_lines = modal.body.split("\n")
        body_lines[-1] = _with_cursor(body_lines[-1], modal.editing_body)
        return (
            "New note",
            [f"Name: {_with_cursor(modal.name, not modal.editing_body)}", "", "Body:", *body_lines],
            "Tab switch field • Ctrl+S save • Esc cancel",
        )
    if isinstance(modal, ConfirmDeleteModal):
        return ("Delete", [f"Delete {modal.name}?", "", str(modal.path)], "y confirm • n cancel")
    if isinstance(modal, RenameModal):
        return (f"Rename {modal.original_name}", [f"> {_with_cursor(modal.value, True)}"], "Enter rename • Esc cancel")
    if isinstance(modal, CreateDirModal):
        return ("New directory", [f"> {_with_cursor(modal.value, True)}"], "Enter create • Esc cancel")
    if isinstance(modal, RecentFilesModal):
        return ("Recent files", _path_rows(modal.paths, modal.selected, "No recent files"), "Enter open • Esc close")
    if isinstance(modal, BookmarksModal):
        return (
            "Bookmarks",
            _path_rows(modal.paths, modal.selected, "No bookmarks"),
            "Enter open • D remove • Esc close",
        )
    if isinstance(modal, HelpModal):
        return ("Help", list(HELP_LINES), "? or Esc close")
    if isinstance(modal, LinksModal):
        rows = [
            ("> " if idx == modal.selected else "  ") + f"{item.title}  {item.description}"
            for idx, item in enumerate(session.modal_items())
        ]
        return ("Links", rows, "Enter open/create • Esc close")
    return None


def _overlay(lines: list[str], box: list[str], width: int) -> None:
    """Center ``box`` rows over ``lines`` in place."""
    top = max(0, (len(lines) - len(box)) // 2)
    box_width = max((display_width(row) for row in box), default=0)
    left = max(0, (width - box_width) // 2)
    for offset, row in enumerate(box):
        target = top + offset
        if target >= len(lines):
            break
        lines[target] = fit_ansi_line(" " * left + row, width, "\033[0m" if "\033" in row else "")


def modal_box(title: str, body: list[str], footer: str, max_width: int, max_rows: int, theme: UITheme) -> list[str]:
    inner = min(max_width - 4, max([display_width(title), display_width(footer), *map(display_width, body)]) + 2)
    inner = max(10, inner)
    border = theme.modal_border
    reset = theme.reset
    visible = body[: max(1, max_rows - 5)]
    rows = [f"{border}╭{'─' * (inner + 2)}╮{reset}"]
    rows.append(f"{border}│{reset} {theme.modal_title}{fit_ansi_line(title, inner, reset)} {border}│{reset}")
    rows.append(f"{border}├{'─' * (inner + 2)}┤{reset}")
    rows.extend(f"{border}│{reset} {fit_ansi_line(line, inner, reset)} {border}│{reset}" for line in visible)
    rows.append(f"{border}│{reset} {theme.description}{fit_ansi_line(footer, inner, reset)} {border}│{reset}")
    rows.append(f"{border}╰{'─' * (inner + 2)}╯{reset}")
    return rows


def status_text(session: Session) -> str:
    """Left side of the status line."""
    modal = session.modal
    if isinstance(modal, ListSearchModal):
        return f"/ {modal.query}{CURSOR}  ({len(modal.results)} results)"
    if isinstance(modal, NoteSearchModal):
        return f"Find in note: {modal.query}{CURSOR}"
    if isinstance(modal, ContentSearchModal):
        state = "searching…" if modal.running else f"{len(modal.results)} matches"
        return f"Search contents: {modal.query}{CURSOR}  ({state})"
    parts = [session.mode_label()]
    if session.mode is ViewMode.BROWSER:
        files, dirs = count_entries(session.snapshot)
        parts.append(f"{files} files, {dirs} dirs")
        parts.extend(session.filter_tags())
        if session.clipboard is not None:
            parts.append(f"[{session.clipboard.mode.value}: {session.clipboard.path.name}]")
    if session.status:
        parts.append(session.status)
    return " │ ".join(parts)


def build_status_line(left_text: str, width: int, right_text: str = "│ ? Help") -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * max(0, usable - display_width(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def home_lines(session: Session, size: FrameSize, theme: UITheme) -> list[str]:
    body = [
        f"{theme.title}notetree{theme.reset}",
        "",
        f"{theme.description}{session.root}{theme.reset}",
        f"{theme.description}{len(session.recent_files)} recent • {len(session.bookmarks)} bookmarks • theme {theme.name}{theme.reset}",
        "",
        *HOME_LINES,
    ]
    lines = [" " * size.width for _ in range(size.body_rows)]
    _overlay(lines, body, size.width)
    return lines


def build_frame(session: Session, width: int, height: int, *, no_color: bool = False) -> list[str]:
    """Compose every screen row for the current session."""
    size = FrameSize(max(1, width), max(3, height))
    theme = resolve_theme(session.theme_index, no_color=no_color)

    title = f"{theme.title}notetree{theme.reset}  {session.current_dir}"
    if session.mode is ViewMode.HOME:
        title = f"{theme.title}notetree{theme.reset}"
        body = home_lines(session, size, theme)
    else:
        rows = size.body_rows
        left = list_pane_lines(session, size.list_width, rows, theme)
        right = preview_pane_lines(session, size.preview_width, rows)
        divider = f"{theme.divider}│{theme.reset}"
        body = [f"{l}{divider}{r}" if size.preview_width > 0 else l for l, r in zip(left, right)]

    overlay = modal_lines(session)
    if overlay is not None:
        box = modal_box(*overlay, max_width=size.width, max_rows=size.body_rows, theme=theme)
        _overlay(body, box, size.width)

    status = build_status_line(status_text(session), size.width)
    return [
        fit_ansi_line(title, size.width, theme.reset),
        *body,
        f"{theme.status}{fit_ansi_line(status, size.width, theme.reset)}{theme.reset}",
    ]


def render_frame(session: Session, width: int, height: int, *, no_color: bool = False) -> str:
    """Full-screen repaint sequence for ``build_frame``."""
    rows = build_frame(session, width, height, no_color=no_color)
    return "\033[H" + "\r\n".join(rows) + "\033[J"


__all__ = [
    "HELP_LINES",
    "FrameSize",
    "build_frame",
    "build_status_line",
    "list_page_rows",
    "modal_lines",
    "render_frame",
    "status_text",
]
