"""Interactive runtime: terminal setup, the key loop, and shutdown persistence."""

from __future__ import annotations

import logging
import os
import shutil
import sys
from pathlib import Path

from .config import SavedSession, Settings, save_saved_session
from .editor import launch_editor
from .input import read_key
from .render import list_page_rows, render_frame
from .search.content import ContentSearchRunner
from .session import EffectRunner, SessionController, new_session, saved_session_from
from .terminal import TerminalController

logger = logging.getLogger(__name__)

KEY_POLL_MS = 100


def run_event_loop(
    controller: SessionController,
    terminal: TerminalController,
    stdin_fd: int,
    *,
    no_color: bool = False,
) -> None:
    """Read keys and repaint until the session asks to quit."""
    session = controller.session
    last_size: tuple[int, int] | None = None
    dirty = True
    while not controller.finished:
        term = shutil.get_terminal_size((80, 24))
        size = (term.columns, term.lines)
        if size != last_size:
            last_size = size
            session.page_size = list_page_rows(term.lines)
            dirty = True
        if dirty:
            terminal.write(render_frame(session, term.columns, term.lines, no_color=no_color))
            dirty = False

        key = read_key(stdin_fd, timeout_ms=KEY_POLL_MS)
        if key:
            controller.press(key)
            dirty = True
        if controller.poll_background():
            dirty = True


def run_app(
    start_dir: Path,
    settings: Settings,
    saved: SavedSession,
    *,
    style: str,
    no_color: bool,
) -> None:
    """Run the interactive browser rooted at ``start_dir``."""
    if not os.isatty(sys.stdin.fileno()) or not os.isatty(sys.stdout.fileno()):
        raise SystemExit("notetree needs an interactive terminal")

    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    session = new_session(start_dir, settings, saved)
    content_search = ContentSearchRunner()
    runner = EffectRunner(
        content_search=content_search,
        launch_editor=lambda path: launch_editor(
            path,
            settings.editor,
            terminal.disable_tui_mode,
            terminal.enable_tui_mode,
        ),
        style=style,
        no_color=no_color,
    )
    controller = SessionController(session, runner)
    logger.info("starting in %s", start_dir)
    try:
        with terminal.raw_mode():
            run_event_loop(controller, terminal, stdin_fd, no_color=no_color)
    finally:
        content_search.cancel()
        save_saved_session(saved_session_from(session))
        logger.info("session saved (last directory %s)", session.current_dir)


__all__ = ["KEY_POLL_MS", "run_app", "run_event_loop"]
