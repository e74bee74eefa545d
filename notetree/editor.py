"""Editor launch helper for external note edits.

Runs the configured editor while temporarily leaving raw/alternate-screen TUI
mode. Returns an error message string instead of raising for UI-friendly
handling.
"""

from __future__ import annotations

import shlex
import subprocess
from pathlib import Path
from typing import Callable


def launch_editor(
    target: Path,
    editor: str,
    disable_tui_mode: Callable[[], None],
    enable_tui_mode: Callable[[], None],
) -> str | None:
    cmd = shlex.split(editor) if editor.strip() else []
    if not cmd:
        return "Cannot edit: no editor configured."

    disable_tui_mode()
    try:
        completed = subprocess.run([*cmd, str(target)], check=False)
    except OSError as exc:
        return f"Failed to launch editor: {exc}"
    finally:
        enable_tui_mode()
    if completed.returncode != 0:
        return f"Editor exited with status {completed.returncode}"
    return None
