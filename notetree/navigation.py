"""Directory navigation history with browser-style back/forward semantics.

This module intentionally has no UI concerns: it stores raw paths only and
never reads the filesystem. Callers re-read the directory after a move.
"""

from __future__ import annotations

from pathlib import Path

MAX_NAVIGATION_HISTORY = 256


class NavigationHistory:
    """Ordered visited directories plus a current position.

    ``position`` is ``None`` only while the history is empty; otherwise it
    always indexes ``paths``.
    """

    def __init__(self, max_entries: int = MAX_NAVIGATION_HISTORY) -> None:
        self.max_entries = max(1, max_entries)
        self.paths: list[Path] = []
        self.position: int | None = None

    @property
    def current(self) -> Path | None:
        if self.position is None:
            return None
        return self.paths[self.position]

    @property
    def can_back(self) -> bool:
        return self.position is not None and self.position > 0

    @property
    def can_forward(self) -> bool:
        return self.position is not None and self.position < len(self.paths) - 1

    def visit(self, path: Path) -> None:
        """Append ``path`` as the new position, dropping any forward tail."""
        if self.position is None:
            self.paths = [path]
            self.position = 0
            return
        if self.paths[self.position] == path:
            return
        del self.paths[self.position + 1 :]
        self.paths.append(path)
        overflow = len(self.paths) - self.max_entries
        if overflow > 0:
            del self.paths[:overflow]
        self.position = len(self.paths) - 1

    def back(self) -> bool:
        if not self.can_back:
            return False
        assert self.position is not None
        self.position -= 1
        return True

    def forward(self) -> bool:
        if not self.can_forward:
            return False
        assert self.position is not None
        self.position += 1
        return True


__all__ = ["MAX_NAVIGATION_HISTORY", "NavigationHistory"]
