"""Note loading, search highlighting, and terminal syntax highlighting.

Preview text is produced in three steps: raw note text is read with a
tolerant decoder, wiki links are rewritten against the root while search
matches are marked in the note's own text, and the result is colorized
with Pygments.
"""

from __future__ import annotations

import re
from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .wikilinks import rewrite_links

DEFAULT_STYLE = "monokai"
HIGHLIGHT_OPEN = "**⚡ "
HIGHLIGHT_CLOSE = " ⚡**"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_FORMATTERS: dict[str, TerminalFormatter] = {}
_VALID_STYLES: set[str] = set()


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1. Raises ``OSError`` when the
    file cannot be opened.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group(0)):02x}", source)


def highlight_matches(content: str, query: str) -> str:
    """Wrap every case-insensitive occurrence of ``query`` in bold markers."""
    if not query:
        return content
    pattern = re.compile(re.escape(query), re.IGNORECASE)
    return pattern.sub(lambda match: f"{HIGHLIGHT_OPEN}{match.group(0)}{HIGHLIGHT_CLOSE}", content)


def count_matches(content: str, query: str) -> int:
    if not query:
        return 0
    return len(re.findall(re.escape(query), content, re.IGNORECASE))


def _normalize_style(style: str) -> str:
    if style in _VALID_STYLES:
        return style
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> TerminalFormatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = TerminalFormatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def colorize(source: str, path: Path, style: str = DEFAULT_STYLE) -> str:
    """Highlight ``source`` with the lexer chosen from ``path``'s name."""
    try:
        lexer = get_lexer_for_filename(path.name, source)
    except ClassNotFound:
        lexer = TextLexer()
    return pygments_highlight(source, lexer, _formatter_for_style(_normalize_style(style)))


def render_note(
    path: Path,
    raw: str,
    root: Path,
    *,
    query: str = "",
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
) -> str:
    """Build preview text for a note already read from disk."""
    text = sanitize_terminal_text(raw)
    if path.suffix == ".md":
        text = rewrite_links(text, root, transform=lambda segment: highlight_matches(segment, query))
    else:
        text = highlight_matches(text, query)
    if no_color:
        return text
    return colorize(text, path, style)


def read_error_preview(path: Path, exc: OSError) -> str:
    return f"Cannot read file:\n{path}\n\n{exc}"


__all__ = [
    "DEFAULT_STYLE",
    "HIGHLIGHT_OPEN",
    "HIGHLIGHT_CLOSE",
    "colorize",
    "count_matches",
    "highlight_matches",
    "read_error_preview",
    "read_text",
    "render_note",
    "sanitize_terminal_text",
]
