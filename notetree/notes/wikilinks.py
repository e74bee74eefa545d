"""Wiki-style ``[[token]]`` references: extraction, resolution, rewriting.

Parsing and rewriting share one span scanner so a rewritten note parses to
the same token list as its source text.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path

from ..file_tree_model import NOTE_EXTENSION, walk_entries

LINK_OPEN = "[["
LINK_CLOSE = "]]"
RESOLVED_MARKER = "🔗"
MISSING_MARKER = "❓"
MISSING_TARGET = "missing"


@dataclass(frozen=True)
class WikiLink:
    token: str
    path: Path | None = None

    @property
    def resolved(self) -> bool:
        return self.path is not None


@dataclass(frozen=True)
class _LinkSpan:
    start: int  # offset of the opening brackets
    end: int  # offset just past the closing brackets
    inner: str  # raw text between the brackets, untrimmed

    @property
    def token(self) -> str:
        return self.inner.strip()


def _iter_link_spans(text: str) -> Iterator[_LinkSpan]:
    """Yield well-formed, non-empty link spans left to right.

    An unterminated opener ends the scan. When the enclosed text holds
    another opener, scanning restarts from the innermost one. Spans crossing
    a line break are skipped.
    """
    cursor = 0
    while True:
        start = text.find(LINK_OPEN, cursor)
        if start < 0:
            return
        close = text.find(LINK_CLOSE, start + len(LINK_OPEN))
        if close < 0:
            return
        inner_start = start + len(LINK_OPEN)
        nested = text.rfind(LINK_OPEN, inner_start, close)
        if nested >= 0:
            start = nested
            inner_start = start + len(LINK_OPEN)
        inner = text[inner_start:close]
        cursor = close + len(LINK_CLOSE)
        if "\n" in inner or not inner.strip():
            continue
        yield _LinkSpan(start=start, end=cursor, inner=inner)


def parse_links(text: str) -> list[str]:
    """Return unique link tokens in first-seen order."""
    seen: set[str] = set()
    tokens: list[str] = []
    for span in _iter_link_spans(text):
        token = span.token
        if token in seen:
            continue
        seen.add(token)
        tokens.append(token)
    return tokens


def link_filename(token: str) -> str:
    """File name a token refers to; the note extension is implied."""
    if Path(token).suffix:
        return token
    return token + NOTE_EXTENSION


def resolve_link(token: str, root: Path) -> Path | None:
    """Find the first file under ``root`` matching ``token``.

    Matching is case-insensitive on the file name (or on the root-relative
    path when the token contains ``/``). The walk is depth-first pre-order
    and stops at the first hit.
    """
    wanted = link_filename(token.strip()).casefold()
    if not wanted:
        return None
    match_relative = "/" in wanted
    for entry in walk_entries(root, files_only=True):
        if match_relative:
            try:
                candidate = entry.path.relative_to(root).as_posix().casefold()
            except ValueError:
                continue
            if candidate == wanted or candidate.endswith("/" + wanted.lstrip("/")):
                return entry.path
        elif entry.name.casefold() == wanted:
            return entry.path
    return None


def resolve_links(tokens: list[str], root: Path) -> list[WikiLink]:
    return [WikiLink(token=token, path=resolve_link(token, root)) for token in tokens]


def format_link(inner: str, path: Path | None) -> str:
    if path is None:
        return f"{MISSING_MARKER}{LINK_OPEN}{inner}{LINK_CLOSE}({MISSING_TARGET})"
    return f"{RESOLVED_MARKER}{LINK_OPEN}{inner}{LINK_CLOSE}({path})"


def rewrite_links(text: str, root: Path, *, transform: Callable[[str], str] | None = None) -> str:
    """Mark every link as resolved or missing, keeping all other text as-is.

    ``transform`` is applied to the note's own text, including the text between
    link brackets, but never to the inserted link targets.
    """
    keep = transform if transform is not None else (lambda segment: segment)
    cache: dict[str, Path | None] = {}
    out: list[str] = []
    cursor = 0
    for span in _iter_link_spans(text):
        token = span.token
        if token not in cache:
            cache[token] = resolve_link(token, root)
        out.append(keep(text[cursor : span.start]))
        out.append(format_link(keep(span.inner), cache[token]))
        cursor = span.end
    out.append(keep(text[cursor:]))
    return "".join(out)


__all__ = [
    "MISSING_MARKER",
    "MISSING_TARGET",
    "RESOLVED_MARKER",
    "WikiLink",
    "format_link",
    "link_filename",
    "parse_links",
    "resolve_link",
    "resolve_links",
    "rewrite_links",
]
