"""Note content helpers: wiki-link graph and preview rendering."""

from __future__ import annotations

from .preview import highlight_matches, read_text, render_note
from .wikilinks import WikiLink, parse_links, resolve_link, resolve_links, rewrite_links

__all__ = [
    "WikiLink",
    "highlight_matches",
    "parse_links",
    "read_text",
    "render_note",
    "resolve_link",
    "resolve_links",
    "rewrite_links",
]
