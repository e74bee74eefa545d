"""UI theme definitions and selection helpers.

Themes are ANSI palettes for list/modal chrome, cycled by index with the
theme key. Note syntax colours come from the Pygments style setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the renderer."""

    name: str
    title: str
    divider: str
    reverse: str
    reset: str
    entry_dir: str
    entry_note: str
    entry_default: str
    description: str
    status: str
    status_message: str
    modal_title: str
    modal_border: str


DEFAULT_THEME = UITheme(
    name="default",
    title="\033[1;38;5;205m",
    divider="\033[2m",
    reverse="\033[7m",
    reset="\033[0m",
    entry_dir="\033[1;34m",
    entry_note="\033[38;5;110m",
    entry_default="\033[38;5;252m",
    description="\033[2;38;5;250m",
    status="\033[38;5;240;48;5;235m",
    status_message="\033[1;38;5;212m",
    modal_title="\033[1;38;5;45m",
    modal_border="\033[38;5;45m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    title="\033[1;38;5;45m",
    divider="\033[2;38;5;31m",
    reverse="\033[7m",
    reset="\033[0m",
    entry_dir="\033[1;38;5;45m",
    entry_note="\033[38;5;117m",
    entry_default="\033[38;5;252m",
    description="\033[2;38;5;110m",
    status="\033[38;5;153;48;5;24m",
    status_message="\033[1;38;5;229m",
    modal_title="\033[1;38;5;39m",
    modal_border="\033[38;5;39m",
)

FOREST_THEME = UITheme(
    name="forest",
    title="\033[1;38;5;114m",
    divider="\033[2;38;5;65m",
    reverse="\033[7m",
    reset="\033[0m",
    entry_dir="\033[1;38;5;108m",
    entry_note="\033[38;5;150m",
    entry_default="\033[38;5;252m",
    description="\033[2;38;5;144m",
    status="\033[38;5;194;48;5;22m",
    status_message="\033[1;38;5;221m",
    modal_title="\033[1;38;5;114m",
    modal_border="\033[38;5;71m",
)

PLAIN_THEME = UITheme(
    name="plain",
    title="",
    divider="",
    reverse="",
    reset="",
    entry_dir="",
    entry_note="",
    entry_default="",
    description="",
    status="",
    status_message="",
    modal_title="",
    modal_border="",
)

THEMES: tuple[UITheme, ...] = (DEFAULT_THEME, OCEAN_THEME, FOREST_THEME)


def normalize_theme_index(index: int | None) -> int:
    """Return ``index`` when it names a theme, else ``0``."""
    if index is None or not 0 <= index < len(THEMES):
        return 0
    return index


def next_theme_index(index: int) -> int:
    return (normalize_theme_index(index) + 1) % len(THEMES)


def resolve_theme(index: int, *, no_color: bool = False) -> UITheme:
    if no_color:
        return PLAIN_THEME
    return THEMES[normalize_theme_index(index)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "FOREST_THEME",
    "PLAIN_THEME",
    "THEMES",
    "next_theme_index",
    "normalize_theme_index",
    "resolve_theme",
]
