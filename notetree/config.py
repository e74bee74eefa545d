"""Persistent JSON settings and session state.

``config.json`` holds user settings (editor, theme, default directory,
filter defaults). ``state.json`` holds what the last session left behind
(last directory, theme, recent files, bookmarks). All access is defensive:
malformed or missing files fall back to defaults.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from .file_tree_model import ExtensionFilter, FilterState, SortMode

logger = logging.getLogger(__name__)

APP_NAME = "notetree"
CONFIG_DIR = Path(user_config_dir(APP_NAME, appauthor=False))
CONFIG_PATH = CONFIG_DIR / "config.json"
STATE_PATH = CONFIG_DIR / "state.json"
DEFAULT_EDITOR = "nvim"
DEFAULT_MAX_RECENT_FILES = 10


@dataclass(frozen=True)
class Settings:
    editor: str = DEFAULT_EDITOR
    theme: int = 0
    default_dir: Path | None = None
    filters: FilterState = FilterState()
    sort_mode: SortMode = SortMode.NAME
    max_recent_files: int = DEFAULT_MAX_RECENT_FILES
    preview_style: str = "monokai"


@dataclass(frozen=True)
class SavedSession:
    last_directory: Path | None = None
    last_theme: int | None = None
    recent_files: tuple[Path, ...] = field(default_factory=tuple)
    bookmarks: tuple[Path, ...] = field(default_factory=tuple)


def _load_json(path: Path) -> dict[str, object]:
    """Load a top-level JSON object, or ``{}`` on any failure."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _save_json(path: Path, data: dict[str, object]) -> None:
    """Write pretty-printed JSON; failures are logged and otherwise ignored."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("could not write %s: %s", path, exc)


def _coerce_int(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value


def _coerce_path(value: object) -> Path | None:
    if not isinstance(value, str) or not value:
        return None
    return Path(value).expanduser()


def _coerce_paths(value: object) -> tuple[Path, ...]:
    if not isinstance(value, list):
        return ()
    paths: list[Path] = []
    for raw in value:
        path = _coerce_path(raw)
        if path is not None:
            paths.append(path)
    return tuple(paths)


def default_editor() -> str:
    return os.environ.get("EDITOR", "").strip() or DEFAULT_EDITOR


def load_config() -> dict[str, object]:
    return _load_json(CONFIG_PATH)


def load_settings() -> Settings:
    data = load_config()
    filters_raw = data.get("filters")
    filters_data = filters_raw if isinstance(filters_raw, dict) else {}
    search_raw = data.get("search")
    search_data = search_raw if isinstance(search_raw, dict) else {}

    editor = data.get("editor")
    style = data.get("preview_style")
    default_dir = _coerce_path(data.get("default_dir"))
    if default_dir is None:
        default_dir = Path.home() / "notes"

    max_recent = _coerce_int(search_data.get("max_recent_files"), DEFAULT_MAX_RECENT_FILES)
    return Settings(
        editor=editor.strip() if isinstance(editor, str) and editor.strip() else default_editor(),
        theme=max(0, _coerce_int(data.get("theme"), 0)),
        default_dir=default_dir,
        filters=FilterState(
            show_hidden=filters_data.get("show_hidden") is True,
            extension_only=ExtensionFilter.MD if filters_data.get("md_only") is True else ExtensionFilter.NONE,
        ),
        sort_mode=SortMode.from_value(filters_data.get("sort_mode")),
        max_recent_files=max_recent if max_recent > 0 else DEFAULT_MAX_RECENT_FILES,
        preview_style=style if isinstance(style, str) and style else "monokai",
    )


def save_settings(settings: Settings) -> None:
    _save_json(
        CONFIG_PATH,
        {
            "editor": settings.editor,
            "theme": settings.theme,
            "default_dir": str(settings.default_dir) if settings.default_dir is not None else "",
            "preview_style": settings.preview_style,
            "filters": {
                "md_only": settings.filters.extension_only is ExtensionFilter.MD,
                "show_hidden": settings.filters.show_hidden,
                "sort_mode": settings.sort_mode.value,
            },
            "search": {"max_recent_files": settings.max_recent_files},
        },
    )


def load_saved_session() -> SavedSession:
    data = _load_json(STATE_PATH)
    raw_theme = data.get("last_theme")
    last_theme = raw_theme if isinstance(raw_theme, int) and not isinstance(raw_theme, bool) else None
    return SavedSession(
        last_directory=_coerce_path(data.get("last_directory")),
        last_theme=last_theme,
        recent_files=_coerce_paths(data.get("recent_files")),
        bookmarks=_coerce_paths(data.get("bookmarks")),
    )


def save_saved_session(saved: SavedSession) -> None:
    _save_json(
        STATE_PATH,
        {
            "last_directory": str(saved.last_directory) if saved.last_directory is not None else "",
            "last_theme": saved.last_theme if saved.last_theme is not None else 0,
            "recent_files": [str(path) for path in saved.recent_files],
            "bookmarks": [str(path) for path in saved.bookmarks],
        },
    )


__all__ = [
    "CONFIG_PATH",
    "STATE_PATH",
    "SavedSession",
    "Settings",
    "default_editor",
    "load_config",
    "load_saved_session",
    "load_settings",
    "save_saved_session",
    "save_settings",
]
