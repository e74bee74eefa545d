"""Filesystem mutations used by note-tree actions.

Every helper reports ``FileOpResult`` instead of raising so the caller can
turn failures into status messages without leaving its current state.
"""

from __future__ import annotations

import errno
import logging
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .file_tree_model import NOTE_EXTENSION

logger = logging.getLogger(__name__)


class ClipboardMode(Enum):
    COPY = "copy"
    CUT = "cut"


@dataclass(frozen=True)
class FileClipboard:
    path: Path
    mode: ClipboardMode


@dataclass(frozen=True)
class FileOpResult:
    success: bool
    message: str
    path: Path | None = None


def _failure(action: str, target: Path, exc: OSError) -> FileOpResult:
    logger.warning("%s failed for %s: %s", action, target, exc)
    reason = exc.strerror or str(exc)
    return FileOpResult(success=False, message=f"Error: {reason}")


def validate_name(name: str) -> str | None:
    """Return an error message for unusable entry names, else ``None``."""
    cleaned = name.strip()
    if not cleaned:
        return "Name cannot be empty"
    if cleaned in {".", ".."} or "/" in cleaned or "\x00" in cleaned:
        return f"Invalid name: {cleaned}"
    return None


def note_filename(name: str) -> str:
    name = name.strip()
    if not Path(name).suffix:
        name += NOTE_EXTENSION
    return name


def note_title(filename: str) -> str:
    return Path(filename).stem


def create_note(directory: Path, name: str, body: str = "") -> FileOpResult:
    """Create ``<name>.md`` headed by its title; refuses to overwrite."""
    filename = note_filename(name)
    path = directory / filename
    content = f"# {note_title(filename)}\n\n{body.strip()}\n" if body.strip() else f"# {note_title(filename)}\n\n"
    try:
        with path.open("x", encoding="utf-8") as handle:
            handle.write(content)
    except OSError as exc:
        return _failure("create note", path, exc)
    return FileOpResult(success=True, message=f"Created: {filename}", path=path)


def create_directory(directory: Path, name: str) -> FileOpResult:
    path = directory / name.strip()
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return _failure("create directory", path, exc)
    return FileOpResult(success=True, message=f"Created: {path.name}/", path=path)


def rename_entry(path: Path, new_name: str) -> FileOpResult:
    target = path.parent / new_name.strip()
    if target.exists():
        return FileOpResult(success=False, message=f"Already exists: {target.name}")
    try:
        path.rename(target)
    except OSError as exc:
        return _failure("rename", path, exc)
    return FileOpResult(success=True, message=f"Renamed to: {target.name}", path=target)


def delete_entry(path: Path) -> FileOpResult:
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as exc:
        return _failure("delete", path, exc)
    return FileOpResult(success=True, message=f"Deleted: {path.name}")


def _copy(source: Path, destination: Path) -> None:
    if source.is_dir():
        shutil.copytree(source, destination)
    else:
        shutil.copy2(source, destination)


def paste_entry(clipboard: FileClipboard | None, destination_dir: Path) -> FileOpResult:
    """Copy or move the clipboard entry into ``destination_dir``.

    Moves try a rename first and fall back to copy-then-delete only across
    filesystems. Existing destinations are never overwritten, and a
    directory is never pasted into itself or below itself.
    """
    if clipboard is None:
        return FileOpResult(success=False, message="Clipboard is empty")
    source = clipboard.path
    if not source.exists():
        return FileOpResult(success=False, message=f"Error: {source.name} no longer exists")

    resolved_dir = destination_dir.resolve()
    resolved_source = source.resolve()
    if resolved_dir == resolved_source or resolved_source in resolved_dir.parents:
        return FileOpResult(success=False, message="Cannot paste a directory into itself")

    destination = destination_dir / source.name
    if destination.exists():
        return FileOpResult(success=False, message=f"File already exists: {source.name}")

    try:
        if clipboard.mode is ClipboardMode.COPY:
            _copy(source, destination)
        else:
            try:
                source.rename(destination)
            except OSError as exc:
                if exc.errno != errno.EXDEV:
                    raise
                _copy(source, destination)
                if source.is_dir():
                    shutil.rmtree(source)
                else:
                    source.unlink()
    except OSError as exc:
        return _failure("paste", source, exc)

    action = "Copied" if clipboard.mode is ClipboardMode.COPY else "Moved"
    return FileOpResult(success=True, message=f"{action}: {source.name}", path=destination)


def copy_path_message(path: Path) -> str:
    return f"Path: {path}"


def copy_content_message(path: Path) -> str:
    try:
        content = path.read_bytes()
    except OSError as exc:
        return f"Error: {exc.strerror or exc}"
    return f"Content copied ({len(content)} bytes)"


__all__ = [
    "ClipboardMode",
    "FileClipboard",
    "FileOpResult",
    "copy_content_message",
    "copy_path_message",
    "create_directory",
    "create_note",
    "delete_entry",
    "note_filename",
    "note_title",
    "paste_entry",
    "rename_entry",
    "validate_name",
]
