"""Command-line front door for notetree.

Parses CLI options, picks the starting directory, configures logging and
hands off to the interactive runtime.
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from . import __version__
from .config import SavedSession, Settings, load_saved_session, load_settings
from .notes.preview import DEFAULT_STYLE

LOG_ENV_VAR = "NOTETREE_LOG"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_start_dir(path_arg: str | None, settings: Settings, saved: SavedSession) -> Path:
    """Pick the directory to open.

    Order: explicit argument, last session directory, configured default
    directory when it exists, then the working directory. An explicit
    argument that is not a directory is an error.
    """
    if path_arg is not None:
        path = Path(path_arg).expanduser()
        if not path.is_dir():
            raise SystemExit(f"Not a directory: {path}")
        return path.resolve()
    for candidate in (saved.last_directory, settings.default_dir):
        if candidate is not None and candidate.is_dir():
            return candidate.resolve()
    return Path.cwd()


def configure_logging(log_file: str | None) -> None:
    """Log to ``log_file`` when given; stderr belongs to the terminal UI."""
    package_logger = logging.getLogger("notetree")
    if not log_file:
        package_logger.addHandler(logging.NullHandler())
        return
    handler = logging.FileHandler(Path(log_file).expanduser(), encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notetree",
        description="Browse, search and link markdown notes in the terminal.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to open. Defaults to the last one used.")
    parser.add_argument("--style", default=None, help=f"Pygments style for note previews (default: {DEFAULT_STYLE}).")
    parser.add_argument("--no-color", action="store_true", help="Disable colour output.")
    parser.add_argument(
        "--log-file",
        default=None,
        help=f"Write debug logs to this file (also read from ${LOG_ENV_VAR}).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch notetree."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file or os.environ.get(LOG_ENV_VAR))

    settings = load_settings()
    saved = load_saved_session()
    start_dir = resolve_start_dir(args.path, settings, saved)

    from .runtime import run_app

    run_app(
        start_dir,
        settings,
        saved,
        style=args.style or settings.preview_style,
        no_color=args.no_color or bool(os.environ.get("NO_COLOR")),
    )


if __name__ == "__main__":
    main()
