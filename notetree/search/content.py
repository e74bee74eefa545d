"""Parallel full-text search over the notes below a root directory.

A walker thread feeds candidate files into a bounded queue, a fixed pool of
worker threads scans them, and each file's matches travel back as one
isolated list. The caller only sees the concatenated result after every
worker has been joined.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Queue

from ..file_tree_model import NOTE_EXTENSION, walk_entries

logger = logging.getLogger(__name__)

MAX_MATCHES_PER_FILE = 5
WORK_QUEUE_SIZE = 100
_STOP = None


@dataclass(frozen=True)
class SearchMatch:
    path: Path
    line: int  # 1-based
    text: str


def default_worker_count() -> int:
    return max(1, os.cpu_count() or 1)


def iter_note_files(root: Path):
    for entry in walk_entries(root, files_only=True):
        if entry.name.endswith(NOTE_EXTENSION):
            yield entry.path


def search_file(path: Path, query_folded: str, max_matches: int = MAX_MATCHES_PER_FILE) -> list[SearchMatch]:
    """Return up to ``max_matches`` lines of ``path`` containing the query.

    ``query_folded`` must already be case-folded. Read errors are logged and
    produce an empty list.
    """
    matches: list[SearchMatch] = []
    try:
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            for line_number, line in enumerate(handle, start=1):
                if query_folded in line.casefold():
                    matches.append(SearchMatch(path=path, line=line_number, text=line.strip()))
                    if len(matches) >= max_matches:
                        break
    except OSError as exc:
        logger.debug("skipping unreadable file %s: %s", path, exc)
        return []
    return matches


def search_content(
    root: Path,
    query: str,
    *,
    workers: int | None = None,
    should_cancel: Callable[[], bool] | None = None,
) -> list[SearchMatch]:
    """Search every note below ``root`` for ``query`` (case-insensitive).

    Match order across files depends on scheduling; within one file matches
    keep line order. ``should_cancel`` is polled between files; once it
    returns true, workers stop taking new files and the walk ends early.
    """
    if not query:
        return []

    query_folded = query.casefold()
    worker_count = max(1, workers if workers is not None else default_worker_count())
    jobs: Queue[Path | None] = Queue(maxsize=WORK_QUEUE_SIZE)
    results: Queue[list[SearchMatch]] = Queue()

    def cancelled() -> bool:
        return should_cancel is not None and should_cancel()

    def feed_jobs() -> None:
        try:
            for path in iter_note_files(root):
                if cancelled():
                    break
                jobs.put(path)
        finally:
            for _ in range(worker_count):
                jobs.put(_STOP)

    def run_worker() -> None:
        while True:
            path = jobs.get()
            if path is _STOP:
                return
            if cancelled():
                continue
            file_matches = search_file(path, query_folded)
            if file_matches:
                results.put(file_matches)

    walker = threading.Thread(target=feed_jobs, name="notetree-content-walk", daemon=True)
    pool = [
        threading.Thread(target=run_worker, name=f"notetree-content-search-{idx}", daemon=True)
        for idx in range(worker_count)
    ]
    walker.start()
    for worker in pool:
        worker.start()
    walker.join()
    for worker in pool:
        worker.join()

    merged: list[SearchMatch] = []
    while True:
        try:
            merged.extend(results.get_nowait())
        except Empty:
            break
    logger.debug("content search for %r under %s: %d matches", query, root, len(merged))
    return merged


class ContentSearchRunner:
    """Run ``search_content`` off the event-loop thread.

    Each ``start`` bumps a generation number and cancels the previous run.
    Completions are queued as ``(generation, matches)`` and drained with
    ``poll``; callers discard generations that are no longer current.
    """

    def __init__(self, search: Callable[..., list[SearchMatch]] = search_content) -> None:
        self._search = search
        self._lock = threading.Lock()
        self._generation = 0
        self._cancel_event: threading.Event | None = None
        self._completions: Queue[tuple[int, list[SearchMatch]]] = Queue()
        self._worker: threading.Thread | None = None

    @property
    def generation(self) -> int:
        return self._generation

    def start(self, root: Path, query: str, generation: int | None = None) -> int:
        with self._lock:
            if self._cancel_event is not None:
                self._cancel_event.set()
            self._generation = generation if generation is not None else self._generation + 1
            run_generation = self._generation
            cancel_event = threading.Event()
            self._cancel_event = cancel_event

        def run() -> None:
            try:
                matches = self._search(root, query, should_cancel=cancel_event.is_set)
            except Exception:
                logger.exception("content search for %r failed", query)
                matches = []
            self._completions.put((run_generation, matches))

        worker = threading.Thread(
            target=run,
            name=f"notetree-content-search-run-{run_generation}",
            daemon=True,
        )
        self._worker = worker
        worker.start()
        return run_generation

    def cancel(self) -> None:
        with self._lock:
            if self._cancel_event is not None:
                self._cancel_event.set()
                self._cancel_event = None

    def poll(self, timeout_seconds: float = 0.0) -> list[tuple[int, list[SearchMatch]]]:
        """Drain finished searches; optionally wait briefly for the first one."""
        completed: list[tuple[int, list[SearchMatch]]] = []
        if timeout_seconds > 0:
            try:
                completed.append(self._completions.get(timeout=timeout_seconds))
            except Empty:
                return completed
        while True:
            try:
                completed.append(self._completions.get_nowait())
            except Empty:
                break
        return completed

    def wait(self, timeout_seconds: float | None = None) -> None:
        """Join the most recent worker thread (used by tests and shutdown)."""
        worker = self._worker
        if worker is not None:
            worker.join(timeout_seconds)
