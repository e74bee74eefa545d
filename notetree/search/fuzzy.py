from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..file_tree_model import Entry, walk_entries


@dataclass(frozen=True)
class TreeIndex:
    """Flat recursive listing of every entry below ``root``.

    ``labels[i]`` is the root-relative POSIX path of ``entries[i]``; both
    tuples share index order (depth-first pre-order).
    """

    root: Path
    entries: tuple[Entry, ...]
    labels: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.entries)


def to_root_relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def build_tree_index(root: Path) -> TreeIndex:
    entries = tuple(walk_entries(root))
    labels = tuple(to_root_relative(entry.path, root) for entry in entries)
    return TreeIndex(root=root, entries=entries, labels=labels)


def ensure_indexed(index: TreeIndex | None, root: Path) -> TreeIndex:
    """Return ``index`` when it already covers ``root``, else build a new one."""
    if index is not None and index.root == root:
        return index
    return build_tree_index(root)


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score ``query`` as an in-order subsequence of ``candidate``.

    Returns ``None`` when some query character cannot be matched in order.
    Contiguous runs and matches at segment starts score higher; gaps and
    long candidates are penalized.
    """
    if not query:
        return 0
    query_folded = query.casefold()
    candidate_folded = candidate.casefold()

    score = 0
    prev_idx = -1
    run = 0
    for needle in query_folded:
        idx = candidate_folded.find(needle, prev_idx + 1)
        if idx < 0:
            return None
        if idx == prev_idx + 1:
            run += 1
            score += 20 + min(16, run * 4)
        else:
            gap = idx - prev_idx - 1
            run = 0
            score -= min(40, gap * 2)
        if idx == 0 or candidate_folded[idx - 1] in "/_- .":
            score += 35
        prev_idx = idx

    score -= len(candidate_folded) // 5
    return score


def fuzzy_match_labels(query: str, labels: tuple[str, ...] | list[str]) -> list[tuple[int, int]]:
    """Return ``(label_index, score)`` for matching labels, best first.

    Equal scores keep label order.
    """
    scored: list[tuple[int, int]] = []
    for idx, label in enumerate(labels):
        score = fuzzy_score(query, label)
        if score is None:
            continue
        scored.append((idx, score))
    scored.sort(key=lambda item: -item[1])
    return scored


def search_index(index: TreeIndex, query: str) -> list[Entry]:
    if not query:
        return list(index.entries)
    return [index.entries[idx] for idx, _score in fuzzy_match_labels(query, index.labels)]
