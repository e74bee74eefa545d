"""Search package exports.

Combines the recursive tree index with fuzzy ranking and the parallel
content-search engine in one import surface.
"""

from __future__ import annotations

from .content import (
    MAX_MATCHES_PER_FILE,
    ContentSearchRunner,
    SearchMatch,
    search_content,
    search_file,
)
from .fuzzy import (
    TreeIndex,
    build_tree_index,
    ensure_indexed,
    fuzzy_match_labels,
    fuzzy_score,
    search_index,
    to_root_relative,
)

__all__ = [
    "MAX_MATCHES_PER_FILE",
    "ContentSearchRunner",
    "SearchMatch",
    "search_content",
    "search_file",
    "TreeIndex",
    "build_tree_index",
    "ensure_indexed",
    "fuzzy_match_labels",
    "fuzzy_score",
    "search_index",
    "to_root_relative",
]
