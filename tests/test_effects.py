from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from notetree.search.fuzzy import build_tree_index
from notetree.session import EffectRunner
from notetree.session import events as ev


class BuildTreeIndexEffectTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        (self.root / "work").mkdir()
        (self.root / "work" / "b.md").write_text("b", encoding="utf-8")
        self.runner = EffectRunner(no_color=True)

    def test_missing_index_is_built(self) -> None:
        [event] = self.runner.run(ev.BuildTreeIndex(self.root))

        self.assertIsInstance(event, ev.TreeIndexBuilt)
        self.assertEqual(event.index.labels, ("work", "work/b.md"))

    def test_index_for_same_root_is_reused(self) -> None:
        current = build_tree_index(self.root)
        (self.root / "late.md").write_text("late", encoding="utf-8")

        [event] = self.runner.run(ev.BuildTreeIndex(self.root, current))

        self.assertIs(event.index, current)

    def test_index_for_another_root_is_rebuilt(self) -> None:
        current = build_tree_index(self.root / "work")

        [event] = self.runner.run(ev.BuildTreeIndex(self.root, current))

        self.assertIsNot(event.index, current)
        self.assertEqual(event.index.root, self.root)
        self.assertIn("work/b.md", event.index.labels)


if __name__ == "__main__":
    unittest.main()
