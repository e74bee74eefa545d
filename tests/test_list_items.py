from __future__ import annotations

import time
import unittest
from pathlib import Path

from notetree.file_tree_model import Entry
from notetree.list_items import FileItem, LinkItem, SearchMatchItem, format_age, format_size
from notetree.notes.wikilinks import WikiLink
from notetree.search.content import SearchMatch

DAY = 24 * 60 * 60


class FormattingTests(unittest.TestCase):
    def test_format_size_units(self) -> None:
        self.assertEqual(format_size(512), "512 B")
        self.assertEqual(format_size(2048), "2.0 KB")
        self.assertEqual(format_size(3 * 1024 * 1024), "3.0 MB")

    def test_format_age_buckets(self) -> None:
        now = 1_700_000_000.0
        self.assertEqual(format_age(now - 100, now), "today")
        self.assertEqual(format_age(now - 3 * DAY, now), "3 day(s) ago")
        self.assertEqual(format_age(now - 14 * DAY, now), "2 week(s) ago")
        self.assertEqual(format_age(now - 90 * DAY, now), "3 month(s) ago")
        old = now - 400 * DAY
        self.assertEqual(format_age(old, now), time.strftime("%d/%m/%Y", time.localtime(old)))


class ListItemTests(unittest.TestCase):
    def test_file_item_variants(self) -> None:
        folder = FileItem(Entry(name="work", path=Path("/n/work"), is_dir=True))
        note = FileItem(Entry(name="a.md", path=Path("/n/a.md"), is_dir=False, size=2048, mtime=time.time()))
        other = FileItem(Entry(name="a.png", path=Path("/n/a.png"), is_dir=False))
        broken = FileItem(Entry(name="[Error: denied]", path=Path("/n"), is_dir=False, error="denied"))

        self.assertEqual(folder.title, "📁 work/")
        self.assertEqual(folder.description, "Directory")
        self.assertEqual(note.title, "📝 a.md")
        self.assertEqual(note.description, "2.0 KB • today")
        self.assertEqual(other.title, "📄 a.png")
        self.assertEqual(broken.title, "[Error: denied]")
        self.assertEqual(note.filter_key, "a.md")
        self.assertEqual(note.path, Path("/n/a.md"))

    def test_link_item_offers_creation_when_missing(self) -> None:
        resolved = LinkItem(WikiLink("Target", Path("/n/Target.md")))
        missing = LinkItem(WikiLink("Nope"))

        self.assertEqual(resolved.title, "🔗 Target")
        self.assertEqual(resolved.description, "/n/Target.md")
        self.assertEqual(missing.title, "❓ Nope (missing)")
        self.assertEqual(missing.description, "Press Enter to create this note")
        self.assertIsNone(missing.path)

    def test_search_match_item_truncates_long_lines(self) -> None:
        item = SearchMatchItem(SearchMatch(path=Path("/n/a.md"), line=12, text="x" * 100))

        self.assertEqual(item.title, "📝 a.md:12")
        self.assertEqual(item.description, "x" * 80 + "...")
        self.assertEqual(item.filter_key, "x" * 100)


if __name__ == "__main__":
    unittest.main()
