from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from notetree.config import SavedSession, Settings
from notetree.session import EffectRunner, SessionController, ViewMode, new_session
from notetree.session.state import ContentSearchModal, LinksModal


class ControllerTestCase(unittest.TestCase):
    """Drive a real session over a small notes tree on disk."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name).resolve()
        (self.root / "journal").mkdir()
        (self.root / "work").mkdir()
        (self.root / "a.md").write_text("# A\n\nsee [[b]] and [[ghost]]\n", encoding="utf-8")
        (self.root / "work" / "b.md").write_text("todo item\nsecond line\n", encoding="utf-8")
        (self.root / "work" / "c.txt").write_text("todo but not a note\n", encoding="utf-8")

        self.now = 0.0
        self.edited: list[Path] = []
        self.session = new_session(self.root, Settings(), SavedSession())
        self.runner = EffectRunner(launch_editor=self._fake_editor, no_color=True)
        self.addCleanup(self.runner.content_search.cancel)
        self.controller = SessionController(self.session, self.runner, clock=lambda: self.now)

    def _fake_editor(self, path: Path) -> str | None:
        self.edited.append(path)
        path.write_text("# A\n\nrewritten\n", encoding="utf-8")
        return None

    def press(self, *keys: str) -> None:
        for key in keys:
            self.controller.press(key)

    def type_text(self, text: str) -> None:
        self.press(*text)

    def names(self) -> list[str]:
        return [entry.name for entry in self.session.entries]

    def selected_name(self) -> str:
        entry = self.session.selected_entry()
        assert entry is not None
        return entry.name


class NavigationTests(ControllerTestCase):
    def test_home_screen_then_browse(self) -> None:
        self.assertIs(self.session.mode, ViewMode.HOME)

        self.press("ENTER")

        self.assertIs(self.session.mode, ViewMode.BROWSER)
        self.assertEqual(self.names(), ["a.md", "journal", "work"])

    def test_back_then_new_visit_drops_forward_history(self) -> None:
        self.press("ENTER", "G", "ENTER")
        self.assertEqual(self.session.current_dir, self.root / "work")
        self.assertEqual(self.names(), ["b.md", "c.txt"])

        self.press("CTRL_O")
        self.assertEqual(self.session.current_dir, self.root)

        self.press("j", "ENTER")
        self.assertEqual(self.session.current_dir, self.root / "journal")
        self.assertEqual(self.session.history.paths, [self.root, self.root / "journal"])

        self.press("TAB")
        self.assertEqual(self.session.current_dir, self.root / "journal")

    def test_parent_reselects_child_directory(self) -> None:
        self.press("ENTER", "G", "ENTER", "h")

        self.assertEqual(self.session.current_dir, self.root)
        self.assertEqual(self.selected_name(), "work")

    def test_moving_onto_note_renders_preview(self) -> None:
        self.press("ENTER", "j", "k")

        self.assertEqual(self.session.note_path, self.root / "a.md")
        self.assertIn(f"[[b]]({self.root / 'work' / 'b.md'})", self.session.preview)
        self.assertIn("[[ghost]](missing)", self.session.preview)


class FileOperationTests(ControllerTestCase):
    def test_create_rename_delete_cycle(self) -> None:
        self.press("ENTER", "n")
        self.type_text("idea")
        self.press("ENTER")
        self.type_text("first")
        self.press("CTRL_S")

        created = self.root / "idea.md"
        self.assertEqual(created.read_text(encoding="utf-8"), "# idea\n\nfirst\n")
        self.assertEqual(self.session.status, "Created: idea.md")
        self.assertEqual(self.selected_name(), "idea.md")
        self.assertEqual(self.session.note_path, created)

        self.press("r", *["BACKSPACE"] * len("idea.md"))
        self.type_text("plan.md")
        self.press("ENTER")

        self.assertFalse(created.exists())
        self.assertTrue((self.root / "plan.md").exists())
        self.assertEqual(self.selected_name(), "plan.md")

        self.press("D", "y")

        self.assertFalse((self.root / "plan.md").exists())
        self.assertEqual(self.names(), ["a.md", "journal", "work"])
        self.assertEqual(self.session.status, "Deleted: plan.md")

    def test_failed_rename_keeps_tree_and_bookmarks(self) -> None:
        self.press("ENTER", "b", "r", *["BACKSPACE"] * len("a.md"))
        self.type_text("journal")
        self.press("ENTER")

        self.assertEqual(self.session.status, "Already exists: journal")
        self.assertTrue((self.root / "a.md").exists())
        self.assertEqual(self.session.bookmarks, [self.root / "a.md"])

    def test_cut_and_paste_into_subdirectory(self) -> None:
        self.press("ENTER", "x", "G", "ENTER", "p")

        moved = self.root / "work" / "a.md"
        self.assertTrue(moved.exists())
        self.assertFalse((self.root / "a.md").exists())
        self.assertIsNone(self.session.clipboard)
        self.assertEqual(self.selected_name(), "a.md")

    def test_editor_round_trip_refreshes_preview(self) -> None:
        self.press("ENTER", "j", "k")
        self.assertIn("see", self.session.preview)

        self.press("e")

        self.assertEqual(self.edited, [self.root / "a.md"])
        self.assertEqual(self.session.note_path, self.root / "a.md")
        self.assertIn("rewritten", self.session.preview)

    def test_missing_link_target_is_created_in_current_directory(self) -> None:
        self.press("ENTER", "j", "k", "L", "j", "ENTER")

        created = self.root / "ghost.md"
        self.assertTrue(created.exists())
        self.assertEqual(self.session.recent_files[0], created)


class LinkAndSearchTests(ControllerTestCase):
    def test_following_a_link_across_directories(self) -> None:
        self.press("ENTER", "j", "k", "L")
        self.assertIsInstance(self.session.modal, LinksModal)

        self.press("ENTER")

        self.assertEqual(self.session.current_dir, self.root / "work")
        self.assertEqual(self.selected_name(), "b.md")
        self.assertIn("todo item", self.session.preview)

    def test_list_search_builds_index_on_demand(self) -> None:
        self.press("ENTER", "/")
        self.assertIsNotNone(self.session.tree_index)

        self.type_text("wb")
        self.press("ENTER")

        self.assertEqual(self.session.current_dir, self.root / "work")
        self.assertEqual(self.selected_name(), "b.md")

    def test_content_search_end_to_end(self) -> None:
        self.press("ENTER", "S")
        self.type_text("TODO")
        self.press("ENTER")

        self.runner.content_search.wait(5.0)
        self.assertTrue(self.controller.poll_background(1.0))

        modal = self.session.modal
        assert isinstance(modal, ContentSearchModal)
        self.assertFalse(modal.running)
        self.assertEqual([(match.path.name, match.line) for match in modal.results], [("b.md", 1)])

        self.press("ENTER")
        self.assertEqual(self.session.current_dir, self.root / "work")
        self.assertEqual(self.selected_name(), "b.md")


class StatusExpiryTests(ControllerTestCase):
    def test_status_clears_after_timeout(self) -> None:
        self.press("ENTER", "y")
        self.assertEqual(self.session.status, f"Path: {self.root / 'a.md'}")

        self.now = 1.0
        self.assertFalse(self.controller.poll_background())
        self.assertTrue(self.session.status)

        self.now = 3.5
        self.assertTrue(self.controller.poll_background())
        self.assertEqual(self.session.status, "")

    def test_quit_finishes_controller(self) -> None:
        self.press("ENTER", "q")
        self.assertTrue(self.controller.finished)


if __name__ == "__main__":
    unittest.main()
