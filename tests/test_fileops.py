from __future__ import annotations

import errno
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from notetree import fileops
from notetree.fileops import ClipboardMode, FileClipboard


class NameValidationTests(unittest.TestCase):
    def test_validate_name_rejects_unusable_names(self) -> None:
        self.assertEqual(fileops.validate_name("   "), "Name cannot be empty")
        self.assertIsNotNone(fileops.validate_name(".."))
        self.assertIsNotNone(fileops.validate_name("a/b"))
        self.assertIsNone(fileops.validate_name(" ideas "))

    def test_note_filename_adds_extension_only_when_missing(self) -> None:
        self.assertEqual(fileops.note_filename("idea"), "idea.md")
        self.assertEqual(fileops.note_filename("todo.txt"), "todo.txt")


class CreateTests(unittest.TestCase):
    def test_create_note_writes_title_and_body(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)

            result = fileops.create_note(root, "idea", "  first thought  ")

            self.assertTrue(result.success)
            self.assertEqual(result.path, root / "idea.md")
            self.assertEqual((root / "idea.md").read_text(encoding="utf-8"), "# idea\n\nfirst thought\n")

    def test_create_note_without_body_writes_heading_only(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            fileops.create_note(root, "blank")
            self.assertEqual((root / "blank.md").read_text(encoding="utf-8"), "# blank\n\n")

    def test_create_note_refuses_to_overwrite(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "idea.md").write_text("keep", encoding="utf-8")

            with self.assertLogs("notetree.fileops", level="WARNING"):
                result = fileops.create_note(root, "idea")

            self.assertFalse(result.success)
            self.assertTrue(result.message.startswith("Error: "))
            self.assertEqual((root / "idea.md").read_text(encoding="utf-8"), "keep")

    def test_create_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            result = fileops.create_directory(root, "projects")
            self.assertTrue(result.success)
            self.assertTrue((root / "projects").is_dir())


class RenameDeleteTests(unittest.TestCase):
    def test_rename_refuses_existing_target(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a.md").write_text("a", encoding="utf-8")
            (root / "b.md").write_text("b", encoding="utf-8")

            result = fileops.rename_entry(root / "a.md", "b.md")

            self.assertFalse(result.success)
            self.assertEqual(result.message, "Already exists: b.md")
            self.assertTrue((root / "a.md").exists())

    def test_rename_moves_entry(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a.md").write_text("a", encoding="utf-8")

            result = fileops.rename_entry(root / "a.md", "c.md")

            self.assertTrue(result.success)
            self.assertEqual(result.path, root / "c.md")
            self.assertFalse((root / "a.md").exists())

    def test_delete_removes_directory_trees(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "d" / "e").mkdir(parents=True)
            (root / "d" / "e" / "n.md").write_text("n", encoding="utf-8")

            result = fileops.delete_entry(root / "d")

            self.assertTrue(result.success)
            self.assertFalse((root / "d").exists())

    def test_delete_missing_entry_reports_failure(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertLogs("notetree.fileops", level="WARNING"):
                result = fileops.delete_entry(Path(tmp) / "gone.md")
            self.assertFalse(result.success)


class PasteTests(unittest.TestCase):
    def test_paste_copy_keeps_source(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "dest").mkdir()
            source = root / "a.md"
            source.write_text("a", encoding="utf-8")

            result = fileops.paste_entry(FileClipboard(source, ClipboardMode.COPY), root / "dest")

            self.assertTrue(result.success)
            self.assertEqual(result.message, "Copied: a.md")
            self.assertTrue(source.exists())
            self.assertEqual((root / "dest" / "a.md").read_text(encoding="utf-8"), "a")

    def test_paste_cut_moves_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "dest").mkdir()
            (root / "folder").mkdir()
            (root / "folder" / "n.md").write_text("n", encoding="utf-8")

            result = fileops.paste_entry(FileClipboard(root / "folder", ClipboardMode.CUT), root / "dest")

            self.assertTrue(result.success)
            self.assertEqual(result.path, root / "dest" / "folder")
            self.assertFalse((root / "folder").exists())
            self.assertTrue((root / "dest" / "folder" / "n.md").exists())

    def test_paste_cut_falls_back_to_copy_and_delete(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "dest").mkdir()
            source = root / "a.md"
            source.write_text("a", encoding="utf-8")

            with mock.patch.object(Path, "rename", side_effect=OSError(errno.EXDEV, "Invalid cross-device link")):
                result = fileops.paste_entry(FileClipboard(source, ClipboardMode.CUT), root / "dest")

            self.assertTrue(result.success)
            self.assertFalse(source.exists())
            self.assertTrue((root / "dest" / "a.md").exists())

    def test_failed_move_on_same_filesystem_keeps_source(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "dest").mkdir()
            source = root / "a.md"
            source.write_text("a", encoding="utf-8")

            with mock.patch.object(Path, "rename", side_effect=OSError(errno.EACCES, "Permission denied")):
                with self.assertLogs("notetree.fileops", level="WARNING"):
                    result = fileops.paste_entry(FileClipboard(source, ClipboardMode.CUT), root / "dest")

            self.assertFalse(result.success)
            self.assertTrue(source.exists())
            self.assertFalse((root / "dest" / "a.md").exists())

    def test_directory_cannot_be_pasted_into_itself(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            notes = Path(tmp) / "notes"
            (notes / "sub").mkdir(parents=True)
            (notes / "keep.md").write_text("keep", encoding="utf-8")

            for mode in (ClipboardMode.CUT, ClipboardMode.COPY):
                for destination in (notes, notes / "sub"):
                    result = fileops.paste_entry(FileClipboard(notes, mode), destination)

                    self.assertFalse(result.success)
                    self.assertEqual(result.message, "Cannot paste a directory into itself")

            self.assertEqual((notes / "keep.md").read_text(encoding="utf-8"), "keep")
            self.assertEqual(sorted(path.name for path in notes.iterdir()), ["keep.md", "sub"])

    def test_paste_never_overwrites(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "dest").mkdir()
            (root / "dest" / "a.md").write_text("old", encoding="utf-8")
            (root / "a.md").write_text("new", encoding="utf-8")

            result = fileops.paste_entry(FileClipboard(root / "a.md", ClipboardMode.COPY), root / "dest")

            self.assertFalse(result.success)
            self.assertEqual(result.message, "File already exists: a.md")
            self.assertEqual((root / "dest" / "a.md").read_text(encoding="utf-8"), "old")

    def test_paste_with_empty_clipboard(self) -> None:
        result = fileops.paste_entry(None, Path("/notes"))
        self.assertFalse(result.success)
        self.assertEqual(result.message, "Clipboard is empty")


class CopyMessageTests(unittest.TestCase):
    def test_copy_messages(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            note = Path(tmp) / "n.md"
            note.write_text("12345", encoding="utf-8")

            self.assertEqual(fileops.copy_path_message(note), f"Path: {note}")
            self.assertEqual(fileops.copy_content_message(note), "Content copied (5 bytes)")
            self.assertTrue(fileops.copy_content_message(Path(tmp) / "missing.md").startswith("Error: "))


if __name__ == "__main__":
    unittest.main()
