from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from csvcols.watch import FileWatch, path_signature


class FileWatchTests(unittest.TestCase):
    def test_signature_reports_missing_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(path_signature(Path(tmp) / "nope.csv"), ("missing", 0, 0))

    def test_change_is_reported_once(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "t.csv"
            path.write_text("a,b\n", encoding="utf-8")
            watch = FileWatch(path)

            self.assertFalse(watch.changed())
            path.write_text("a,b\nc,d\n", encoding="utf-8")
            self.assertTrue(watch.changed())
            self.assertFalse(watch.changed())

    def test_deleted_file_is_not_a_reloadable_change(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "t.csv"
            path.write_text("a,b\n", encoding="utf-8")
            watch = FileWatch(path)
            path.unlink()

            self.assertFalse(watch.changed())

    def test_mark_seen_absorbs_pending_change(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "t.csv"
            path.write_text("a\n", encoding="utf-8")
            watch = FileWatch(path)
            path.write_text("abc\n", encoding="utf-8")
            watch.mark_seen()

            self.assertFalse(watch.changed())


if __name__ == "__main__":
    unittest.main()
