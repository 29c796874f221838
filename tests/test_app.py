from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from csvcols.app import Viewer, render_once, run_viewer
from csvcols.config import Config


class ViewerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "people.csv"
        self.path.write_text("id,name\n1,ann\n2,bob\n", encoding="utf-8")

    def viewer(self, **kwargs) -> Viewer:
        options = {"no_color": True, "width": 40, "height": 3}
        options.update(kwargs)
        return Viewer(self.path, Config(), **options)

    def test_render_once_plain(self) -> None:
        self.assertEqual(render_once(self.viewer()), "id,name\n1,ann\n2,bob\n")

    def test_render_once_clean_view(self) -> None:
        viewer = self.viewer()
        viewer.sync.set_clean_view(viewer.window, True)

        self.assertEqual(render_once(viewer), "id  name\n1   ann\n2   bob\n")

    def test_render_once_with_sticky_header(self) -> None:
        viewer = self.viewer(height=2)

        self.assertEqual(render_once(viewer, top=1), "id,name\n2,bob\n")

    def test_status_shows_header_controls_for_delimited_files(self) -> None:
        context = self.viewer().frame()

        self.assertEqual(context.status_right, "CSV hdr: [-] 1 [+]  [raw]  sep=','")
        self.assertTrue(context.status_left.endswith("people.csv (1:1/3)"))

    def test_prompt_text_replaces_message(self) -> None:
        viewer = self.viewer()
        viewer.keys.handle(":")
        viewer.keys.handle("s")

        self.assertEqual(viewer.frame().message, ":s")

    def test_non_delimited_file_uses_syntax_lines(self) -> None:
        path = Path(self._tmp.name) / "notes.md"
        path.write_text("# Title\n\nplain\n", encoding="utf-8")
        viewer = Viewer(path, Config(), no_color=True, width=40, height=3)

        context = viewer.frame()

        self.assertFalse(context.delimited)
        self.assertEqual(context.syntax_lines, ["# Title", "", "plain"])
        self.assertEqual(context.status_right, "│ q quit")

    def test_reload_picks_up_changes(self) -> None:
        viewer = self.viewer()
        version = viewer.buffer.version
        self.path.write_text("id,name\n1,annabelle\n", encoding="utf-8")

        self.assertEqual(viewer.reload(), "Reloaded")
        self.assertEqual(viewer.buffer.lines, ["id,name", "1,annabelle"])
        self.assertNotEqual(viewer.buffer.version, version)

    def test_reload_failure_is_reported(self) -> None:
        viewer = self.viewer()
        self.path.unlink()

        with self.assertLogs("csvcols.app", level="DEBUG"):
            message = viewer.reload()

        self.assertTrue(message.startswith("Reload failed"))
        self.assertEqual(viewer.buffer.line_count, 3)

    def test_run_viewer_handles_keys_until_quit(self) -> None:
        viewer = self.viewer()
        terminal = mock.MagicMock()
        with (
            mock.patch("csvcols.app.read_key", side_effect=["", "j", "C", "q"]),
            mock.patch("csvcols.app.write_frame") as write_frame,
            mock.patch("csvcols.app.shutil.get_terminal_size", return_value=os.terminal_size((30, 4))),
        ):
            run_viewer(viewer, terminal, stdin_fd=0)

        terminal.raw_mode.assert_called_once_with()
        self.assertEqual(write_frame.call_count, 3)
        self.assertEqual(viewer.window.cursor_line, 1)
        self.assertEqual(viewer.window.height, 3)
        self.assertIsNone(viewer.sync.registry.peek_window(viewer.window.id))
        self.assertEqual(viewer.sync.registry.buffer_ids(), [])


if __name__ == "__main__":
    unittest.main()
