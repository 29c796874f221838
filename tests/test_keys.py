from __future__ import annotations

import unittest

from csvcols.config import Config
from csvcols.document import Buffer, Window
from csvcols.keys import KeyHandler, ViewerState, next_field_start, previous_field_start
from csvcols.sync import Synchronizer


class FieldMotionTests(unittest.TestCase):
    def test_next_field_start(self) -> None:
        self.assertEqual(next_field_start("a,bb,c", ",", 10, 0), 2)
        self.assertEqual(next_field_start("a,bb,c", ",", 10, 2), 5)
        self.assertEqual(next_field_start("a,bb,c", ",", 10, 5), 5)

    def test_previous_field_start(self) -> None:
        self.assertEqual(previous_field_start("a,bb,c", ",", 10, 5), 2)
        self.assertEqual(previous_field_start("a,bb,c", ",", 10, 2), 0)


class KeyHandlerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.buffer = Buffer(name="t.csv", lines=["id,name", "1,ann", "2,bob", "3,cy"])
        self.window = Window(self.buffer, width=20, height=2)
        self.sync = Synchronizer(Config())
        self.state = ViewerState(self.window)
        self.reloads: list[int] = []
        self.handler = KeyHandler(self.state, self.sync, reload=self._reload)

    def _reload(self) -> str:
        self.reloads.append(1)
        return "Reloaded"

    def type_keys(self, *keys: str) -> bool:
        quit_requested = False
        for key in keys:
            quit_requested = self.handler.handle(key)
        return quit_requested

    def test_motion_keys(self) -> None:
        self.type_keys("j", "j")
        self.assertEqual(self.window.cursor, (2, 0))
        self.assertEqual(self.window.top, 1)

        self.type_keys("w")
        self.assertEqual(self.window.cursor, (2, 2))
        self.type_keys("b")
        self.assertEqual(self.window.cursor, (2, 0))
        self.type_keys("$")
        self.assertEqual(self.window.cursor, (2, 4))
        self.type_keys("G")
        self.assertEqual(self.window.cursor_line, 3)
        self.type_keys("g")
        self.assertEqual(self.window.cursor, (0, 3))

    def test_header_keys(self) -> None:
        self.type_keys("+", "+")
        self.assertEqual(self.sync.header_count(self.buffer), 3)
        self.assertEqual(self.state.message, "Header lines: 3")
        self.type_keys("-")
        self.assertEqual(self.sync.header_count(self.buffer), 2)
        self.type_keys("t")
        self.assertEqual(self.sync.header_count(self.buffer), 0)

    def test_clean_toggle_key(self) -> None:
        self.type_keys("C")
        self.assertTrue(self.sync.clean_active(self.buffer))
        self.assertEqual(self.state.message, "Clean view: on")

    def test_reload_key(self) -> None:
        self.type_keys("R")
        self.assertEqual(self.reloads, [1])
        self.assertEqual(self.state.message, "Reloaded")

    def test_prompt_runs_command(self) -> None:
        self.type_keys(":", *"header 4")
        self.assertTrue(self.state.prompt_active)
        self.assertEqual(self.state.prompt_text, "header 4")

        self.assertFalse(self.type_keys("ENTER"))
        self.assertFalse(self.state.prompt_active)
        self.assertEqual(self.sync.header_count(self.buffer), 4)

    def test_prompt_escape_and_backspace(self) -> None:
        self.type_keys(":", "h", "BACKSPACE")
        self.assertEqual(self.state.prompt_text, "")
        self.assertTrue(self.state.prompt_active)
        self.type_keys("BACKSPACE")
        self.assertFalse(self.state.prompt_active)

        self.type_keys(":", "x", "ESC")
        self.assertFalse(self.state.prompt_active)
        self.assertEqual(self.state.message, "")

    def test_quit_keys(self) -> None:
        self.assertTrue(self.type_keys("q"))
        self.assertTrue(self.type_keys("CTRL_C"))
        self.assertTrue(self.type_keys(":", "q", "ENTER"))
        self.assertFalse(self.type_keys("z"))

    def test_warning_is_cleared_by_next_key(self) -> None:
        self.type_keys(":", *"nope", "ENTER")
        self.assertTrue(self.state.message_is_warning)
        self.type_keys("j")
        self.assertEqual(self.state.message, "")
        self.assertFalse(self.state.message_is_warning)

    def test_unbound_key_keeps_message(self) -> None:
        self.type_keys("+")
        self.assertFalse(self.type_keys("z"))
        self.assertEqual(self.state.message, "Header lines: 2")


if __name__ == "__main__":
    unittest.main()
