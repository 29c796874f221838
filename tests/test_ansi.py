from __future__ import annotations

import unittest

from csvcols.ansi import char_display_width, display_width, slice_ansi_line


class DisplayWidthTests(unittest.TestCase):
    def test_character_widths(self) -> None:
        self.assertEqual(char_display_width("a"), 1)
        self.assertEqual(char_display_width("界"), 2)
        self.assertEqual(char_display_width("\u0301"), 0)
        self.assertEqual(char_display_width("\t", 3), 5)

    def test_display_width_expands_tabs_from_start_column(self) -> None:
        self.assertEqual(display_width("a\tb"), 9)
        self.assertEqual(display_width("\t", start_col=6), 2)
        self.assertEqual(display_width("日本"), 4)


class SliceAnsiLineTests(unittest.TestCase):
    def test_slice_keeps_active_color(self) -> None:
        text = "\x1b[31mabcdef\x1b[0m"
        self.assertEqual(slice_ansi_line(text, 2, 3), "\x1b[31mcde")

    def test_wide_character_never_split(self) -> None:
        self.assertEqual(slice_ansi_line("ab界cd", 0, 3), "ab")

    def test_empty_window(self) -> None:
        self.assertEqual(slice_ansi_line("abc", 0, 0), "")


if __name__ == "__main__":
    unittest.main()
