from __future__ import annotations

import unittest

from csvcols.document import Buffer
from csvcols.state import BufferState
from csvcols.widths import body_widths, column_widths, header_widths, merge_widths


class ColumnWidthTests(unittest.TestCase):
    def test_widths_use_normalized_cells(self) -> None:
        self.assertEqual(column_widths(["a,bb", '"ccc" ,d'], ",", 10), {1: 3, 2: 2})

    def test_wide_characters_take_two_cells(self) -> None:
        self.assertEqual(column_widths(["日本,x"], ",", 10), {1: 4, 2: 1})

    def test_merge_is_columnwise_maximum(self) -> None:
        a = {1: 2, 2: 7}
        b = {1: 5, 3: 1}
        merged = merge_widths(a, b)

        self.assertEqual(merged, {1: 5, 2: 7, 3: 1})
        for table in (a, b):
            for index, width in table.items():
                self.assertGreaterEqual(merged[index], width)

    def test_header_lines_without_separator_are_skipped(self) -> None:
        self.assertEqual(header_widths(["a long title line", "a,bbbb"], ",", 10), {1: 1, 2: 4})


class BodyWidthCacheTests(unittest.TestCase):
    def test_full_scan_is_reused_until_content_version_changes(self) -> None:
        buffer = Buffer(name="t.csv", lines=["a,b", "ccc,d"])
        state = BufferState()

        first = body_widths(buffer, state, ",", 10, 0, 1, True)
        self.assertEqual(first, {1: 3, 2: 1})

        # Without a version bump the cached table is returned as is.
        buffer.lines.append("eeeeee,f")
        self.assertEqual(body_widths(buffer, state, ",", 10, 0, 1, True), {1: 3, 2: 1})

        buffer.replace_lines(0, 0, [])
        self.assertEqual(body_widths(buffer, state, ",", 10, 0, 1, True), {1: 6, 2: 1})

    def test_windowed_scan_only_measures_visible_lines(self) -> None:
        buffer = Buffer(name="t.csv", lines=["aaaaaa,b", "c,dd", "e,f"])
        state = BufferState()

        self.assertEqual(body_widths(buffer, state, ",", 10, 1, 3, False), {1: 1, 2: 2})
        self.assertEqual(body_widths(buffer, state, ",", 10, 0, 1, False), {1: 6, 2: 1})


if __name__ == "__main__":
    unittest.main()
