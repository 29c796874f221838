from __future__ import annotations

import unittest

from csvcols.fields import (
    EOL,
    FieldRange,
    cursor_column_index,
    field_ranges,
    field_text,
    normalize_cell,
    normalized_cells,
)


class FieldRangeTests(unittest.TestCase):
    def test_quoted_separator_stays_inside_field(self) -> None:
        line = 'a,b,"c,d",e'
        ranges = field_ranges(line, ",", 10)

        self.assertEqual(ranges, [FieldRange(0, 1), FieldRange(2, 3), FieldRange(4, 9), FieldRange(10, EOL)])
        self.assertEqual(normalized_cells(line, ",", 10), ["a", "b", "c,d", "e"])

    def test_doubled_quote_normalizes_to_single_quote(self) -> None:
        self.assertEqual(normalized_cells('a,"b""c",d', ",", 10), ["a", 'b"c', "d"])

    def test_ranges_tile_line_including_empty_fields(self) -> None:
        line = "a,,b"
        ranges = field_ranges(line, ",", 10)

        self.assertEqual(ranges, [FieldRange(0, 1), FieldRange(2, 2), FieldRange(3, EOL)])
        self.assertEqual([field_text(line, r) for r in ranges], ["a", "", "b"])

    def test_unterminated_quote_runs_to_end_of_line(self) -> None:
        ranges = field_ranges('a,"b,c', ",", 10)

        self.assertEqual(ranges, [FieldRange(0, 1), FieldRange(2, EOL)])

    def test_empty_line_is_one_empty_field(self) -> None:
        self.assertEqual(field_ranges("", ",", 10), [FieldRange(0, EOL)])

    def test_column_cap_stops_scanning(self) -> None:
        self.assertEqual(field_ranges("a,b,c,d", ",", 2), [FieldRange(0, 1), FieldRange(2, 3)])

    def test_column_cap_below_one_behaves_like_one(self) -> None:
        self.assertEqual(field_ranges("a,b", ",", 0), [FieldRange(0, 1)])

    def test_tab_separator(self) -> None:
        self.assertEqual(normalized_cells("x\ty\tz", "\t", 10), ["x", "y", "z"])


class NormalizeCellTests(unittest.TestCase):
    def test_trims_whitespace_and_one_quote_layer(self) -> None:
        self.assertEqual(normalize_cell('  "hello"  '), "hello")
        self.assertEqual(normalize_cell('""'), "")

    def test_unbalanced_quotes_are_only_trimmed(self) -> None:
        self.assertEqual(normalize_cell(' "abc '), '"abc')
        self.assertEqual(normalize_cell('"'), '"')


class CursorColumnTests(unittest.TestCase):
    def test_offset_on_separator_belongs_to_field_ending_there(self) -> None:
        self.assertEqual(cursor_column_index("ab,cd", ",", 10, 2), 1)

    def test_offset_after_separator_belongs_to_next_field(self) -> None:
        self.assertEqual(cursor_column_index("ab,cd", ",", 10, 3), 2)
        self.assertEqual(cursor_column_index("ab,cd", ",", 10, 40), 2)

    def test_first_offset_is_first_column(self) -> None:
        self.assertEqual(cursor_column_index("ab,cd", ",", 10, 0), 1)


if __name__ == "__main__":
    unittest.main()
