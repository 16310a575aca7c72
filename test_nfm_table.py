# test_nfm_table.py
#
# Run:
#   python -m unittest -v

import unittest

from nfm_cursor import Cursor
from nfm_table import TableCell, parse_cell_flags


class TestParseCellFlags(unittest.TestCase):
    # ---------- helpers ----------
    def parse(self, text: str) -> tuple[TableCell, str]:
        """Parse flags from `text` (the '|' already consumed); return cell and leftover."""
        cursor = Cursor(text)
        cell = parse_cell_flags(cursor)
        return cell, cursor.text

    # ---------- defaults ----------
    def test_plain_cell_is_td_with_defaults(self):
        cell, rest = self.parse(" plain")
        self.assertEqual(cell, TableCell())
        self.assertEqual(rest, "plain")
        self.assertEqual(
            cell.open_tag,
            '<td align="center" valign="baseline" colspan="1" rowspan="1">',
        )
        self.assertEqual(cell.close_tag, "</td>")

    # ---------- role / align / valign ----------
    def test_column_header_right_top_with_rowspan(self):
        cell, rest = self.parse("=$t,2 Header")
        self.assertEqual(rest, "Header")
        self.assertEqual(
            cell.open_tag,
            '<th scope="col" align="right" valign="top" colspan="1" rowspan="2">',
        )
        self.assertEqual(cell.close_tag, "</th>")

    def test_row_header_left_middle_with_colspan(self):
        cell, rest = self.parse("-^m3 x")
        self.assertEqual((cell.element, cell.scope), ("th", "row"))
        self.assertEqual((cell.align, cell.valign, cell.colspan), ("left", "middle", "3"))
        self.assertEqual(rest, "x")

    def test_bottom_valign(self):
        cell, _ = self.parse("b x")
        self.assertEqual(cell.valign, "bottom")

    def test_underscores_keep_defaults_in_each_position(self):
        cell, rest = self.parse("___2,_3 x")
        self.assertEqual(cell.element, "td")
        self.assertEqual((cell.align, cell.valign), ("center", "baseline"))
        self.assertEqual((cell.colspan, cell.rowspan), ("2", "3"))
        self.assertEqual(rest, "x")

    def test_flag_letters_are_read_even_when_they_start_a_word(self):
        cell, rest = self.parse("bold")
        self.assertEqual(cell.valign, "bottom")
        self.assertEqual(rest, "old")

    # ---------- spans ----------
    def test_leading_zero_and_underscore_placeholders_are_skipped(self):
        cell, rest = self.parse("_0012 x")
        self.assertEqual(cell.colspan, "12")
        self.assertEqual(rest, "x")

    def test_zero_after_a_digit_is_kept(self):
        cell, _ = self.parse("10 x")
        self.assertEqual(cell.colspan, "10")

    def test_placeholder_only_spans_default_to_one(self):
        cell, rest = self.parse("01,00 x")
        self.assertEqual((cell.colspan, cell.rowspan), ("1", "1"))
        self.assertEqual(rest, "x")

    def test_underscore_after_digits_ends_the_span(self):
        cell, rest = self.parse("2_3 x")
        self.assertEqual(cell.colspan, "2")
        self.assertEqual(rest, "_3 x")

    def test_comma_without_digits_keeps_default_rowspan(self):
        cell, rest = self.parse(",x")
        self.assertEqual(cell.rowspan, "1")
        self.assertEqual(rest, "x")

    def test_empty_input(self):
        cell, rest = self.parse("")
        self.assertEqual(cell, TableCell())
        self.assertEqual(rest, "")


if __name__ == "__main__":
    unittest.main()
