#!/usr/bin/env python3
from __future__ import annotations

from dataclasses import dataclass

from nfm_cursor import Cursor

ROLE_FLAGS = {
    "=": ("th", "col"),
    "-": ("th", "row"),
}
ALIGN_FLAGS = {
    "$": "right",
    "^": "left",
}
VALIGN_FLAGS = {
    "t": "top",
    "m": "middle",
    "b": "bottom",
}
# Explicit "use the default" marker, accepted in every flag position.
DEFAULT_FLAG = "_"


@dataclass
class TableCell:
    """
    Attributes of one table cell, parsed from the flags right after its `|`.

    Example:
        '|=$t,2 Header'
    ->  TableCell(element='th', scope='col', align='right', valign='top',
                  colspan='1', rowspan='2')
    """
    element: str = "td"
    scope: str = ""
    align: str = "center"
    valign: str = "baseline"
    colspan: str = "1"
    rowspan: str = "1"

    @property
    def open_tag(self) -> str:
        attrs = (
            f'align="{self.align}" valign="{self.valign}" '
            f'colspan="{self.colspan}" rowspan="{self.rowspan}"'
        )
        if self.element == "th":
            return f'<th scope="{self.scope}" {attrs}>'
        return f"<td {attrs}>"

    @property
    def close_tag(self) -> str:
        return f"</{self.element}>"


def _parse_span(cursor: Cursor) -> str:
    """
    Parse a column/row span run.

    Digits accumulate literally. Before the first digit, '_' and '0' are
    placeholders and are skipped. An empty run means the default of "1".
    """
    if not (cursor.starts_with(DEFAULT_FLAG) or cursor.starts_with("0") or cursor.starts_with_digit()):
        return "1"

    span = ""
    while not cursor.is_empty():
        if not span and (cursor.starts_with(DEFAULT_FLAG) or cursor.starts_with("0")):
            cursor.advance(1)
        elif cursor.starts_with_digit():
            span += cursor.consume(1)
        else:
            break

    return span or "1"


def _take_flag(cursor: Cursor, flags: dict) -> object | None:
    for marker, value in flags.items():
        if cursor.starts_with(marker):
            cursor.advance(1)
            return value
    if cursor.starts_with(DEFAULT_FLAG):
        cursor.advance(1)
    return None


def parse_cell_flags(cursor: Cursor) -> TableCell:
    """
    Parse the cell flag micro-syntax at the cursor (the `|` already consumed).

    Order: role, align, valign, colspan, then ',' + rowspan. Leading spaces
    before the cell content are trimmed afterwards.
    """
    cell = TableCell()

    role = _take_flag(cursor, ROLE_FLAGS)
    if role is not None:
        cell.element, cell.scope = role

    align = _take_flag(cursor, ALIGN_FLAGS)
    if align is not None:
        cell.align = align

    valign = _take_flag(cursor, VALIGN_FLAGS)
    if valign is not None:
        cell.valign = valign

    cell.colspan = _parse_span(cursor)

    if cursor.starts_with(","):
        cursor.advance(1)
        cell.rowspan = _parse_span(cursor)

    cursor.trim_start()
    return cell
