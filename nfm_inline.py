#!/usr/bin/env python3
"""
nfm_inline.py

Inline span engine for No-Flavor Markdown.

Consumes one line of block content through a Cursor and returns the HTML for
it. At each position the first matching rule wins:

1. backslash escapes
2. (outside code spans) line break, toggles, anchor, checkboxes, link,
   image, table cell delimiter
3. the code span toggle, which can always close itself
4. a single literal character, with < and > encoded

Toggles are plain on/off flags kept in ParserState.inline, so a construct
opened on one line can be closed on a later line of the same block.
"""
from __future__ import annotations

from typing import Callable

from nfm_cursor import Cursor
from nfm_state import INLINE_TOGGLES, InlineFlags, ParserState, Table
from nfm_table import parse_cell_flags

# Backslash + character(s) emitted literally. "\\![" must stay after "\\[".
ESCAPES = ("\\\\", "\\*", "\\_", "\\~", "\\+", "\\=", "\\`", "\\^", "\\[", "\\![", "\\|")

# (marker, flag) in priority order
TOGGLE_MARKERS = (
    ("**", "strong"),
    ("_", "em"),
    ("~~", "delete"),
    ("++", "insert"),
    ("==", "mark"),
    ("^", "sup"),
)
CODE_MARKER = "`"

TOGGLE_TAGS = {name: (open_tag, close_tag) for name, open_tag, close_tag in INLINE_TOGGLES}

TEXT_ENTITIES = {
    "<": "&lt;",
    ">": "&gt;",
}

UNCHECKED_BOX = '<input type="checkbox" disabled="disabled" />'
CHECKED_BOX = '<input type="checkbox" disabled="disabled" checked="checked" />'


def encode_angle_brackets(text: str) -> str:
    """Encode < and > the way running text is encoded."""
    return "".join(TEXT_ENTITIES.get(c, c) for c in text)


def _toggle(state: ParserState, name: str) -> str:
    open_tag, close_tag = TOGGLE_TAGS[name]
    if getattr(state.inline, name):
        setattr(state.inline, name, False)
        return close_tag
    setattr(state.inline, name, True)
    return open_tag


def _handle_escape_if_present(cursor: Cursor, out: list[str]) -> bool:
    for pattern in ESCAPES:
        if cursor.starts_with(pattern):
            cursor.advance(1)
            out.append(cursor.consume(len(pattern) - 1))
            return True

    if cursor.starts_with("\\<"):
        cursor.advance(2)
        out.append("&lt;")
        return True

    return False


def _handle_br_if_present(cursor: Cursor, state: ParserState, out: list[str]) -> bool:
    """Two trailing spaces (and nothing else left) become a line break."""
    if not cursor.equals("  "):
        return False
    cursor.advance(2)
    out.append("<br />")
    return True


def _handle_toggle_if_present(cursor: Cursor, state: ParserState, out: list[str]) -> bool:
    for marker, name in TOGGLE_MARKERS:
        if cursor.starts_with(marker):
            cursor.advance(len(marker))
            out.append(_toggle(state, name))
            return True
    return False


def _handle_anchor_if_present(cursor: Cursor, state: ParserState, out: list[str]) -> bool:
    """
    '<id>' becomes an empty anchor. A '<' without a later '>' is text.
    """
    if not cursor.starts_with("<"):
        return False
    cursor.advance(1)

    end = cursor.find(">")
    if end == -1:
        out.append("&lt;")
        return True

    anchor_id = cursor.consume(end)
    cursor.advance(1)
    out.append(f'<a id="{anchor_id}"></a>')
    return True


def _handle_checkbox_if_present(cursor: Cursor, state: ParserState, out: list[str]) -> bool:
    if cursor.starts_with("[ ]"):
        cursor.advance(3)
        out.append(UNCHECKED_BOX)
        return True
    if cursor.starts_with("[x]"):
        cursor.advance(3)
        out.append(CHECKED_BOX)
        return True
    return False


def _render_label(text: str, state: ParserState) -> str:
    """
    Render link label text with its own set of toggles.

    Toggles opened in the label are closed at its end; toggles open around
    the link stay open and untouched.
    """
    outer = state.inline
    state.inline = InlineFlags()
    try:
        return render_inline(Cursor(text), state) + state.inline.close_all()
    finally:
        state.inline = outer


def _handle_link_if_present(cursor: Cursor, state: ParserState, out: list[str]) -> bool:
    """
    '[label](href)'. The label is rendered recursively; the href is copied.

    Degrades to literal text when the ']' is missing, when no '(' follows,
    or when the ')' is missing.
    """
    if not cursor.starts_with("["):
        return False

    end = cursor.find("]")
    if end == -1:
        out.append(cursor.consume(1))
        return True

    cursor.advance(1)
    label = _render_label(cursor.consume(end - 1), state)
    cursor.advance(1)

    if not cursor.starts_with("("):
        out.append(f"[{label}]")
        return True
    cursor.advance(1)

    end = cursor.find(")")
    if end == -1:
        out.append(f"[{label}](")
        return True

    href = cursor.consume(end)
    cursor.advance(1)
    out.append(f'<a href="{href}">{label}</a>')
    return True


def _handle_image_if_present(cursor: Cursor, state: ParserState, out: list[str]) -> bool:
    """
    '![alt](src)'. Same degradation as links; alt text is not inline-parsed.
    """
    if not cursor.starts_with("!["):
        return False
    cursor.advance(2)

    end = cursor.find("]")
    if end == -1:
        out.append("![")
        return True

    alt = encode_angle_brackets(cursor.consume(end))
    cursor.advance(1)

    if not cursor.starts_with("("):
        out.append(f"![{alt}]")
        return True
    cursor.advance(1)

    end = cursor.find(")")
    if end == -1:
        out.append(f"![{alt}](")
        return True

    src = cursor.consume(end)
    cursor.advance(1)
    out.append(f'<img alt="{alt}" src="{src}" />')
    return True


def _handle_table_cell_if_present(cursor: Cursor, state: ParserState, out: list[str]) -> bool:
    """A '|' inside a table closes the pending cell and opens the next one."""
    table = state.block
    if not (isinstance(table, Table) and cursor.starts_with("|")):
        return False
    cursor.advance(1)

    out.append(table.take_pending_close())
    cell = parse_cell_flags(cursor)
    out.append(cell.open_tag)
    table.pending_close = cell.close_tag
    return True


STRUCTURAL_RULES: tuple[Callable[[Cursor, ParserState, list[str]], bool], ...] = (
    _handle_br_if_present,
    _handle_toggle_if_present,
    _handle_anchor_if_present,
    _handle_checkbox_if_present,
    _handle_link_if_present,
    _handle_image_if_present,
    _handle_table_cell_if_present,
)


def _handle_text(cursor: Cursor, state: ParserState, out: list[str]) -> None:
    # padding before a cell delimiter: drop it so the '|' is read next
    if state.in_table and cursor.starts_with(" ") and cursor.starts_with_trimmed("|"):
        cursor.trim_start()
        return

    character = cursor.consume(1)
    out.append(TEXT_ENTITIES.get(character, character))


def render_inline(cursor: Cursor, state: ParserState) -> str:
    """
    Render everything left on `cursor` and return the HTML.

    Consumes the cursor completely. Open toggles are left open in `state`;
    closing them is the block driver's job.
    """
    out: list[str] = []

    while not cursor.is_empty():
        if _handle_escape_if_present(cursor, out):
            continue

        if not state.inline.code and any(rule(cursor, state, out) for rule in STRUCTURAL_RULES):
            continue

        if cursor.starts_with(CODE_MARKER):
            cursor.advance(1)
            out.append(_toggle(state, "code"))
            continue

        _handle_text(cursor, state, out)

    return "".join(out)
