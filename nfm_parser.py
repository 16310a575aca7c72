#!/usr/bin/env python3
"""
nfm_parser.py

Block-level driver for No-Flavor Markdown.

Reads the document one line at a time and decides which block context the
line belongs to. Entering a context first closes ("reverts") every other
open context. The text left on the line is handed to the inline engine, or
copied with entity encoding for code blocks.

Public API:
- parse(text)      -> HTML string, never fails on content
- parse_file(path) -> HTML string, raises OSError / UnicodeDecodeError
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional, Union

from nfm_cursor import Cursor
from nfm_inline import render_inline
from nfm_lists import LIST_MARKERS, close_all_lists, enter_list_item
from nfm_state import (
    Blockquote,
    CodeFence,
    ListKind,
    Paragraph,
    ParserState,
    PreCode,
    Table,
)

FENCE = "```"
HORIZONTAL_RULE = "- - -"

# Checked in this order; longer markers first.
HEADINGS_BEFORE_LISTS = ((6, "######"), (5, "#####"))
HEADINGS_AFTER_RULE = ((4, "####"),)
HEADINGS_AFTER_FENCE = ((3, "###"), (2, "##"), (1, "#"))

CODE_ENTITIES = {
    "<": "&lt;",
    ">": "&gt;",
    " ": "&nbsp;",
}
LANG_ENTITIES = {
    "<": "&lt;",
    ">": "&gt;",
    '"': "",
    "'": "",
}

# Characters a paragraph line may escape with one leading backslash.
PARAGRAPH_ESCAPES = ("\\#", "\\-", "\\>", "\\0", "\\|", "\\ ", "\\`")


def split_lines(text: str) -> Iterator[str]:
    """
    Yield the lines of `text`.

    Lines end at '\\n'; a '\\r' right before it is dropped. A final line
    terminator does not produce an extra empty line.
    """
    lines = text.split("\n")
    # text after the last '\n' (empty when the text ends with one)
    last = lines.pop()

    for ln in lines:
        yield ln[:-1] if ln.endswith("\r") else ln

    if last:
        yield last


def encode_code(text: str) -> str:
    return "".join(CODE_ENTITIES.get(c, c) for c in text)


# ---------------- Reverts ----------------------------------------------------


def revert_all(state: ParserState, *, keep: Optional[type] = None, keep_list: bool = False) -> str:
    """
    Force-close inline toggles, then every open context except `keep`
    (a block context class) and, with keep_list, the list stack.

    An open code fence is never closed here; only its closing fence or the
    end of the document closes it.
    """
    out = [state.inline.close_all()]

    block = state.block
    if block is not None and not isinstance(block, CodeFence) and not (keep and isinstance(block, keep)):
        if isinstance(block, Table):
            out.append(block.take_pending_close())
        out.append(block.close_tag)
        state.block = None

    if not keep_list:
        out.append(close_all_lists(state))

    return "".join(out)


def revert_code_fence(state: ParserState) -> str:
    if not state.in_code_fence:
        return ""
    close = state.block.close_tag
    state.block = None
    return close


# ---------------- Line handlers ----------------------------------------------
# Each handler gets the cursor positioned at the start of a fresh line and
# returns the HTML to append, or None when the line is not its context.


def _handle_heading_if_present(
    cursor: Cursor,
    state: ParserState,
    levels: tuple[tuple[int, str], ...],
) -> Optional[str]:
    if state.in_an_element:
        return None

    for level, marker in levels:
        if cursor.starts_with(marker):
            out = [revert_all(state)]
            cursor.advance(len(marker))
            cursor.trim_start()
            out.append(f"<h{level}>")
            out.append(render_inline(cursor, state))
            # a heading is one line; nothing opened in it may outlive it
            out.append(state.inline.close_all())
            out.append(f"</h{level}>\n")
            return "".join(out)

    return None


def _handle_rule_if_present(cursor: Cursor, state: ParserState) -> Optional[str]:
    if state.in_an_element or not cursor.equals(HORIZONTAL_RULE):
        return None
    out = revert_all(state)
    cursor.advance(len(HORIZONTAL_RULE))
    return out + "<hr />\n"


def _handle_list_item_if_present(cursor: Cursor, state: ParserState, kind: ListKind) -> Optional[str]:
    if state.in_block(PreCode, Paragraph, Blockquote, Table, CodeFence):
        return None

    marker = LIST_MARKERS[kind]
    if not cursor.starts_with_trimmed(marker):
        return None

    out = [revert_all(state, keep_list=True)]
    if state.in_list:
        out.append("</li>")
    out.append(enter_list_item(cursor, state, kind))
    out.append("<li>")
    cursor.trim_start()
    out.append(render_inline(cursor, state))
    return "".join(out)


def _handle_pre_code_if_present(cursor: Cursor, state: ParserState) -> Optional[str]:
    if state.in_block(Paragraph, Blockquote, Table, CodeFence) or state.in_list:
        return None
    if not cursor.starts_with("    "):
        return None

    out = [revert_all(state, keep=PreCode)]
    cursor.advance(4)
    if state.in_block(PreCode):
        out.append("\n")
    else:
        out.append("<pre><code>")
        state.block = PreCode()

    # code is copied, never inline-parsed
    out.append(encode_code(cursor.consume_rest()))
    return "".join(out)


def _handle_code_fence_if_present(cursor: Cursor, state: ParserState) -> Optional[str]:
    fence = state.block if isinstance(state.block, CodeFence) else None

    if fence is None:
        if state.in_block(Paragraph, Blockquote, Table, PreCode) or state.in_list:
            return None
        if not cursor.starts_with(FENCE):
            return None

    out = [revert_all(state)]

    if fence is None:
        cursor.advance(len(FENCE))
        if cursor.is_empty():
            out.append("<pre><code>")
        else:
            lang = "".join(LANG_ENTITIES.get(c, c) for c in cursor.consume_rest())
            out.append(f'<pre><code lang="{lang}">')
        state.block = CodeFence()
        return "".join(out)

    if cursor.starts_with(FENCE):
        cursor.advance(len(FENCE))
        out.append(revert_code_fence(state))
        return "".join(out)

    if fence.first_line:
        fence.first_line = False
    else:
        out.append("\n")

    while not cursor.is_empty() and not cursor.starts_with(FENCE):
        if cursor.starts_with("\\`"):
            cursor.advance(1)
        out.append(encode_code(cursor.consume(1)))

    return "".join(out)


def _handle_blockquote_if_present(cursor: Cursor, state: ParserState) -> Optional[str]:
    if state.in_block(PreCode, Paragraph, Table, CodeFence) or state.in_list:
        return None
    if not cursor.starts_with(">"):
        return None

    cursor.advance(1)
    out: list[str] = []
    if state.in_block(Blockquote):
        out.append("\n")
    else:
        out.append(revert_all(state, keep=Blockquote))
        out.append("<blockquote>")
        state.block = Blockquote()

    if cursor.equals("  "):
        cursor.advance(2)
        out.append("<br />")
    else:
        cursor.trim_start()

    out.append(render_inline(cursor, state))
    return "".join(out)


def _handle_table_row_if_present(cursor: Cursor, state: ParserState) -> Optional[str]:
    opens_table = (
        not state.in_block(PreCode, Paragraph, Blockquote, CodeFence)
        and not state.in_list
        and cursor.starts_with("|")
    )
    continues_table = state.in_table and cursor.starts_with_trimmed("|")
    if not (opens_table or continues_table):
        return None

    out = [revert_all(state, keep=Table)]
    table = state.block
    if isinstance(table, Table):
        out.append(table.take_pending_close())
        out.append("</tr><tr>")
    else:
        out.append("<table><tbody><tr>")
        state.block = Table()

    # cells are opened by the inline engine when it reaches each '|'
    out.append(render_inline(cursor, state))
    return "".join(out)


def _handle_list_continuation_if_present(cursor: Cursor, state: ParserState) -> Optional[str]:
    if not state.in_list:
        return None
    cursor.trim_start()
    return "\n" + render_inline(cursor, state)


def _handle_paragraph(cursor: Cursor, state: ParserState) -> str:
    out: list[str] = []
    if state.in_block(Paragraph):
        out.append("\n")
    else:
        out.append(revert_all(state, keep=Paragraph))
        out.append("<p>")
        state.block = Paragraph()

    if any(cursor.starts_with(escape) for escape in PARAGRAPH_ESCAPES):
        cursor.advance(1)
    elif cursor.starts_with("\\\\"):
        cursor.advance(1)
        out.append(cursor.consume(1))

    out.append(render_inline(cursor, state))
    return "".join(out)


def _render_line(cursor: Cursor, state: ParserState) -> str:
    """Dispatch one line to the first block context that claims it."""
    if cursor.is_empty():
        return revert_all(state) + "\n"

    # ----- Headings h6/h5, rule, h4 ------------------------------------
    html = _handle_heading_if_present(cursor, state, HEADINGS_BEFORE_LISTS)
    if html is not None:
        return html

    html = _handle_rule_if_present(cursor, state)
    if html is not None:
        return html

    html = _handle_heading_if_present(cursor, state, HEADINGS_AFTER_RULE)
    if html is not None:
        return html

    # ----- Lists -------------------------------------------------------
    html = _handle_list_item_if_present(cursor, state, ListKind.UNORDERED)
    if html is not None:
        return html

    html = _handle_list_item_if_present(cursor, state, ListKind.ORDERED)
    if html is not None:
        return html

    # ----- Code --------------------------------------------------------
    html = _handle_pre_code_if_present(cursor, state)
    if html is not None:
        return html

    html = _handle_code_fence_if_present(cursor, state)
    if html is not None:
        return html

    # ----- Headings h3/h2/h1 -------------------------------------------
    # after code so '#' inside code stays literal
    html = _handle_heading_if_present(cursor, state, HEADINGS_AFTER_FENCE)
    if html is not None:
        return html

    # ----- Blockquote / table / list continuation ----------------------
    html = _handle_blockquote_if_present(cursor, state)
    if html is not None:
        return html

    html = _handle_table_row_if_present(cursor, state)
    if html is not None:
        return html

    html = _handle_list_continuation_if_present(cursor, state)
    if html is not None:
        return html

    return _handle_paragraph(cursor, state)


# ---------------- Public API -------------------------------------------------


def parse(text: str) -> str:
    """
    Convert a No-Flavor Markdown document to HTML.

    Total over every input: malformed constructs degrade to literal text.
    """
    state = ParserState()
    cursor = Cursor()
    html_out: list[str] = []

    for line in split_lines(text):
        cursor.reset(line)
        html_out.append(_render_line(cursor, state))

    # Final flushes
    html_out.append(revert_all(state))
    html_out.append(revert_code_fence(state))

    return "".join(html_out)


def parse_file(path: Union[str, Path], *, encoding: str = "utf-8") -> str:
    """Read a whole file and convert it with parse()."""
    text = Path(path).read_text(encoding=encoding)
    return parse(text)
