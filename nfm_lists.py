#!/usr/bin/env python3
from __future__ import annotations

from nfm_cursor import Cursor
from nfm_state import ListKind, ParserState

LIST_MARKERS = {
    ListKind.UNORDERED: "-",
    ListKind.ORDERED: "0.",
}


def reconcile_list_depth(state: ParserState, target_depth: int, kind: ListKind) -> str:
    """
    Open or close list levels until the stack is `target_depth` deep.

    Closing pops levels in LIFO order; opening pushes `kind` for every new
    level. The kind of an already open level is never changed.
    Returns the emitted tags.
    """
    out: list[str] = []

    while state.list_depth > target_depth:
        out.append(state.list_stack.pop().close_tag)

    while state.list_depth < target_depth:
        state.list_stack.append(kind)
        out.append(kind.open_tag)

    return "".join(out)


def enter_list_item(cursor: Cursor, state: ParserState, kind: ListKind) -> str:
    """
    Consume the indentation and marker of a list line and reconcile nesting.

    Depth is the number of 4-space units before the marker plus one.
    """
    target_depth = cursor.count_indentation_levels() + 1
    cursor.advance(len(LIST_MARKERS[kind]))
    return reconcile_list_depth(state, target_depth, kind)


def close_all_lists(state: ParserState) -> str:
    """Close the open list item and every nesting level."""
    if not state.in_list:
        return ""

    out = ["</li>"]
    while state.list_stack:
        out.append(state.list_stack.pop().close_tag)
    out.append("\n")
    return "".join(out)
