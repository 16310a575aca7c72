#!/usr/bin/env python3
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional, Union


class ListKind(Enum):
    """Kind of an open list nesting level."""
    UNORDERED = "ul"
    ORDERED = "ol"

    @property
    def open_tag(self) -> str:
        return f"<{self.value}>"

    @property
    def close_tag(self) -> str:
        return f"</{self.value}>"


# ---------------- Block contexts ---------------------------------------------
# Exactly one of these (or None) is active at a time. Lists are tracked
# separately in ParserState.list_stack.

@dataclass
class Paragraph:
    close_tag: ClassVar[str] = "</p>\n"


@dataclass
class PreCode:
    close_tag: ClassVar[str] = "</code></pre>\n"


@dataclass
class Blockquote:
    close_tag: ClassVar[str] = "</blockquote>\n"


@dataclass
class Table:
    """
    Open table. `pending_close` is the closing tag of the cell that is
    currently open ("</td>" or "</th>"), if any.
    """
    pending_close: Optional[str] = None
    close_tag: ClassVar[str] = "</tr></tbody></table>\n"

    def take_pending_close(self) -> str:
        close = self.pending_close or ""
        self.pending_close = None
        return close


@dataclass
class CodeFence:
    """Open ``` block. `first_line` is True until the first content line is written."""
    first_line: bool = True
    close_tag: ClassVar[str] = "</code></pre>\n"


BlockContext = Union[Paragraph, PreCode, Blockquote, Table, CodeFence]


# ---------------- Inline toggles ---------------------------------------------

# (flag attribute, open tag, close tag) in force-close order
INLINE_TOGGLES: tuple[tuple[str, str, str], ...] = (
    ("strong", "<strong>", "</strong>"),
    ("em", "<em>", "</em>"),
    ("delete", "<del>", "</del>"),
    ("insert", "<ins>", "</ins>"),
    ("mark", "<mark>", "</mark>"),
    ("sup", "<sup>", "</sup>"),
    ("code", "<code>", "</code>"),
)


@dataclass
class InlineFlags:
    """
    Open/closed state of every inline toggle.

    These are plain booleans on purpose: a toggle never nests with itself and
    closes in whatever order the text asks for.
    """
    strong: bool = False
    em: bool = False
    delete: bool = False
    insert: bool = False
    mark: bool = False
    sup: bool = False
    code: bool = False

    def close_all(self) -> str:
        """Close every open toggle and return the emitted closing tags."""
        out: list[str] = []
        for name, _, close in INLINE_TOGGLES:
            if getattr(self, name):
                out.append(close)
                setattr(self, name, False)
        return "".join(out)


@dataclass
class ParserState:
    """
    Mutable state for one conversion.

    Created fresh per parse call, mutated only while that call runs and
    discarded once the output string has been joined.
    """
    block: Optional[BlockContext] = None
    list_stack: list[ListKind] = field(default_factory=list)
    inline: InlineFlags = field(default_factory=InlineFlags)

    @property
    def in_list(self) -> bool:
        return bool(self.list_stack)

    @property
    def list_depth(self) -> int:
        return len(self.list_stack)

    @property
    def in_table(self) -> bool:
        return isinstance(self.block, Table)

    @property
    def in_code_fence(self) -> bool:
        return isinstance(self.block, CodeFence)

    def in_block(self, *kinds: type) -> bool:
        return isinstance(self.block, kinds)

    @property
    def in_an_element(self) -> bool:
        """True while any block context or list is open."""
        return self.block is not None or self.in_list
