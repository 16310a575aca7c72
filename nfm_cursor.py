# nfm_cursor.py
from __future__ import annotations

DIGITS = "0123456789"


class Cursor:
    """
    Mutable view over the unconsumed rest of the current line.

    Every rule in the inline engine and the block driver reads and consumes
    text through a Cursor. Positions are string indices; callers only ever
    ask for lengths of prefixes they have already matched.
    """

    def __init__(self, text: str = "") -> None:
        self.text = text

    def __repr__(self) -> str:
        return f"Cursor({self.text!r})"

    def reset(self, text: str) -> None:
        """Replace the view with a freshly drawn line."""
        self.text = text

    def is_empty(self) -> bool:
        return not self.text

    def starts_with(self, prefix: str) -> bool:
        return self.text.startswith(prefix)

    def equals(self, value: str) -> bool:
        return self.text == value

    def starts_with_digit(self) -> bool:
        return bool(self.text) and self.text[0] in DIGITS

    def starts_with_trimmed(self, prefix: str) -> bool:
        """True if the text starts with `prefix` once leading spaces are ignored."""
        return self.text.lstrip(" ").startswith(prefix)

    def find(self, needle: str) -> int:
        return self.text.find(needle)

    def advance(self, count: int) -> None:
        self.text = self.text[count:]

    def consume(self, count: int) -> str:
        taken = self.text[:count]
        self.text = self.text[count:]
        return taken

    def consume_rest(self) -> str:
        return self.consume(len(self.text))

    def trim_start(self) -> None:
        self.text = self.text.lstrip(" ")

    def count_indentation_levels(self) -> int:
        """
        Consume whole 4-space indentation units, then any leftover spaces.

        Returns the number of full units consumed.
        """
        levels = 0
        while self.text.startswith("    "):
            self.advance(4)
            levels += 1
        self.trim_start()
        return levels
