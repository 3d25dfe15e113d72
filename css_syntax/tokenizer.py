"""Character scanner over a value definition syntax source string."""

from __future__ import annotations

from .errors import ExpectedCharError

NUL = "\0"
WHITESPACE = frozenset(" \t\r\n\f")


class Tokenizer:
    """Cursor over the code points of a grammar string.

    This is the only place that knows about raw character positions; the
    parser moves the cursor exclusively through these methods (or by saving
    and restoring ``pos``).
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def char_at(self, pos: int) -> str:
        """Return the character at ``pos``, or NUL past the end."""
        if 0 <= pos < len(self.source):
            return self.source[pos]
        return NUL

    def current(self) -> str:
        return self.char_at(self.pos)

    def peek_next(self) -> str:
        return self.char_at(self.pos + 1)

    def skip_whitespace(self, start: int) -> int:
        """Return the first position >= ``start`` that is not whitespace."""
        end = start
        while end < len(self.source) and self.source[end] in WHITESPACE:
            end += 1
        return end

    def skip_whitespace_in_place(self) -> str:
        return self.slice_to(self.skip_whitespace(self.pos))

    def next_non_whitespace(self) -> str:
        return self.char_at(self.skip_whitespace(self.pos))

    def slice_to(self, end: int) -> str:
        """Return the text from the cursor to ``end`` and move the cursor there."""
        text = self.source[self.pos:end]
        self.pos = end
        return text

    def consume_one(self) -> str:
        if self.at_end:
            return NUL
        ch = self.source[self.pos]
        self.pos += 1
        return ch

    def expect(self, char: str) -> None:
        if self.current() != char:
            raise ExpectedCharError(char, self.pos)
        self.pos += 1
