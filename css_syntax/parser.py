"""Recursive-descent parser for CSS value definition syntax.

Precedence, weakest to strongest: ``|``, ``||``, ``&&``, juxtaposition.
Each level parses a list of next-tighter terms separated by its operator and
returns a single operand unwrapped, so a one-term juxtaposition group never
reaches the tree. The one exception is a bracketed single term marked "!".

See https://www.w3.org/TR/css-values-4/#value-defs
"""

from __future__ import annotations

import math

from .ast_nodes import (
    AtKeyword,
    BooleanExpr,
    Combinator,
    Comma,
    Function,
    Group,
    Keyword,
    Multiplier,
    Node,
    Property,
    String,
    Token,
    Type,
    TypeRange,
)
from .errors import (
    ExpectedCharError,
    ExpectedFunctionError,
    ExpectedKeywordError,
    ExpectedRangeNodeError,
    UnexpectedInputError,
)
from .tokenizer import NUL, Tokenizer

INFINITY = "∞"

# Loosest first; juxtaposition is handled by _read_sequence.
_LEVELS = (
    Combinator.EXACTLY_ONE,
    Combinator.ONE_OR_MORE_ANY_ORDER,
    Combinator.ALL_ANY_ORDER,
)

_MULTIPLIER_START = frozenset("*+?#!")


def _is_name_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == "-")


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class _Parser:

    def __init__(self, source: str):
        self.tokenizer = Tokenizer(source)
        # Open bare "(" tokens at the current nesting level.
        self._paren_depth = 0

    def parse(self) -> Node:
        t = self.tokenizer
        node = self._read_combined(0)
        t.skip_whitespace_in_place()
        if not t.at_end:
            raise UnexpectedInputError(t.pos)
        return node

    # ------------------------------------------------------------------
    # Combinator levels
    # ------------------------------------------------------------------

    def _read_combined(self, level: int) -> Node:
        if level == len(_LEVELS):
            return self._read_sequence()
        combinator = _LEVELS[level]
        terms = [self._read_combined(level + 1)]
        while self._at_combinator(combinator):
            self.tokenizer.slice_to(self.tokenizer.pos + len(combinator.value))
            terms.append(self._read_combined(level + 1))
        return _group(terms, combinator)

    def _at_combinator(self, combinator: Combinator) -> bool:
        t = self.tokenizer
        t.skip_whitespace_in_place()
        ch, nxt = t.current(), t.peek_next()
        if combinator is Combinator.EXACTLY_ONE:
            return ch == "|" and nxt != "|"
        if combinator is Combinator.ONE_OR_MORE_ANY_ORDER:
            return ch == "|" and nxt == "|"
        return ch == "&" and nxt == "&"

    def _read_sequence(self) -> Node:
        t = self.tokenizer
        terms: list[Node] = []
        while True:
            t.skip_whitespace_in_place()
            if self._at_sequence_end():
                break
            terms.append(self._read_term())
        if not terms:
            raise UnexpectedInputError(t.pos)
        return _group(terms, Combinator.JUXTAPOSITION)

    def _at_sequence_end(self) -> bool:
        t = self.tokenizer
        ch = t.current()
        if ch in (NUL, "]", "|"):
            return True
        if ch == "&" and t.peek_next() == "&":
            return True
        return ch == ")" and self._paren_depth == 0

    # ------------------------------------------------------------------
    # Terms
    # ------------------------------------------------------------------

    def _read_term(self) -> Node:
        t = self.tokenizer
        ch = t.current()

        if _is_name_char(ch):
            node = self._read_keyword_or_function()
        elif ch == "[":
            node = self._read_group()
        elif ch == "<":
            node = self._read_property() if t.peek_next() == "'" else self._read_type()
        elif ch == "@" and _is_name_char(t.peek_next()):
            t.consume_one()
            node = AtKeyword(name=self._scan_word(can_be_last=True))
        elif ch in ("'", '"'):
            node = String(value=self._scan_string())
        elif ch == ",":
            t.consume_one()
            return Comma()
        elif ch == "(":
            t.consume_one()
            self._paren_depth += 1
            node = Token(value="(")
        elif ch == ")":
            t.consume_one()
            self._paren_depth -= 1
            node = Token(value=")")
        elif ch == "&":
            # "&&" already ended the sequence, so this one stands alone.
            raise ExpectedCharError("&", t.pos + 1)
        elif ch in _MULTIPLIER_START or (ch == "{" and _starts_range(t)):
            raise UnexpectedInputError(t.pos)
        else:
            node = Token(value=t.consume_one())

        return self._maybe_multiplied(node)

    def _read_group(self) -> Node:
        t = self.tokenizer
        t.expect("[")
        saved_depth, self._paren_depth = self._paren_depth, 0
        inner = self._read_combined(0)
        self._paren_depth = saved_depth
        t.skip_whitespace_in_place()
        t.expect("]")

        must_produce_value = False
        if t.current() == "!":
            t.consume_one()
            must_produce_value = True

        if isinstance(inner, Group):
            return Group(
                terms=inner.terms,
                combinator=inner.combinator,
                must_produce_value=must_produce_value or inner.must_produce_value,
                explicit=True,
            )
        if must_produce_value:
            # A one-term group survives only to carry the "!".
            return Group(terms=(inner,), must_produce_value=True, explicit=True)
        return inner

    def _read_property(self) -> Node:
        t = self.tokenizer
        t.expect("<")
        t.expect("'")
        name = self._scan_word()
        t.expect("'")
        t.expect(">")
        return Property(name=name)

    def _read_type(self) -> Node:
        t = self.tokenizer
        t.expect("<")
        name = self._scan_word()
        if t.current() == "(" and t.peek_next() == ")":
            name += t.slice_to(t.pos + 2)

        if t.next_non_whitespace() == "[":
            t.skip_whitespace_in_place()
            if name == "boolean-expr":
                term = self._read_bracketed()
                t.skip_whitespace_in_place()
                t.expect(">")
                return BooleanExpr(term=term)
            value_range = self._read_type_range()
        else:
            value_range = None

        t.skip_whitespace_in_place()
        t.expect(">")
        return Type(name=name, range=value_range)

    def _read_bracketed(self) -> Node:
        t = self.tokenizer
        t.expect("[")
        saved_depth, self._paren_depth = self._paren_depth, 0
        inner = self._read_combined(0)
        self._paren_depth = saved_depth
        t.skip_whitespace_in_place()
        t.expect("]")
        return inner

    def _read_keyword_or_function(self) -> Node:
        t = self.tokenizer
        start = t.pos
        name = self._scan_word(can_be_last=True)

        if t.current() != "(":
            return Keyword(name=name)

        t.consume_one()
        if t.at_end:
            raise ExpectedFunctionError(start)
        t.skip_whitespace_in_place()
        if t.current() == ")":
            t.consume_one()
            return Function(name=name)

        saved_depth, self._paren_depth = self._paren_depth, 0
        args = self._read_combined(0)
        self._paren_depth = saved_depth
        t.skip_whitespace_in_place()
        t.expect(")")
        return Function(name=name, args=args)

    # ------------------------------------------------------------------
    # Multipliers
    # ------------------------------------------------------------------

    def _maybe_multiplied(self, node: Node) -> Node:
        t = self.tokenizer
        multiplier = self._read_multiplier()
        if multiplier is None:
            return node
        low, high, comma = multiplier
        node = Multiplier(term=node, min=low, max=high, comma_separated=comma)
        # "+#" stacks: a comma-separated list of space-separated repetitions.
        if t.current() == "#" and t.char_at(t.pos - 1) == "+":
            return self._maybe_multiplied(node)
        return node

    def _read_multiplier(self) -> tuple[int, int | None, bool] | None:
        t = self.tokenizer
        ch = t.current()
        if ch == "*":
            t.consume_one()
            return 0, None, False
        if ch == "+":
            t.consume_one()
            return 1, None, False
        if ch == "?":
            t.consume_one()
            return 0, 1, False
        if ch == "#":
            t.consume_one()
            if t.current() == "{":
                low, high = self._read_multiplier_range()
                return low, high, True
            if t.current() == "?":
                t.consume_one()
                return 0, None, True
            return 1, None, True
        if ch == "{" and _starts_range(t):
            low, high = self._read_multiplier_range()
            return low, high, False
        return None

    def _read_multiplier_range(self) -> tuple[int, int | None]:
        t = self.tokenizer
        start = t.pos
        t.expect("{")
        t.skip_whitespace_in_place()
        low = self._scan_integer()
        if low is None:
            raise ExpectedRangeNodeError(start)
        t.skip_whitespace_in_place()

        high: int | None = low
        if t.current() == ",":
            t.consume_one()
            t.skip_whitespace_in_place()
            if t.current() == "}":
                high = None
            else:
                high = self._scan_integer()
                if high is None:
                    raise ExpectedRangeNodeError(start)
                t.skip_whitespace_in_place()

        t.expect("}")
        if high is not None and high < low:
            raise ExpectedRangeNodeError(start)
        return low, high

    # ------------------------------------------------------------------
    # Type ranges
    # https://drafts.csswg.org/css-values-4/#numeric-ranges
    # ------------------------------------------------------------------

    def _read_type_range(self) -> TypeRange:
        t = self.tokenizer
        start = t.pos
        t.expect("[")
        t.skip_whitespace_in_place()
        low, low_unit = self._read_range_bound()
        t.skip_whitespace_in_place()
        t.expect(",")
        t.skip_whitespace_in_place()
        high, high_unit = self._read_range_bound()
        t.skip_whitespace_in_place()
        t.expect("]")

        if low_unit and high_unit and low_unit != high_unit:
            raise ExpectedRangeNodeError(start)
        if low > high:
            raise ExpectedRangeNodeError(start)
        return TypeRange(min=low, max=high, min_unit=low_unit, max_unit=high_unit)

    def _read_range_bound(self) -> tuple[int | float, str | None]:
        t = self.tokenizer
        sign = 1
        if t.current() == "-":
            t.consume_one()
            sign = -1
        elif t.current() == "+":
            t.consume_one()

        if t.current() == INFINITY:
            t.consume_one()
            return sign * math.inf, None

        start = t.pos
        end = start
        while _is_digit(t.char_at(end)):
            end += 1
        if t.char_at(end) == "." and _is_digit(t.char_at(end + 1)):
            end += 1
            while _is_digit(t.char_at(end)):
                end += 1
        if end == start:
            raise ExpectedRangeNodeError(start)
        digits = t.slice_to(end)
        value: int | float = float(digits) if "." in digits else int(digits)

        unit_end = t.pos
        while t.char_at(unit_end).isascii() and t.char_at(unit_end).isalpha():
            unit_end += 1
        unit = t.slice_to(unit_end) or None
        return sign * value, unit

    # ------------------------------------------------------------------
    # Scanners
    # ------------------------------------------------------------------

    def _scan_word(self, can_be_last: bool = False) -> str:
        t = self.tokenizer
        end = t.pos
        while _is_name_char(t.char_at(end)):
            end += 1
        if end == t.pos or (end >= len(t.source) and not can_be_last):
            raise ExpectedKeywordError(t.pos)
        return t.slice_to(end)

    def _scan_integer(self) -> int | None:
        t = self.tokenizer
        end = t.pos
        while _is_digit(t.char_at(end)):
            end += 1
        if end == t.pos:
            return None
        return int(t.slice_to(end))

    def _scan_string(self) -> str:
        t = self.tokenizer
        quote = t.current()
        end = t.source.find(quote, t.pos + 1)
        if end == -1:
            raise ExpectedCharError(quote, len(t.source))
        return t.slice_to(end + 1)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _group(terms: list[Node], combinator: Combinator) -> Node:
    if len(terms) == 1:
        return terms[0]
    return Group(terms=tuple(terms), combinator=combinator)


def _starts_range(t: Tokenizer) -> bool:
    return _is_digit(t.char_at(t.skip_whitespace(t.pos + 1)))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse(source: str) -> Node:
    """Parse a value definition syntax string and return its AST.

    Raises a ParseError subclass on malformed input; there is no recovery.
    """
    return _Parser(source).parse()
