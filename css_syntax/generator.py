"""Generator: Node tree -> canonical value definition syntax text.

Regenerates grammar text from a parsed tree. Used for measuring terms when
laying out the formal syntax block and for the ``format`` CLI command.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

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
from .errors import UnknownNodeTypeError

Decorate = Callable[[str, object], str]


def _identity(text: str, node: object) -> str:
    return text


@dataclass
class GenerateOptions:
    """Output options.

    ``decorate`` receives every emitted fragment together with the node (or
    type range) it came from, and returns the text to use in its place.
    """
    compact: bool = False
    force_braces: bool = False
    decorate: Decorate = _identity


def generate(node: Node, options: GenerateOptions | None = None) -> str:
    """Render ``node`` back to grammar text."""
    return _Generator(options or GenerateOptions()).generate(node)


def generate_multiplier(min: int, max: int | None, comma_separated: bool = False) -> str:
    """Return the shortest spelling of a multiplier suffix."""
    simple = {
        (0, None): "#?" if comma_separated else "*",
        (1, None): "#" if comma_separated else "+",
        (1, 1): "",
    }
    if (min, max) in simple:
        return simple[(min, max)]
    if (min, max) == (0, 1) and not comma_separated:
        return "?"

    sign = "#" if comma_separated else ""
    if min == max:
        return f"{sign}{{{min}}}"
    if max is None:
        return f"{sign}{{{min},}}"
    return f"{sign}{{{min},{max}}}"


class _Generator:

    def __init__(self, options: GenerateOptions):
        self.options = options

    def generate(self, node: Node) -> str:
        decorate = self.options.decorate

        if isinstance(node, Multiplier):
            suffix = generate_multiplier(node.min, node.max, node.comma_separated)
            out = self.generate(node.term) + decorate(suffix, node)
        elif isinstance(node, Token):
            out = node.value
        elif isinstance(node, Property):
            out = f"<'{node.name}'>"
        elif isinstance(node, Type):
            opts = ""
            if node.range is not None:
                opts = decorate(self._range(node.range), node.range)
            out = f"<{node.name}{opts}>"
        elif isinstance(node, Function):
            if node.args is None:
                out = f"{node.name}()"
            elif self.options.compact:
                out = f"{node.name}({self.generate(node.args)})"
            else:
                out = f"{node.name}( {self.generate(node.args)} )"
        elif isinstance(node, Keyword):
            out = node.name
        elif isinstance(node, Comma):
            out = ","
        elif isinstance(node, String):
            out = node.value
        elif isinstance(node, AtKeyword):
            out = f"@{node.name}"
        elif isinstance(node, BooleanExpr):
            inner = self.generate(node.term)
            out = f"<boolean-expr[{inner}]>" if self.options.compact else f"<boolean-expr[ {inner} ]>"
        elif isinstance(node, Group):
            out = self._sequence(node) + ("!" if node.must_produce_value else "")
        else:
            raise UnknownNodeTypeError(node)

        return decorate(out, node)

    def _sequence(self, group: Group) -> str:
        combinator = group.combinator
        joiner = combinator.compact if self.options.compact else combinator.separator
        result = ""
        for i, term in enumerate(group.terms):
            text = self.generate(term)
            # A comma hugs the term before it: "<top>, <right>".
            if i and not (isinstance(term, Comma) and combinator is Combinator.JUXTAPOSITION):
                result += joiner
            result += text
        if not (group.explicit or self.options.force_braces):
            return result
        if self.options.compact:
            return f"[{result}]"
        start = "[" if result.startswith(",") else "[ "
        return f"{start}{result} ]"

    @staticmethod
    def _range(value_range: TypeRange) -> str:
        return f" {value_range}"
