"""AST node definitions for value definition syntax, all frozen (immutable) dataclasses."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Union


class Combinator(Enum):
    """How the terms of a group combine, ordered from tightest to loosest."""
    JUXTAPOSITION = " "
    ALL_ANY_ORDER = "&&"
    ONE_OR_MORE_ANY_ORDER = "||"
    EXACTLY_ONE = "|"

    @property
    def separator(self) -> str:
        if self is Combinator.JUXTAPOSITION:
            return " "
        return f" {self.value} "

    @property
    def compact(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Leaf nodes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TypeRange:
    """A bracketed numeric range inside a type reference: <length [0,∞]>."""
    min: int | float  # -math.inf for -∞
    max: int | float  # math.inf for ∞
    min_unit: str | None = None
    max_unit: str | None = None

    def __str__(self) -> str:
        return f"[{_bound(self.min, self.min_unit)},{_bound(self.max, self.max_unit)}]"


@dataclass(frozen=True)
class Type:
    """A data type reference: <length>, <rgb()>, <integer [1,∞]>."""
    name: str
    range: TypeRange | None = None


@dataclass(frozen=True)
class Property:
    """A reference to another property's grammar: <'padding-top'>."""
    name: str


@dataclass(frozen=True)
class Keyword:
    name: str


@dataclass(frozen=True)
class AtKeyword:
    """An at-rule reference: @media."""
    name: str


@dataclass(frozen=True)
class Token:
    """Any other literal character emitted verbatim."""
    value: str


@dataclass(frozen=True)
class Comma:
    pass


@dataclass(frozen=True)
class String:
    """A quoted literal, quotes included: '+'."""
    value: str


# ---------------------------------------------------------------------------
# Structural nodes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Function:
    """A functional notation: name( args ). Empty argument lists have args=None."""
    name: str
    args: Node | None = None


@dataclass(frozen=True)
class Multiplier:
    """A repeated term. max=None means unbounded."""
    term: Node
    min: int
    max: int | None
    comma_separated: bool = False


@dataclass(frozen=True)
class BooleanExpr:
    """<boolean-expr[ ... ]>: a boolean combination of the wrapped grammar."""
    term: Node


@dataclass(frozen=True)
class Group:
    """Terms joined by one combinator; explicit groups were written with [ ]."""
    terms: tuple[Node, ...]
    combinator: Combinator = Combinator.JUXTAPOSITION
    must_produce_value: bool = False
    explicit: bool = False


Node = Union[
    Group,
    Multiplier,
    Type,
    Property,
    Function,
    Keyword,
    Token,
    Comma,
    String,
    AtKeyword,
    BooleanExpr,
]

LEAF_NODES = (Token, Property, Type, Keyword, Comma, String, AtKeyword)


def _bound(value: int | float, unit: str | None) -> str:
    if value == math.inf:
        return "∞"
    if value == -math.inf:
        return "-∞"
    return f"{value}{unit or ''}"
