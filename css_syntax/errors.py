"""Error types for css-syntax with source position context."""

from __future__ import annotations

from typing import Any


class CssSyntaxError(Exception):
    """Base error with optional character position in the grammar source."""

    def __init__(self, message: str, position: int | None = None):
        self.message = message
        self.position = position
        loc = ""
        if position is not None:
            loc = f" (at {position})"
        super().__init__(f"{message}{loc}")


# ---------------------------------------------------------------------------
# Grammar errors (tokenizer, parser, walker, generator)
# ---------------------------------------------------------------------------

class SyntaxDefinitionError(CssSyntaxError):
    """Raised by the value definition syntax engine."""


class ParseError(SyntaxDefinitionError):
    """Raised when a grammar string cannot be parsed."""


class ExpectedCharError(ParseError):
    """A specific character was required at the cursor."""

    def __init__(self, char: str, position: int | None = None):
        self.char = char
        super().__init__(f"Parse error: Expected {char}", position)


class ExpectedFunctionError(ParseError):
    def __init__(self, position: int | None = None):
        super().__init__("Parse error: Expected function", position)


class ExpectedKeywordError(ParseError):
    def __init__(self, position: int | None = None):
        super().__init__("Parse error: Expected keyword", position)


class UnexpectedInputError(ParseError):
    def __init__(self, position: int | None = None):
        super().__init__("Parse error: Unexpected input", position)


class ExpectedRangeNodeError(ParseError):
    """A multiplier or type range did not hold a valid range."""

    def __init__(self, position: int | None = None):
        super().__init__("Expected Range node", position)


class UnknownNodeTypeError(SyntaxDefinitionError):
    """A node outside the known variant set reached a match site."""

    def __init__(self, node: Any):
        self.node = node
        super().__init__(f"Unknown node type {type(node).__name__}")


# ---------------------------------------------------------------------------
# Rendering errors
# ---------------------------------------------------------------------------

class FormalSyntaxError(CssSyntaxError):
    """Raised when a formal syntax block cannot be rendered."""


class NoSyntaxFoundError(FormalSyntaxError):
    def __init__(self, name: str | None = None):
        self.name = name
        message = "could not find syntax for this item"
        if name:
            message = f"could not find syntax for {name}"
        super().__init__(message)


class InvalidSyntaxError(FormalSyntaxError):
    """The resolved grammar failed to parse or walk."""


class CssPageTypeRequiredError(FormalSyntaxError):
    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"CSS page type required for {slug}")


class DataError(CssSyntaxError):
    """Raised when a dataset, localization or settings file cannot be loaded."""
