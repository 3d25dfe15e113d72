"""css-syntax: CSS value definition syntax parser and formal syntax renderer."""

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
from .batch import BatchRenderer, BatchResult, ItemResult, load_manifest
from .config import Settings
from .data import CssData, CssItem, ItemKind, SpecLink, Syntax
from .errors import (
    CssPageTypeRequiredError,
    CssSyntaxError,
    DataError,
    ExpectedCharError,
    ExpectedFunctionError,
    ExpectedKeywordError,
    ExpectedRangeNodeError,
    FormalSyntaxError,
    InvalidSyntaxError,
    NoSyntaxFoundError,
    ParseError,
    SyntaxDefinitionError,
    UnexpectedInputError,
    UnknownNodeTypeError,
)
from .generator import GenerateOptions, generate
from .l10n import LinkedToken, Localization
from .links import LinkKind, LinkResolver, MdnLinkResolver
from .logging import BatchLog, ItemLog, ItemStatus, RenderLogger
from .parser import parse
from .renderer import (
    SyntaxRenderer,
    render,
    write_formal_syntax,
    write_formal_syntax_from_syntax,
)
from .templates import PageEnv, PageType, csssyntax, csssyntaxraw
from .tokenizer import Tokenizer
from .walker import WalkOptions, walk

__all__ = [
    "parse",
    "walk",
    "WalkOptions",
    "generate",
    "GenerateOptions",
    "render",
    "write_formal_syntax",
    "write_formal_syntax_from_syntax",
    "SyntaxRenderer",
    "csssyntax",
    "csssyntaxraw",
    "PageEnv",
    "PageType",
    "CssData",
    "CssItem",
    "ItemKind",
    "Syntax",
    "SpecLink",
    "Localization",
    "LinkedToken",
    "LinkKind",
    "LinkResolver",
    "MdnLinkResolver",
    "BatchRenderer",
    "BatchResult",
    "ItemResult",
    "load_manifest",
    "RenderLogger",
    "BatchLog",
    "ItemStatus",
    "ItemLog",
    "Settings",
    "Tokenizer",
    "Node",
    "Group",
    "Combinator",
    "Multiplier",
    "Type",
    "TypeRange",
    "Property",
    "Function",
    "Keyword",
    "Token",
    "Comma",
    "String",
    "AtKeyword",
    "BooleanExpr",
    "CssSyntaxError",
    "SyntaxDefinitionError",
    "ParseError",
    "ExpectedCharError",
    "ExpectedFunctionError",
    "ExpectedKeywordError",
    "UnexpectedInputError",
    "ExpectedRangeNodeError",
    "UnknownNodeTypeError",
    "FormalSyntaxError",
    "NoSyntaxFoundError",
    "InvalidSyntaxError",
    "CssPageTypeRequiredError",
    "DataError",
]
