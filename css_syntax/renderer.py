"""Formal syntax renderer: grammar -> annotated, cross-linked HTML block.

Renders the grammar of a CSS item followed by the grammars of everything it
references (types, functional types, properties, at-rules), each as a
``name = grammar`` entry inside one ``<pre class="notranslate">`` block.
Punctuation links to the value definition syntax guide with a localized
tooltip; references link to their reference pages.
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field

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
)
from .data import CssData, CssItem, ItemKind, SpecLink, Syntax
from .errors import InvalidSyntaxError, NoSyntaxFoundError, SyntaxDefinitionError
from .generator import generate, generate_multiplier
from .l10n import DEFAULT_LOCALE, LinkedToken, Localization, Tooltips
from .links import LinkKind, LinkResolver, MdnLinkResolver
from .parser import parse
from .walker import WalkOptions, walk

logger = logging.getLogger(__name__)

DEFAULT_VALUE_DEFINITION_URL = "/{locale}/docs/Web/CSS/Value_definition_syntax"
MAX_LINE_LEN = 50

# "name = grammar"; a quoted '=' inside the grammar is not a name separator.
_NAMED_SYNTAX = re.compile(r"^\s*(<[^<>'\"=]+>|@?[A-Za-z0-9_-]+)\s*=(.*)$", re.DOTALL)

_SIMPLE_MULTIPLIERS = {
    "*": LinkedToken.ASTERISK,
    "+": LinkedToken.PLUS,
    "?": LinkedToken.QUESTION_MARK,
}


def escape(text: str) -> str:
    return html.escape(text, quote=True)


@dataclass
class _Term:
    length: int
    text: str


@dataclass
class _Frame:
    node: Node
    children: int = 0


@dataclass
class _Emit:
    """Walker context for one term: output fragments plus the open ancestors."""
    parts: list[str] = field(default_factory=list)
    stack: list[_Frame] = field(default_factory=list)


class SyntaxRenderer:
    """Renders named grammars to HTML for one page.

    ``expanded_types`` collects the types whose own grammar appears on the
    page; references to them render as plain text instead of links.
    """

    def __init__(
        self,
        locale: str,
        value_definition_url: str,
        tooltips: Tooltips,
        data: CssData | None = None,
        links: LinkResolver | None = None,
        max_line_len: int = MAX_LINE_LEN,
    ):
        self.locale = locale
        self.value_definition_url = value_definition_url
        self.tooltips = tooltips
        self.data = data or CssData()
        self.links = links or MdnLinkResolver(locale)
        self.max_line_len = max_line_len
        self.expanded_types: set[str] = set()

    # ------------------------------------------------------------------
    # Constituents
    # ------------------------------------------------------------------

    def collect_constituents(self, syntax: Syntax) -> list[Syntax]:
        """Return ``syntax`` followed by every grammar it transitively references."""
        syntaxes = [syntax]
        seen: set[Node] = set()
        i = 0
        while i < len(syntaxes):
            current = syntaxes[i]
            i += 1
            if not current.syntax:
                continue
            references: list[Node] = []
            walk(parse(current.syntax), WalkOptions(enter=_collect_reference), references)
            for node in references:
                if node in seen:
                    continue
                seen.add(node)
                found = self._constituent_syntax(node)
                if not found.syntax or found in syntaxes:
                    continue
                logger.debug("Expanding %s from %s", found.name, current.name)
                syntaxes.append(found)
                if isinstance(node, Type):
                    self.expanded_types.add(node.name)
        return syntaxes

    def _constituent_syntax(self, node: Node) -> Syntax:
        if isinstance(node, Type):
            if node.name.endswith("()"):
                return self.data.get_syntax(CssItem(ItemKind.FUNCTION, node.name[:-2]))
            return self.data.get_syntax(CssItem(ItemKind.TYPE, node.name))
        if isinstance(node, Property):
            found = self.data.get_syntax(CssItem(ItemKind.PROPERTY, node.name))
            return Syntax(f"<{found.name}>", found.syntax, found.spec_links)
        return self.data.get_syntax(CssItem(ItemKind.AT_RULE, f"@{node.name}"))

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def render(self, syntax: Syntax) -> str:
        """Render one ``name = grammar`` entry; a nameless entry has no heading."""
        out = ""
        if syntax.name:
            name = escape(syntax.name)
            out = f'<span class="token property" id="{name}">{name} = </span><br/>'
        ast = parse(syntax.syntax)
        if isinstance(ast, Group) and not ast.explicit and ast.combinator is not Combinator.JUXTAPOSITION:
            return out + self.render_terms(ast.terms, ast.combinator)
        return out + self.render_terms((ast,), Combinator.JUXTAPOSITION)

    def render_terms(self, terms: tuple[Node, ...], combinator: Combinator) -> str:
        """One line per term, with the combinator aligned after the longest term."""
        rendered = [self.render_term(term) for term in terms]
        longest = min(max((t.length for t in rendered), default=0), self.max_line_len)

        output = ""
        for i, term in enumerate(rendered):
            spaces = " " * max(2, longest + 2 - term.length)
            combinator_text = ""
            if combinator is not Combinator.JUXTAPOSITION and i < len(rendered) - 1:
                combinator_text = self.linked_token(
                    LinkedToken.from_combinator(combinator), combinator.compact
                )
            output += f"  {term.text}{spaces}{combinator_text}<br/>"
        return output

    def render_term(self, node: Node) -> _Term:
        context = _Emit()
        walk(node, WalkOptions(enter=self._enter, leave=self._leave), context)
        return _Term(length=len(generate(node)), text="".join(context.parts))

    def linked_token(self, token: LinkedToken, copy: str, prefix: str = "", suffix: str = "") -> str:
        url = self.value_definition_url
        tooltip = escape(self.tooltips.get(token, ""))
        return f'{prefix}<a href="{url}#{token.fragment}" title="{tooltip}">{copy}</a>{suffix}'

    # ------------------------------------------------------------------
    # Walker callbacks
    # ------------------------------------------------------------------

    def _enter(self, node: Node, context: _Emit) -> None:
        if context.stack:
            parent = context.stack[-1]
            if isinstance(parent.node, Group) and parent.children:
                combinator = parent.node.combinator
                if not (isinstance(node, Comma) and combinator is Combinator.JUXTAPOSITION):
                    context.parts.append(self._separator(combinator))
            parent.children += 1
        context.parts.append(self._open(node))
        context.stack.append(_Frame(node))

    def _leave(self, node: Node, context: _Emit) -> None:
        context.stack.pop()
        context.parts.append(self._close(node))

    def _separator(self, combinator: Combinator) -> str:
        if combinator is Combinator.JUXTAPOSITION:
            return " "
        return self.linked_token(
            LinkedToken.from_combinator(combinator), combinator.compact, " ", " "
        )

    def _open(self, node: Node) -> str:
        if isinstance(node, Group):
            if not node.explicit:
                return ""
            suffix = "" if isinstance(node.terms[0], Comma) else " "
            return self.linked_token(LinkedToken.BRACKETS, "[", suffix=suffix)
        if isinstance(node, Function):
            if node.args is None:
                span = f'<span class="token function">{escape(node.name)}()</span>'
                return self._link(LinkKind.FUNCTION, node.name, span)
            span = f'<span class="token function">{escape(node.name)}(</span>'
            return self._link(LinkKind.FUNCTION, node.name, span) + " "
        if isinstance(node, BooleanExpr):
            return '<span class="token property">&lt;boolean-expr[</span> '
        if isinstance(node, Multiplier):
            return ""
        if isinstance(node, Type):
            span = f'<span class="token property">{escape(generate(node))}</span>'
            if node.name in self.expanded_types:
                return span
            return self._link(LinkKind.TYPE, node.name, span)
        if isinstance(node, Property):
            span = f'<span class="token property">{escape(generate(node))}</span>'
            return self._link(LinkKind.PROPERTY, node.name, span)
        if isinstance(node, Keyword):
            span = f'<span class="token keyword">{escape(node.name)}</span>'
            return self._link(LinkKind.KEYWORD, node.name, span)
        if isinstance(node, AtKeyword):
            span = f'<span class="token keyword">@{escape(node.name)}</span>'
            return self._link(LinkKind.AT_RULE, node.name, span)
        if isinstance(node, (Token, String)):
            return escape(node.value)
        return ","

    def _close(self, node: Node) -> str:
        if isinstance(node, Group) and node.explicit:
            out = self.linked_token(LinkedToken.BRACKETS, "]", prefix=" ")
            if node.must_produce_value:
                out += self.linked_token(LinkedToken.EXCLAMATION_POINT, "!")
            return out
        if isinstance(node, Function) and node.args is not None:
            return ' <span class="token function">)</span>'
        if isinstance(node, BooleanExpr):
            return ' <span class="token property">]&gt;</span>'
        if isinstance(node, Multiplier):
            return self._multiplier(node)
        return ""

    def _multiplier(self, node: Multiplier) -> str:
        suffix = generate_multiplier(node.min, node.max, node.comma_separated)
        out = ""
        if node.comma_separated:
            out += self.linked_token(LinkedToken.HASH_MARK, "#")
            suffix = suffix[1:]
        if suffix in _SIMPLE_MULTIPLIERS:
            out += self.linked_token(_SIMPLE_MULTIPLIERS[suffix], suffix)
        elif suffix:
            out += self.linked_token(LinkedToken.CURLY_BRACES, suffix)
        return out

    def _link(self, kind: LinkKind, name: str, inner: str) -> str:
        url = self.links.resolve(kind, name)
        if url is None:
            return inner
        return f'<a href="{escape(url)}">{inner}</a>'


def _collect_reference(node: Node, references: list[Node]) -> None:
    if isinstance(node, (Type, Property, AtKeyword)):
        references.append(node)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def write_formal_syntax(
    item: CssItem,
    locale: str,
    value_definition_url: str,
    tooltips: Tooltips,
    *,
    data: CssData | None = None,
    links: LinkResolver | None = None,
    localization: Localization | None = None,
    max_line_len: int = MAX_LINE_LEN,
) -> str:
    """Render the formal syntax block for a dataset item."""
    data = data or CssData()
    syntax = data.get_syntax(item, top_level=True)
    if not syntax.syntax:
        raise NoSyntaxFoundError(str(item))
    renderer = SyntaxRenderer(locale, value_definition_url, tooltips, data, links, max_line_len)
    return _write(renderer, syntax, localization, skip_first=False)


def write_formal_syntax_from_syntax(
    text: str,
    locale: str,
    value_definition_url: str,
    tooltips: Tooltips,
    *,
    data: CssData | None = None,
    links: LinkResolver | None = None,
    localization: Localization | None = None,
    max_line_len: int = MAX_LINE_LEN,
    hide_bare_grammar: bool = False,
) -> str:
    """Render a raw grammar, either ``name = grammar`` or a bare grammar.

    A bare grammar has no name, so its entry is printed without the
    ``name =`` heading. With ``hide_bare_grammar`` only the grammars it
    references are shown, for pages that print the grammar themselves.
    """
    match = _NAMED_SYNTAX.match(text)
    if match:
        syntax = Syntax(match.group(1).strip(), match.group(2).strip())
    else:
        syntax = Syntax("", text.strip())
    if not syntax.syntax:
        raise NoSyntaxFoundError(syntax.name or "raw syntax")
    skip_first = hide_bare_grammar and not match
    renderer = SyntaxRenderer(locale, value_definition_url, tooltips, data, links, max_line_len)
    return _write(renderer, syntax, localization, skip_first=skip_first)


def render(
    source: CssItem | str,
    locale: str = DEFAULT_LOCALE,
    tooltips: Tooltips | None = None,
    *,
    data: CssData | None = None,
    links: LinkResolver | None = None,
    localization: Localization | None = None,
    value_definition_url: str | None = None,
    max_line_len: int = MAX_LINE_LEN,
    hide_bare_grammar: bool = False,
) -> str:
    """Render a dataset item or a raw grammar string to a formal syntax block.

    Tooltips and the value definition syntax URL default to the localized
    copy for ``locale``. ``hide_bare_grammar`` only applies to raw grammars
    without a name; see ``write_formal_syntax_from_syntax``.
    """
    if tooltips is None:
        localization = localization or Localization.load()
        tooltips = localization.tooltips(locale)
    if value_definition_url is None:
        value_definition_url = DEFAULT_VALUE_DEFINITION_URL.format(locale=locale)

    kwargs = dict(data=data, links=links, localization=localization, max_line_len=max_line_len)
    if isinstance(source, CssItem):
        return write_formal_syntax(source, locale, value_definition_url, tooltips, **kwargs)
    return write_formal_syntax_from_syntax(
        source, locale, value_definition_url, tooltips, hide_bare_grammar=hide_bare_grammar, **kwargs
    )


def _write(
    renderer: SyntaxRenderer,
    syntax: Syntax,
    localization: Localization | None,
    skip_first: bool,
) -> str:
    try:
        syntaxes = renderer.collect_constituents(syntax)
        if skip_first:
            syntaxes = syntaxes[1:]
        out = '<pre class="notranslate">'
        for entry in syntaxes:
            out += renderer.render(entry) + "<br/>"
        out += "</pre>"
    except SyntaxDefinitionError as e:
        raise InvalidSyntaxError(f"Invalid syntax for {syntax.name or syntax.syntax}: {e}") from e

    sources = _spec_links(syntaxes)
    if sources:
        label = localization.sources_label(renderer.locale) if localization else "Sources"
        anchors = ", ".join(
            f'<a href="{escape(link.url)}">{escape(link.title)}</a>' for link in sources
        )
        out += f"<p>{escape(label)}: {anchors}</p>"
    return out


def _spec_links(syntaxes: list[Syntax]) -> list[SpecLink]:
    # One link per spec; the first entry's anchor wins.
    links: list[SpecLink] = []
    titles: set[str] = set()
    for entry in syntaxes:
        for link in entry.spec_links:
            if link.url and link.title not in titles:
                titles.add(link.title)
                links.append(link)
    return links
