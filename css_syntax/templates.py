"""Page macros that embed a formal syntax block in a CSS reference page."""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from enum import Enum

from .data import CssData, CssItem, ItemKind
from .errors import CssPageTypeRequiredError, NoSyntaxFoundError
from .l10n import DEFAULT_LOCALE, Localization
from .links import LinkResolver
from .renderer import render

logger = logging.getLogger(__name__)


class PageType(Enum):
    CSS_AT_RULE = "css-at-rule"
    CSS_AT_RULE_DESCRIPTOR = "css-at-rule-descriptor"
    CSS_COMBINATOR = "css-combinator"
    CSS_FUNCTION = "css-function"
    CSS_KEYWORD = "css-keyword"
    CSS_MEDIA_FEATURE = "css-media-feature"
    CSS_MODULE = "css-module"
    CSS_PROPERTY = "css-property"
    CSS_PSEUDO_CLASS = "css-pseudo-class"
    CSS_PSEUDO_ELEMENT = "css-pseudo-element"
    CSS_SELECTOR = "css-selector"
    CSS_SHORTHAND_PROPERTY = "css-shorthand-property"
    CSS_TYPE = "css-type"
    GUIDE = "guide"
    LANDING_PAGE = "landing-page"
    WEB_API_INTERFACE = "web-api-interface"
    OTHER = "other"


ITEM_KINDS = {
    PageType.CSS_AT_RULE: ItemKind.AT_RULE,
    PageType.CSS_AT_RULE_DESCRIPTOR: ItemKind.AT_RULE_DESCRIPTOR,
    PageType.CSS_FUNCTION: ItemKind.FUNCTION,
    PageType.CSS_PROPERTY: ItemKind.PROPERTY,
    PageType.CSS_SHORTHAND_PROPERTY: ItemKind.SHORTHAND_PROPERTY,
    PageType.CSS_TYPE: ItemKind.TYPE,
}

# CSS pages that have no formal syntax of their own.
UNSUPPORTED_CSS_PAGES = frozenset({
    PageType.CSS_COMBINATOR,
    PageType.CSS_KEYWORD,
    PageType.CSS_MEDIA_FEATURE,
    PageType.CSS_MODULE,
    PageType.CSS_PSEUDO_CLASS,
    PageType.CSS_PSEUDO_ELEMENT,
    PageType.CSS_SELECTOR,
})


@dataclass
class PageEnv:
    """The page a macro is expanded on."""
    slug: str
    locale: str = DEFAULT_LOCALE
    page_type: PageType = PageType.OTHER
    data: CssData | None = None
    localization: Localization | None = None
    links: LinkResolver | None = None


def item_for_page(env: PageEnv, name: str | None = None) -> CssItem:
    """Map a page to the dataset item its syntax block shows.

    The item name defaults to the last slug segment; descriptor pages take
    their at-rule from the segment before it (``Web/CSS/@font-face/src``).
    """
    segments = env.slug.rsplit("/", 2)
    slug_name = segments[-1]
    name = name or slug_name

    kind = ITEM_KINDS.get(env.page_type)
    if kind is ItemKind.AT_RULE_DESCRIPTOR:
        at_rule = segments[-2] if len(segments) > 1 else ""
        return CssItem(kind, name, at_rule=at_rule)
    if kind is not None:
        return CssItem(kind, name)

    if env.page_type in UNSUPPORTED_CSS_PAGES:
        logger.warning("CSS syntax not supported for %s", env.page_type.value)
        raise NoSyntaxFoundError(name)
    logger.error("No CSS page: %s", env.slug)
    raise CssPageTypeRequiredError(env.slug)


def csssyntax(env: PageEnv, name: str | None = None) -> str:
    """Formal syntax block for the item the page documents."""
    item = item_for_page(env, name)
    return render(
        item,
        env.locale,
        data=env.data,
        links=env.links,
        localization=env.localization,
    )


def csssyntaxraw(env: PageEnv, syntax: str) -> str:
    """Formal syntax block for a grammar written in the page source.

    The grammar arrives HTML-escaped from the page and is decoded first. A
    grammar without a name is already printed by the page, so only the
    grammars it references are shown.
    """
    return render(
        html.unescape(syntax),
        env.locale,
        data=env.data,
        links=env.links,
        localization=env.localization,
        hide_bare_grammar=True,
    )
