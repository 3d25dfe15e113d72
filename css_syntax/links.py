"""Link resolution: which grammar references get a reference-page hyperlink."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Protocol

from .l10n import DEFAULT_LOCALE

# Type names whose reference page lives under a different slug.
TYPE_SLUGS = {
    "color": "color_value",
    "position": "position_value",
}


class LinkKind(Enum):
    TYPE = "type"
    PROPERTY = "property"
    FUNCTION = "function"
    KEYWORD = "keyword"
    AT_RULE = "at-rule"


class LinkResolver(Protocol):
    def resolve(self, kind: LinkKind, name: str) -> str | None:
        """Return the URL of the reference page for ``name``, or None."""
        ...


class MdnLinkResolver:
    """Builds ``/{locale}/docs/Web/CSS/{slug}`` links.

    Without ``existing`` it trusts that every type, property and at-rule
    has a page and leaves functions and keywords unlinked. With a set of
    existing slugs it links any reference whose page is in the set.
    """

    DEFAULT_KINDS = frozenset({LinkKind.TYPE, LinkKind.PROPERTY, LinkKind.AT_RULE})

    def __init__(self, locale: str = DEFAULT_LOCALE, existing: Iterable[str] | None = None):
        self.locale = locale
        self.existing = None if existing is None else {s.lower() for s in existing}

    def slug(self, kind: LinkKind, name: str) -> str:
        if kind is LinkKind.TYPE:
            name = name.removesuffix("()")
            return TYPE_SLUGS.get(name, name)
        if kind is LinkKind.AT_RULE and not name.startswith("@"):
            return f"@{name}"
        return name

    def resolve(self, kind: LinkKind, name: str) -> str | None:
        slug = self.slug(kind, name)
        if self.existing is None:
            if kind not in self.DEFAULT_KINDS:
                return None
        elif slug.lower() not in self.existing:
            return None
        return f"/{self.locale}/docs/Web/CSS/{slug}"
