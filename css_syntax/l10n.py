"""Localized copy for formal syntax blocks: punctuation tooltips and labels."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

import yaml

from .ast_nodes import Combinator
from .errors import DataError

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en-US"
LOCALES = ("en-US", "es", "fr", "ja", "ko", "pt-BR", "ru", "zh-CN", "zh-TW")
BUNDLED_L10N = Path(__file__).with_name("l10n.yaml")

TOOLTIP_DOMAIN = "CSSSyntax"
COMMON_DOMAIN = "Common"


class LinkedToken(Enum):
    """Punctuation that links to a section of the value definition syntax guide.

    The value is the fragment (anchor) of that section.
    """
    ASTERISK = "asterisk"
    PLUS = "plus"
    QUESTION_MARK = "question_mark"
    CURLY_BRACES = "curly_braces"
    HASH_MARK = "hash_mark"
    EXCLAMATION_POINT = "exclamation_point_!"
    BRACKETS = "brackets"
    SINGLE_BAR = "single_bar"
    DOUBLE_BAR = "double_bar"
    DOUBLE_AMPERSAND = "double_ampersand"
    JUXTAPOSITION = "juxtaposition"

    @property
    def fragment(self) -> str:
        return self.value

    @property
    def key(self) -> str:
        """Key of the tooltip text in the localization file."""
        return self.name.lower()

    @classmethod
    def from_combinator(cls, combinator: Combinator) -> LinkedToken:
        return {
            Combinator.JUXTAPOSITION: cls.JUXTAPOSITION,
            Combinator.ALL_ANY_ORDER: cls.DOUBLE_AMPERSAND,
            Combinator.ONE_OR_MORE_ANY_ORDER: cls.DOUBLE_BAR,
            Combinator.EXACTLY_ONE: cls.SINGLE_BAR,
        }[combinator]


Tooltips = Mapping[LinkedToken, str]


class Localization:
    """Lookup table shaped ``{domain: {key: {locale: text}}}``."""

    def __init__(self, strings: Mapping[str, Any]):
        self.strings = strings

    @classmethod
    def load(cls, path: str | Path | None = None) -> Localization:
        """Load a localization file, or the bundled one when ``path`` is None."""
        path = Path(path) if path else BUNDLED_L10N
        try:
            strings = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise DataError(f"Cannot read localization file {path}: {e}") from e
        if not isinstance(strings, dict):
            raise DataError(f"Localization file must be a mapping: {path}")
        return cls(strings)

    def lookup(self, domain: str, key: str, locale: str = DEFAULT_LOCALE) -> str:
        """Return the text for ``locale``, falling back to en-US."""
        _check_locale(locale)
        return self._text(domain, key, locale)

    def tooltips(self, locale: str = DEFAULT_LOCALE) -> dict[LinkedToken, str]:
        _check_locale(locale)
        return {
            token: self._text(TOOLTIP_DOMAIN, token.key, locale)
            for token in LinkedToken
            if token is not LinkedToken.JUXTAPOSITION
        }

    def sources_label(self, locale: str = DEFAULT_LOCALE) -> str:
        return self.lookup(COMMON_DOMAIN, "sources", locale)

    def _text(self, domain: str, key: str, locale: str) -> str:
        entries = (self.strings.get(domain) or {}).get(key)
        if not entries:
            raise DataError(f"No localized text for {domain}.{key}")
        text = entries.get(locale)
        if text is None:
            text = entries.get(DEFAULT_LOCALE)
        if text is None:
            raise DataError(f"No {DEFAULT_LOCALE} text for {domain}.{key}")
        return text


def _check_locale(locale: str) -> None:
    if locale not in LOCALES:
        logger.warning("Unsupported locale %r, using %s", locale, DEFAULT_LOCALE)
