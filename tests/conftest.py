"""Shared fixtures for css-syntax tests."""

import json

import pytest

from css_syntax.data import CssData
from css_syntax.l10n import LinkedToken, Localization

VALUE_DEFINITION_URL = "/en-US/docs/Web/CSS/Value_definition_syntax"

TOOLTIPS = {
    LinkedToken.ASTERISK: "Asterisk: the entity may occur zero, one or several times",
    LinkedToken.PLUS: "Plus: the entity may occur one or several times",
    LinkedToken.QUESTION_MARK: "Question mark: the entity is optional",
    LinkedToken.CURLY_BRACES: (
        "Curly braces: encloses two integers defining the minimal and maximal numbers "
        "of occurrences of the entity, or a single integer defining the exact number required"
    ),
    LinkedToken.HASH_MARK: (
        "Hash mark: the entity is repeated one or several times, "
        "each occurrence separated by a comma"
    ),
    LinkedToken.EXCLAMATION_POINT: "Exclamation point: the group must produce at least one value",
    LinkedToken.BRACKETS: (
        "Brackets: enclose several entities, combinators, and multipliers "
        "to transform them as a single component"
    ),
    LinkedToken.SINGLE_BAR: "Single bar: exactly one of the entities must be present",
    LinkedToken.DOUBLE_BAR: "Double bar: one or several of the entities must be present, in any order",
    LinkedToken.DOUBLE_AMPERSAND: "Double ampersand: all of the entities must be present, in any order",
}


# ---------------------------------------------------------------------------
# Sample dataset
# ---------------------------------------------------------------------------

BOX = "https://drafts.csswg.org/css-box-4/"
VALUES = "https://drafts.csswg.org/css-values-4/"

SAMPLE_SPECS = {
    "css-box-4": {
        "spec": {"title": "CSS Box Model Module Level 4", "url": BOX},
        "properties": {
            "padding": {
                "name": "padding",
                "value": "<'padding-top'>{1,4}",
                "href": BOX + "#propdef-padding",
            },
            "padding-top": {
                "name": "padding-top",
                "value": "<length-percentage [0,∞]>",
                "href": BOX + "#propdef-padding-top",
            },
        },
    },
    "css-values-4": {
        "spec": {"title": "CSS Values and Units Module Level 4", "url": VALUES},
        "values": {
            "<length-percentage>": {
                "name": "<length-percentage>",
                "type": "type",
                "value": "<length> | <percentage>",
                "href": VALUES + "#typedef-length-percentage",
            },
            "<length>": {"name": "<length>", "type": "type", "href": VALUES + "#lengths"},
            "<percentage>": {"name": "<percentage>", "type": "type"},
            "<position>": {
                "name": "<position>",
                "type": "type",
                "value": "[ left | center | right ] || [ top | center | bottom ]",
            },
        },
    },
    "css-color-4": {
        "properties": {"color": {"name": "color", "value": "<color>"}},
        "values": {
            "<color>": {
                "name": "<color>",
                "type": "type",
                "value": "<color-base> | currentColor | <system-color>",
            },
        },
    },
    "filter-effects-1": {
        "values": {
            "hue-rotate()": {
                "name": "hue-rotate()",
                "type": "function",
                "value": "hue-rotate( [ <angle> | <zero> ]? )",
            },
        },
    },
    "css-display-3": {
        "properties": {
            "display": {"name": "display", "value": "[ <display-outside> || <display-inside> ] | <display-box>"},
        },
        "values": {
            "<display-box>": {"name": "<display-box>", "type": "type", "value": "contents | none"},
        },
    },
    "css-display-4": {
        "properties": {
            "display": {"name": "display", "newValues": "<display-legacy>"},
        },
    },
    "mediaqueries-5": {
        "atrules": {
            "@media": {
                "name": "@media",
                "value": "@media <media-query-list> { <rule-list> }",
                "descriptors": {"width": {"name": "width", "value": "<length>"}},
            },
        },
    },
    "css-fonts-4": {
        "atrules": {
            "@font-face": {
                "name": "@font-face",
                "value": "@font-face { <declaration-list> }",
                "descriptors": {
                    "font-display": {
                        "name": "font-display",
                        "value": "auto | block | swap | fallback | optional",
                    },
                },
            },
        },
    },
}


@pytest.fixture
def sample_specs():
    return json.loads(json.dumps(SAMPLE_SPECS))


@pytest.fixture
def css_data():
    return CssData(SAMPLE_SPECS)


@pytest.fixture
def dataset_file(tmp_path):
    path = tmp_path / "css.json"
    path.write_text(json.dumps(SAMPLE_SPECS), encoding="utf-8")
    return path


@pytest.fixture
def tooltips():
    return dict(TOOLTIPS)


@pytest.fixture
def localization():
    return Localization.load()
