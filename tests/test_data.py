"""Tests for css_syntax.data."""

import json

import pytest

from css_syntax.data import CssData, CssItem, ItemKind, SpecLink, Syntax, is_versioned, normalize_name
from css_syntax.errors import DataError


class TestHelpers:

    @pytest.mark.parametrize("name, expected", [
        ("<length>", "length"),
        ("length", "length"),
        (" <rgb()> ", "rgb()"),
    ])
    def test_normalize_name(self, name, expected):
        assert normalize_name(name) == expected

    @pytest.mark.parametrize("shortname, expected", [
        ("css-values-4", True),
        ("css-box-4", True),
        ("css-values", False),
        ("compositing", False),
    ])
    def test_is_versioned(self, shortname, expected):
        assert is_versioned(shortname) is expected

    def test_item_labels(self):
        assert str(CssItem(ItemKind.PROPERTY, "padding")) == "property:padding"
        item = CssItem(ItemKind.AT_RULE_DESCRIPTOR, "src", at_rule="@font-face")
        assert str(item) == "@font-face/src"

    def test_syntax_equality_ignores_links(self):
        link = SpecLink("CSS", "https://example.com")
        assert Syntax("a", "b", (link,)) == Syntax("a", "b")


class TestLookups:

    def test_property(self, css_data):
        assert css_data.get_property_syntax("padding") == "<'padding-top'>{1,4}"

    def test_missing_property(self, css_data):
        assert css_data.get_property_syntax("nope") == ""

    def test_property_extended_by_new_values(self, css_data):
        assert css_data.get_property_syntax("display") == (
            "[ <display-outside> || <display-inside> ] | <display-box> | <display-legacy>"
        )

    def test_unversioned_property_preferred(self):
        data = CssData({
            "css-foo": {"properties": {"foo": {"value": "a | b"}}},
            "css-foo-3": {"properties": {"foo": {"value": "a"}}},
        })
        assert data.get_property_syntax("foo") == "a | b"

    def test_at_rule(self, css_data):
        assert css_data.get_at_rule_syntax("@media") == "@media <media-query-list> { <rule-list> }"
        assert css_data.get_at_rule_syntax("media") == "@media <media-query-list> { <rule-list> }"

    def test_at_rule_descriptor(self, css_data):
        assert css_data.get_at_rule_descriptor_syntax("width", "@media") == "<length>"
        assert css_data.get_at_rule_descriptor_syntax("font-display", "font-face").startswith("auto |")
        assert css_data.get_at_rule_descriptor_syntax("src", "@font-face") == ""

    def test_function(self, css_data):
        assert css_data.get_function_syntax("hue-rotate") == "hue-rotate( [ <angle> | <zero> ]? )"

    def test_type(self, css_data):
        assert css_data.get_type_syntax("length-percentage") == "<length> | <percentage>"
        assert css_data.get_type_syntax("length") == ""

    def test_specs_for(self, css_data):
        assert css_data.specs_for("display", "properties") == ["css-display-3", "css-display-4"]


class TestIndex:

    def test_unversioned_spec_wins(self):
        data = CssData({
            "css-values": {"values": {"<x>": {"type": "type", "value": "new"}}},
            "css-values-3": {"values": {"<x>": {"type": "type", "value": "old"}}},
        })
        assert data.get_type_syntax("x") == "new"

    def test_nested_values_indexed(self):
        data = CssData({
            "css-grid-2": {
                "properties": {
                    "grid": {
                        "value": "<track-list>",
                        "values": {"<track-list>": {"type": "type", "value": "<track-size>+"}},
                    },
                },
            },
        })
        assert data.get_type_syntax("track-list") == "<track-size>+"

    def test_nested_values_do_not_override(self):
        data = CssData({
            "css-a": {
                "values": {
                    "<y>": {
                        "type": "type",
                        "value": "top",
                        "values": {"<y>": {"type": "type", "value": "nested"}},
                    },
                },
            },
        })
        assert data.get_type_syntax("y") == "top"

    def test_value_section(self):
        data = CssData({"css-a": {"values": {"auto": {"type": "value", "value": "auto"}}}})
        assert data.get_type_syntax("auto") == "auto"


class TestGetSyntax:

    def test_property_with_links(self, css_data):
        syntax = css_data.get_syntax(CssItem(ItemKind.PROPERTY, "padding"))
        assert syntax.name == "padding"
        assert syntax.spec_links == (
            SpecLink("CSS Box Model Module Level 4", "https://drafts.csswg.org/css-box-4/#propdef-padding"),
        )

    def test_property_reference_name_trimmed(self, css_data):
        syntax = css_data.get_syntax(CssItem(ItemKind.PROPERTY, "<'padding-top'>"))
        assert syntax.syntax == "<length-percentage [0,∞]>"

    def test_shorthand_property(self, css_data):
        syntax = css_data.get_syntax(CssItem(ItemKind.SHORTHAND_PROPERTY, "padding"))
        assert syntax.syntax == "<'padding-top'>{1,4}"

    def test_function_name(self, css_data):
        syntax = css_data.get_syntax(CssItem(ItemKind.FUNCTION, "hue-rotate()"))
        assert syntax.name == "<hue-rotate()>"
        assert syntax.spec_links == (SpecLink("filter-effects-1", ""),)

    def test_type_value_suffix_stripped(self, css_data):
        syntax = css_data.get_syntax(CssItem(ItemKind.TYPE, "position_value"))
        assert syntax.name == "<position>"
        assert syntax.syntax.startswith("[ left | center | right ]")

    def test_skipped_type(self, css_data):
        assert css_data.get_syntax(CssItem(ItemKind.TYPE, "color")).syntax == ""
        assert css_data.get_syntax(CssItem(ItemKind.TYPE, "color"), top_level=True).syntax != ""

    def test_type_restating_name(self):
        data = CssData({"css-a": {"values": {"<ident>": {"type": "type", "value": "<ident>"}}}})
        assert data.get_syntax(CssItem(ItemKind.TYPE, "ident")) == Syntax("<ident>", "")

    def test_descriptor(self, css_data):
        item = CssItem(ItemKind.AT_RULE_DESCRIPTOR, "width", at_rule="media")
        assert css_data.get_syntax(item) == Syntax("width", "<length>")

    def test_at_rule(self, css_data):
        syntax = css_data.get_syntax(CssItem(ItemKind.AT_RULE, "@font-face"))
        assert syntax.syntax == "@font-face { <declaration-list> }"


class TestLoading:

    def test_from_file(self, dataset_file):
        data = CssData.from_path(dataset_file)
        assert data.get_property_syntax("padding") == "<'padding-top'>{1,4}"

    def test_from_directory(self, tmp_path, sample_specs):
        for shortname, spec in sample_specs.items():
            (tmp_path / f"{shortname}.json").write_text(json.dumps(spec), encoding="utf-8")
        (tmp_path / "package.json").write_text('{"name": "webref"}', encoding="utf-8")
        data = CssData.from_path(tmp_path)
        assert "package" not in data.specs
        assert data.get_function_syntax("hue-rotate") == "hue-rotate( [ <angle> | <zero> ]? )"

    def test_missing_path(self, tmp_path):
        with pytest.raises(DataError, match="not found"):
            CssData.from_path(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(DataError, match="Cannot read dataset"):
            CssData.from_path(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(DataError):
            CssData.from_path(path)

    def test_empty_dataset(self):
        data = CssData()
        assert data.get_syntax(CssItem(ItemKind.TYPE, "length")) == Syntax("<length>", "")
