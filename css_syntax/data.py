"""Grammar dataset: resolves CSS items to their value definition syntax.

Reads webref-style JSON, either a single file mapping spec shortnames to
specs or a directory holding one ``<shortname>.json`` per spec:

    {
      "css-box-4": {
        "spec": {"title": "CSS Box Model Module Level 4", "url": "https://..."},
        "properties": {"padding": {"name": "padding", "value": "<'padding-top'>{1,4}", "href": "..."}},
        "atrules": {"@media": {"value": "...", "descriptors": {"width": {"value": "<length>"}}}},
        "values": {"<length-percentage>": {"type": "type", "value": "<length> | <percentage>"}}
      }
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from .errors import DataError

logger = logging.getLogger(__name__)

VALUE_SECTIONS = {"type": "types", "function": "functions", "value": "values"}

# Types that are never expanded as constituents of another syntax.
SKIPPED_TYPES = frozenset({"color", "gradient"})


class ItemKind(Enum):
    AT_RULE = "at-rule"
    AT_RULE_DESCRIPTOR = "at-rule-descriptor"
    FUNCTION = "function"
    PROPERTY = "property"
    SHORTHAND_PROPERTY = "shorthand-property"
    TYPE = "type"


@dataclass(frozen=True)
class CssItem:
    """Selects one entry of the dataset.

    ``at_rule`` is only used by AT_RULE_DESCRIPTOR items and names the
    at-rule the descriptor belongs to (``@font-face``).
    """
    kind: ItemKind
    name: str
    at_rule: str | None = None

    def __str__(self) -> str:
        if self.kind is ItemKind.AT_RULE_DESCRIPTOR:
            return f"{self.at_rule}/{self.name}"
        return f"{self.kind.value}:{self.name}"


@dataclass(frozen=True)
class SpecLink:
    title: str
    url: str


@dataclass(frozen=True)
class Syntax:
    """A named grammar; an empty ``syntax`` means nothing was found.

    Spec links do not take part in equality.
    """
    name: str
    syntax: str
    spec_links: tuple[SpecLink, ...] = field(default=(), compare=False)


def normalize_name(name: str) -> str:
    """Strip the angle brackets used by some dataset keys: ``<length>`` -> ``length``."""
    return name.strip().lstrip("<").rstrip(">")


def is_versioned(shortname: str) -> bool:
    """True for level-specific shortnames such as ``css-values-5``."""
    return shortname.rsplit("-", 1)[-1].isdigit()


def _grammar(entry: Mapping[str, Any]) -> str:
    return entry.get("value") or entry.get("syntax") or ""


class CssData:
    """In-memory index over a webref-style CSS dataset."""

    def __init__(self, specs: Mapping[str, Mapping[str, Any]] | None = None):
        self.specs: dict[str, Mapping[str, Any]] = dict(sorted((specs or {}).items()))
        self._index: dict[str, dict[str, tuple[Mapping[str, Any], str]]] = {
            section: {} for section in VALUE_SECTIONS.values()
        }
        self._flatten()

    @classmethod
    def from_path(cls, path: str | Path) -> CssData:
        """Load a dataset from a JSON file or a directory of JSON files."""
        path = Path(path)
        if path.is_dir():
            specs: dict[str, Any] = {}
            for file in sorted(path.glob("*.json")):
                if file.name == "package.json":
                    continue
                specs[file.stem] = _read_json(file)
        elif path.is_file():
            specs = _read_json(path)
        else:
            raise DataError(f"Dataset not found: {path}")

        if not isinstance(specs, dict):
            raise DataError(f"Dataset must map spec shortnames to specs: {path}")
        logger.debug("Loaded %d specs from %s", len(specs), path)
        return cls(specs)

    # ------------------------------------------------------------------
    # Flattened value index
    # ------------------------------------------------------------------

    def _flatten(self) -> None:
        # Unversioned specs go last so that their entries win.
        order = sorted(
            self.specs,
            key=lambda name: (name.rstrip("0123456789-"), not is_versioned(name), name),
        )
        for shortname in order:
            spec = self.specs[shortname]
            for key, item in (spec.get("values") or {}).items():
                section = VALUE_SECTIONS.get(item.get("type", ""))
                if section:
                    self._index[section][normalize_name(key)] = (item, shortname)
                self._flatten_nested(item.get("values"), shortname)
            for item in (spec.get("properties") or {}).values():
                self._flatten_nested(item.get("values"), shortname)

    def _flatten_nested(self, values: Mapping[str, Any] | None, shortname: str) -> None:
        for key, item in (values or {}).items():
            section = VALUE_SECTIONS.get(item.get("type", ""))
            if section:
                self._index[section].setdefault(normalize_name(key), (item, shortname))
            self._flatten_nested(item.get("values"), shortname)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def specs_for(self, name: str, section: str) -> list[str]:
        """Shortnames of the specs whose ``section`` lists ``name``, in order."""
        return [
            shortname
            for shortname, spec in self.specs.items()
            if name in (spec.get(section) or {})
        ]

    def get_property_syntax(self, name: str) -> str:
        return self._property(name)[0]

    def get_at_rule_syntax(self, name: str) -> str:
        return self._at_rule(name)[0]

    def get_at_rule_descriptor_syntax(self, name: str, at_rule: str) -> str:
        return self._descriptor(name, at_rule)[0]

    def get_function_syntax(self, name: str) -> str:
        return self._value("functions", f"{name}()")[0]

    def get_type_syntax(self, name: str) -> str:
        syntax = self._value("types", name)
        if not syntax[0]:
            syntax = self._value("values", name)
        return syntax[0]

    def _property(self, name: str) -> tuple[str, tuple[SpecLink, ...]]:
        specs = self.specs_for(name, "properties")
        if len(specs) > 1:
            specs = [s for s in specs if not is_versioned(s)] or specs
        if len(specs) == 1:
            entry = self.specs[specs[0]]["properties"][name]
            return _grammar(entry), (self._link(specs[0], entry),)

        # One spec defines the base value, the others extend it with newValues.
        syntax, new_values, links = "", "", []
        for shortname in specs:
            entry = self.specs[shortname]["properties"][name]
            syntax += _grammar(entry)
            if entry.get("newValues"):
                new_values += f" | {entry['newValues']}"
            links.append(self._link(shortname, entry))
        return syntax + new_values, tuple(links)

    def _at_rule(self, name: str) -> tuple[str, tuple[SpecLink, ...]]:
        name = _at_name(name)
        for shortname in self.specs_for(name, "atrules"):
            entry = self.specs[shortname]["atrules"][name]
            if _grammar(entry):
                return _grammar(entry), (self._link(shortname, entry),)
        return "", ()

    def _descriptor(self, name: str, at_rule: str) -> tuple[str, tuple[SpecLink, ...]]:
        at_rule = _at_name(at_rule)
        for shortname in self.specs_for(at_rule, "atrules"):
            descriptors = self.specs[shortname]["atrules"][at_rule].get("descriptors") or {}
            entry = descriptors.get(name)
            if entry and _grammar(entry):
                return _grammar(entry), (self._link(shortname, entry),)
        return "", ()

    def _value(self, section: str, name: str) -> tuple[str, tuple[SpecLink, ...]]:
        found = self._index[section].get(name)
        if found is None:
            return "", ()
        entry, shortname = found
        return _grammar(entry), (self._link(shortname, entry),)

    def _link(self, shortname: str, entry: Mapping[str, Any]) -> SpecLink:
        spec = self.specs[shortname].get("spec") or {}
        title = spec.get("title") or shortname
        return SpecLink(title=title, url=entry.get("href") or spec.get("url") or "")

    # ------------------------------------------------------------------
    # Selectors
    # ------------------------------------------------------------------

    def get_syntax(self, item: CssItem, top_level: bool = False) -> Syntax:
        """Resolve ``item`` to a named grammar.

        ``top_level`` is set for the item a page is about; it allows the
        skipped types (``<color>``, ``<gradient>``) to resolve.
        """
        kind, name = item.kind, item.name

        if kind in (ItemKind.PROPERTY, ItemKind.SHORTHAND_PROPERTY):
            trimmed = name.lstrip("<'").rstrip("'>")
            syntax, links = self._property(trimmed)
            return Syntax(name, syntax, links)

        if kind is ItemKind.AT_RULE:
            syntax, links = self._at_rule(name)
            return Syntax(name, syntax, links)

        if kind is ItemKind.AT_RULE_DESCRIPTOR:
            syntax, links = self._descriptor(name, item.at_rule or "")
            return Syntax(name, syntax, links)

        if kind is ItemKind.FUNCTION:
            name = name.removesuffix("()")
            syntax, links = self._value("functions", f"{name}()")
            return Syntax(f"<{name}()>", syntax, links)

        if kind is ItemKind.TYPE:
            name = normalize_name(name).removesuffix("_value")
            formatted = f"<{name}>"
            if name in SKIPPED_TYPES and not top_level:
                return Syntax(formatted, "")
            syntax, links = self._value("types", name)
            if not syntax:
                syntax, links = self._value("values", name)
            if syntax in (name, formatted):
                return Syntax(formatted, "")
            return Syntax(formatted, syntax, links)

        raise DataError(f"Unsupported item kind: {kind}")


def _at_name(name: str) -> str:
    return name if name.startswith("@") else f"@{name}"


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise DataError(f"Cannot read dataset {path}: {e}") from e
