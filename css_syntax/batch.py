"""Batch rendering: formal syntax blocks for many items in one run.

Items render independently; one failure never aborts the batch. Items with
no syntax in the dataset are recorded as skipped.

Manifest format (YAML):

    locale: en-US
    items:
      - property: padding
      - type: length-percentage
      - at-rule-descriptor: src
        at-rule: "@font-face"
      - raw: "<my-type> = a | b"
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

import yaml

from .data import CssData, CssItem, ItemKind
from .errors import CssSyntaxError, DataError, NoSyntaxFoundError
from .l10n import DEFAULT_LOCALE, Localization
from .links import LinkResolver
from .logging import BatchLog, RenderLogger
from .renderer import MAX_LINE_LEN, render

logger = logging.getLogger(__name__)

BatchItem = Union[CssItem, str]


@dataclass
class ItemResult:
    """Outcome of rendering one item."""
    label: str
    html: str | None = None
    error: str | None = None
    skipped: bool = False

    @property
    def success(self) -> bool:
        return self.html is not None


@dataclass
class BatchResult:
    """Results in input order plus the run log."""
    results: list[ItemResult] = field(default_factory=list)
    log: BatchLog | None = None

    @property
    def success(self) -> bool:
        return all(r.error is None for r in self.results)

    @property
    def rendered(self) -> list[ItemResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[ItemResult]:
        return [r for r in self.results if r.error is not None]

    @property
    def skipped(self) -> list[ItemResult]:
        return [r for r in self.results if r.skipped]

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "results": [
                {k: v for k, v in vars(r).items() if v not in (None, False)}
                for r in self.results
            ],
            "log": self.log.to_dict() if self.log else None,
        }


def item_label(item: BatchItem) -> str:
    if isinstance(item, CssItem):
        return str(item)
    return f"raw:{item.strip()}"


class BatchRenderer:
    """Render many items against one dataset and locale.

    Usage:
        renderer = BatchRenderer(CssData.from_path("css.json"))
        result = renderer.render_all([CssItem(ItemKind.PROPERTY, "padding")], workers=4)
        print(result.log.summary())
    """

    def __init__(
        self,
        data: CssData | None = None,
        locale: str = DEFAULT_LOCALE,
        localization: Localization | None = None,
        links: LinkResolver | None = None,
        value_definition_url: str | None = None,
        max_line_len: int = MAX_LINE_LEN,
    ):
        self.data = data or CssData()
        self.locale = locale
        self.localization = localization or Localization.load()
        self.links = links
        self.value_definition_url = value_definition_url
        self.max_line_len = max_line_len
        self._tooltips = self.localization.tooltips(locale)

    def render_all(self, items: list[BatchItem], workers: int = 1, name: str = "batch") -> BatchResult:
        """Render every item; ``workers > 1`` renders on a thread pool."""
        run_log = RenderLogger(name)

        if workers > 1 and len(items) > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                results = list(pool.map(lambda item: self._render_one(item, run_log), items))
        else:
            results = [self._render_one(item, run_log) for item in items]

        return BatchResult(results=results, log=run_log.finish())

    def _render_one(self, item: BatchItem, run_log: RenderLogger) -> ItemResult:
        label = item_label(item)
        run_log.start_item(label)
        try:
            html = render(
                item,
                self.locale,
                self._tooltips,
                data=self.data,
                links=self.links,
                localization=self.localization,
                value_definition_url=self.value_definition_url,
                max_line_len=self.max_line_len,
            )
        except NoSyntaxFoundError as e:
            logger.warning("Skipping %s: %s", label, e)
            run_log.skip_item(label, str(e))
            return ItemResult(label=label, skipped=True)
        except CssSyntaxError as e:
            logger.error("Failed to render %s: %s", label, e)
            run_log.fail_item(label, str(e))
            return ItemResult(label=label, error=str(e))
        run_log.complete_item(label, html)
        return ItemResult(label=label, html=html)


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

def parse_manifest_item(entry: Any) -> BatchItem:
    """Turn one manifest entry into a selector or a raw grammar."""
    if isinstance(entry, str):
        return entry
    if not isinstance(entry, dict):
        raise DataError(f"Invalid manifest item: {entry!r}")
    if "raw" in entry:
        return str(entry["raw"])
    descriptor = ItemKind.AT_RULE_DESCRIPTOR.value
    if descriptor in entry:
        if not entry.get("at-rule"):
            raise DataError(f"Descriptor {entry[descriptor]!r} needs an 'at-rule'")
        return CssItem(ItemKind.AT_RULE_DESCRIPTOR, str(entry[descriptor]), at_rule=entry["at-rule"])
    for kind in ItemKind:
        if kind.value in entry:
            return CssItem(kind, str(entry[kind.value]))
    raise DataError(f"Manifest item has no known kind: {entry!r}")


def load_manifest(path: str | Path) -> tuple[list[BatchItem], dict[str, Any]]:
    """Read a YAML manifest; returns the items and the remaining options."""
    path = Path(path)
    try:
        doc = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise DataError(f"Cannot read manifest {path}: {e}") from e
    if isinstance(doc, list):
        doc = {"items": doc}
    if not isinstance(doc, dict) or not isinstance(doc.get("items"), list):
        raise DataError(f"Manifest must contain an 'items' list: {path}")
    items = [parse_manifest_item(entry) for entry in doc["items"]]
    options = {k: v for k, v in doc.items() if k != "items"}
    return items, options
