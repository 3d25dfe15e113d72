"""Settings: YAML config file plus environment overrides.

Lookup order, later wins:
  1. defaults below
  2. ``css-syntax.yaml`` in the working directory, or an explicit path
  3. CSS_SYNTAX_DATA, CSS_SYNTAX_L10N, CSS_SYNTAX_LOCALE, CSS_SYNTAX_WORKERS
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import DataError
from .l10n import DEFAULT_LOCALE
from .renderer import DEFAULT_VALUE_DEFINITION_URL, MAX_LINE_LEN

CONFIG_FILE = "css-syntax.yaml"

ENV_VARS = {
    "CSS_SYNTAX_DATA": "data_path",
    "CSS_SYNTAX_L10N": "l10n_path",
    "CSS_SYNTAX_LOCALE": "locale",
    "CSS_SYNTAX_WORKERS": "workers",
}


@dataclass
class Settings:
    data_path: str | None = None
    l10n_path: str | None = None
    locale: str = DEFAULT_LOCALE
    value_definition_url: str = DEFAULT_VALUE_DEFINITION_URL
    max_line_len: int = MAX_LINE_LEN
    workers: int = 1

    @classmethod
    def load(
        cls,
        path: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> Settings:
        """Build settings from the config file and the environment.

        An explicit ``path`` must exist; the default file is optional.
        """
        settings = cls()
        if path is not None:
            settings.update(_read_config(Path(path)))
        elif Path(CONFIG_FILE).is_file():
            settings.update(_read_config(Path(CONFIG_FILE)))

        environ = os.environ if environ is None else environ
        settings.update({
            key: environ[var] for var, key in ENV_VARS.items() if environ.get(var)
        })
        return settings

    def update(self, values: Mapping[str, Any]) -> None:
        known = {f.name: f for f in fields(self)}
        for key, value in values.items():
            key = key.replace("-", "_")
            if key not in known:
                raise DataError(f"Unknown setting: {key}")
            if key in ("workers", "max_line_len"):
                try:
                    value = int(value)
                except (TypeError, ValueError) as e:
                    raise DataError(f"Setting {key} must be an integer, got {value!r}") from e
                if value < 1:
                    raise DataError(f"Setting {key} must be at least 1")
            setattr(self, key, value)

    def value_definition_url_for(self, locale: str | None = None) -> str:
        return self.value_definition_url.format(locale=locale or self.locale)


def _read_config(path: Path) -> dict[str, Any]:
    try:
        doc = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise DataError(f"Cannot read config {path}: {e}") from e
    if doc is None:
        return {}
    if not isinstance(doc, dict):
        raise DataError(f"Config must be a mapping: {path}")
    return doc
