from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_HEURISTICS,
    FRENCH_KEYWORDS,
    AppConfig,
    DatabaseConfig,
    Heuristics,
    KeywordSet,
)

"""Config loader.

Responsibilities:
- Load the YAML config (default config/sheetshape.yml)
- Validate it against the bundled JSON schema (config_schema.json)
- Apply defaults for heuristics and keywords not overridden in the file
"""

__all__ = [
    "ConfigError",
    "SCHEMA_PATH",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the JSON schema.

    Args:
        data: Parsed YAML document

    Raises:
        ConfigError: If the schema file is missing or unreadable, or if the
            data fails validation (missing keys, wrong types, unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        location = ".".join(str(p) for p in e.absolute_path)
        suffix = f" (at {location})" if location else ""
        raise ConfigError(f"config validation failed: {e.message}{suffix}") from e


def _heuristics_from(raw: dict[str, Any]) -> Heuristics:
    if not raw:
        return DEFAULT_HEURISTICS
    return replace(DEFAULT_HEURISTICS, **raw)


def _keywords_from(raw: dict[str, Any]) -> KeywordSet:
    if not raw:
        return FRENCH_KEYWORDS
    overrides: dict[str, Any] = {}
    for key, value in raw.items():
        if isinstance(value, list):
            overrides[key] = tuple(str(v).lower() for v in value) if key != "synthetic_headers" else tuple(value)
        else:
            overrides[key] = value
    return replace(FRENCH_KEYWORDS, **overrides)


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    return AppConfig(
        source_directory=data["source_directory"],
        export_csv=data.get("export_csv", False),
        logs_directory=data.get("logs_directory", "./logs"),
        heuristics=_heuristics_from(data.get("heuristics") or {}),
        keywords=_keywords_from(data.get("keywords") or {}),
        database=db,
    )
