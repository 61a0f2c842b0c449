"""
Dialect configuration.

Loads ticketflow.yaml to adjust how a backlog file is read and how edited
items are rendered. If no config file exists, returns defaults matching
the built-in dialect.

Example ticketflow.yaml:

    language: en              # labels used when an item is regenerated (fr, en)
    raw_sections:             # extra section titles kept verbatim
      - Glossary
    section_types:            # extra section title -> type id aliases
      FEATURES: FEAT
    assets_dir: .backlog-assets
"""

import logging
from pathlib import Path
from typing import Optional

import yaml

from ticketflow.backlog.dialect import DialectConfig
from ticketflow.backlog.patterns import ASSETS_FOLDER_NAME, DEFAULT_LANGUAGE
from ticketflow.lib import validate

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "ticketflow.yaml"


def find_config(backlog_path: Path) -> Optional[Path]:
    """Return ticketflow.yaml next to the backlog file, if any."""
    candidate = backlog_path.parent / CONFIG_FILENAME
    return candidate if candidate.exists() else None


def load_dialect_config(config_path: Optional[Path]) -> DialectConfig:
    """Load a dialect config file and return DialectConfig.

    If config_path is None or the file doesn't exist, returns defaults.
    Unreadable or invalid files are logged and ignored.
    """
    if config_path is None or not config_path.exists():
        return DialectConfig()

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        validate.validate(data, "config")
    except (yaml.YAMLError, validate.ValidationError) as e:
        logger.warning(f"Failed to parse {config_path}: {e}")
        return DialectConfig()

    return DialectConfig(
        language=data.get("language", DEFAULT_LANGUAGE),
        raw_sections=tuple(data.get("raw_sections", ())),
        section_types={k.strip().upper(): v for k, v in data.get("section_types", {}).items()},
        assets_dir=data.get("assets_dir", ASSETS_FOLDER_NAME),
    )
