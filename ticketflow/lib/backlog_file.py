"""
Backlog file access for the CLI.

The core never touches the filesystem; commands go through these helpers
to read, parse and write a backlog file.
"""

import logging
from pathlib import Path
from typing import Optional

from ticketflow.backlog import Backlog, DialectConfig, Item, parse_backlog, serialize_backlog
from ticketflow.backlog.parser import iter_items

logger = logging.getLogger(__name__)


class BacklogFileError(Exception):
    """Backlog file missing or unreadable."""


def read_backlog_text(path: Path) -> str:
    if not path.exists():
        raise BacklogFileError(f"Backlog file not found: {path}")
    return path.read_text(encoding="utf-8")


def load_backlog(
    path: Path,
    dialect: DialectConfig,
    diagnostics: Optional[list] = None,
) -> tuple[str, Backlog]:
    """Read and parse a backlog file.

    Returns:
        (text as read, parsed Backlog)

    Raises:
        BacklogFileError: file missing
        BacklogParseError: file does not parse
    """
    text = read_backlog_text(path)
    backlog = parse_backlog(text, diagnostics=diagnostics, config=dialect)
    logger.debug(f"Loaded {path} ({len(backlog.sections)} sections)")
    return text, backlog


def write_backlog(path: Path, backlog: Backlog) -> None:
    path.write_text(serialize_backlog(backlog), encoding="utf-8")
    logger.debug(f"Wrote {path}")


def find_item(backlog: Backlog, item_id: str) -> Optional[Item]:
    """First item with item_id, matching the deduplicated view."""
    return next((item for item in iter_items(backlog) if item.id == item_id), None)


def screenshots_dir(path: Path, dialect: DialectConfig) -> Path:
    """Absolute screenshots folder next to the backlog file."""
    return (path.parent / dialect.assets_dir / "screenshots").resolve()
