"""
Backlog core: parse a markdown backlog into typed models and write it back.

Pure text transformation, no I/O. parse_backlog followed by
serialize_backlog reproduces the normalized input exactly; update_item and
toggle_criterion rebuild only the block of the item they touch.
"""

from ticketflow.backlog.dialect import DialectConfig
from ticketflow.backlog.errors import BacklogParseError, MalformedHeaderError, UnknownItemTypeError
from ticketflow.backlog.models import (
    Backlog,
    Criterion,
    EntryKind,
    Item,
    ParseWarning,
    RawSection,
    Screenshot,
    Section,
    TableGroup,
    TableRow,
)
from ticketflow.backlog.normalize import normalize_markdown
from ticketflow.backlog.parser import get_all_items, get_items_by_type, parse_backlog
from ticketflow.backlog.placement import add_item, find_target_section_index, generate_item_id
from ticketflow.backlog.serializer import (
    build_item_markdown,
    export_item_for_clipboard,
    replace_item,
    serialize_backlog,
    toggle_criterion,
    update_item,
)
from ticketflow.backlog.toc import rebuild_table_of_contents, remove_section

__all__ = [
    "Backlog",
    "BacklogParseError",
    "Criterion",
    "DialectConfig",
    "EntryKind",
    "Item",
    "MalformedHeaderError",
    "ParseWarning",
    "RawSection",
    "Screenshot",
    "Section",
    "TableGroup",
    "TableRow",
    "UnknownItemTypeError",
    "add_item",
    "build_item_markdown",
    "export_item_for_clipboard",
    "find_target_section_index",
    "generate_item_id",
    "get_all_items",
    "get_items_by_type",
    "normalize_markdown",
    "parse_backlog",
    "rebuild_table_of_contents",
    "remove_section",
    "replace_item",
    "serialize_backlog",
    "toggle_criterion",
    "update_item",
]
