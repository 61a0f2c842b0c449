"""
Backlog serializer and item mutators.

Serialization concatenates the verbatim text kept by the parser, so an
unmodified backlog comes back byte for byte. Mutators never patch text in
place: they return a new Item whose raw_markdown is rebuilt from its fields
in canonical order. Only that item's block changes in the output.
"""

import dataclasses
import logging
from typing import Any, Optional

from ticketflow.backlog.models import (
    Backlog,
    Criterion,
    EntryKind,
    Item,
    Screenshot,
    SectionEntry,
)
from ticketflow.backlog.patterns import ASSETS_FOLDER_NAME, DEFAULT_LANGUAGE, LABELS, LabelSet
from ticketflow.backlog.screenshots import screenshot_markdown_ref

logger = logging.getLogger(__name__)

PROTECTED_FIELDS = frozenset({"id", "type", "raw_markdown", "section_index", "kind"})
EDITABLE_FIELDS = frozenset(f.name for f in dataclasses.fields(Item)) - PROTECTED_FIELDS
LIST_FIELDS = frozenset({"specs", "reproduction", "criteria", "dependencies", "constraints", "screens", "screenshots"})


def entry_markdown(entry: SectionEntry) -> str:
    """Verbatim text of a section entry."""
    if entry.kind in (EntryKind.ITEM, EntryKind.TABLE_GROUP, EntryKind.RAW_SECTION):
        return entry.raw_markdown
    raise ValueError(f"Unknown entry kind: {entry.kind!r}")


def serialize_backlog(backlog: Backlog) -> str:
    """Rebuild document text from a Backlog, ending with a newline."""
    parts = [backlog.header, backlog.table_of_contents, backlog.header_tail]
    for section in backlog.sections:
        parts.append(section.raw_header + "\n")
        parts.append(section.intro)
        parts.extend(entry_markdown(entry) for entry in section.entries)

    result = "".join(parts)
    if result and not result.endswith("\n"):
        result += "\n"
    return result


def _numbered(items: list[str]) -> list[str]:
    return [f"{i}. {value}" for i, value in enumerate(items, start=1)]


def _bulleted(items: list[str]) -> list[str]:
    return [f"- {value}" for value in items]


def _screenshot_line(
    screenshot: Screenshot,
    screenshot_base_path: Optional[str],
    assets_dir: str,
) -> str:
    if screenshot_base_path:
        alt = screenshot.alt or screenshot.filename.rsplit(".", 1)[0]
        base = str(screenshot_base_path).rstrip("/\\")
        return f"![{alt}]({base}/{screenshot.filename})"
    return screenshot_markdown_ref(screenshot.filename, screenshot.alt, assets_dir)


def build_item_markdown(
    item: Item,
    labels: LabelSet = None,
    screenshot_base_path: Optional[str] = None,
    assets_dir: str = ASSETS_FOLDER_NAME,
) -> str:
    """Render an item as a canonical block.

    Order: header, metadata lines, user story, then the lists
    (reproduction, specs, screens, criteria, dependencies, constraints,
    screenshots). Empty fields are left out. The block ends with a blank
    line, a `---` rule and another blank line.

    Args:
        item: Item to render
        labels: Label set for metadata keys, French by default
        screenshot_base_path: Absolute screenshots folder; when given,
            image references point there instead of the assets folder
        assets_dir: Assets folder used for relative references
    """
    labels = labels or LABELS[DEFAULT_LANGUAGE]
    emoji = f"{item.emoji} " if item.emoji else ""
    lines = [f"### {item.id} | {emoji}{item.title}"]

    if item.component:
        lines.append(f"**{labels.component}:** {item.component}")
    if item.module:
        lines.append(f"**{labels.module}:** {item.module}")
    if item.severity:
        lines.append(f"**{labels.severity}:** {labels.severity_full.get(item.severity, item.severity)}")
    if item.priority:
        lines.append(f"**{labels.priority}:** {item.priority}")
    if item.effort:
        lines.append(f"**{labels.effort}:** {labels.effort_short.get(item.effort, item.effort)}")
    if item.description:
        lines.append(f"**{labels.description}:** {item.description}")

    if item.user_story:
        lines.extend(["", f"**{labels.user_story}:**", f"> {item.user_story}"])

    list_blocks = (
        (labels.reproduction, _numbered(item.reproduction)),
        (labels.specs, _bulleted(item.specs)),
        (labels.screens, _numbered(item.screens)),
        (labels.criteria, [f"- [{'x' if c.checked else ' '}] {c.text}" for c in item.criteria]),
        (labels.dependencies, _bulleted(item.dependencies)),
        (labels.constraints, _bulleted(item.constraints)),
        (labels.screenshots, [
            _screenshot_line(s, screenshot_base_path, assets_dir) for s in item.screenshots
        ]),
    )
    for label, block_lines in list_blocks:
        if block_lines:
            lines.extend(["", f"**{label}:**", *block_lines])

    lines.extend(["", "---", ""])
    return "\n".join(lines) + "\n"


def _coerce_entry(key: str, value: Any, model: type) -> Any:
    if isinstance(value, model):
        return value
    if not isinstance(value, dict):
        raise ValueError(f"Invalid {key} entry: {value!r}")
    try:
        return model(**value)
    except TypeError as e:
        raise ValueError(f"Invalid {key} entry {value!r}: {e}") from None


def _coerce(key: str, value: Any) -> Any:
    """Check a patch value against its field.

    None clears a field (lists become empty). Criteria and screenshots
    accept plain dicts.
    """
    if key in LIST_FIELDS:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"Field {key} expects a list, got {type(value).__name__}")
        if key == "criteria":
            return [_coerce_entry(key, c, Criterion) for c in value]
        if key == "screenshots":
            return [_coerce_entry(key, s, Screenshot) for s in value]
        if not all(isinstance(v, str) for v in value):
            raise ValueError(f"Field {key} expects a list of strings")
        return list(value)

    if key == "title" and not (isinstance(value, str) and value.strip()):
        raise ValueError("Field title cannot be empty")
    if value is not None and not isinstance(value, str):
        raise ValueError(f"Field {key} expects text, got {type(value).__name__}")
    return value


def update_item(
    item: Item,
    updates: dict,
    labels: LabelSet = None,
    assets_dir: str = ASSETS_FOLDER_NAME,
) -> Item:
    """Return a copy of item with updates applied and its block rebuilt.

    Raises:
        ValueError: updates touch a protected field (id, type, raw_markdown,
            section_index, kind), name a field Item does not have, or
            carry a value of the wrong type
    """
    protected = PROTECTED_FIELDS.intersection(updates)
    if protected:
        raise ValueError(f"Cannot update protected fields: {', '.join(sorted(protected))}")
    unknown = set(updates) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown item fields: {', '.join(sorted(unknown))}")

    changes = {key: _coerce(key, value) for key, value in updates.items()}
    updated = dataclasses.replace(item, **changes)
    logger.debug(f"Updated {item.id}: {', '.join(sorted(changes))}")
    return dataclasses.replace(
        updated,
        raw_markdown=build_item_markdown(updated, labels, assets_dir=assets_dir),
    )


def toggle_criterion(
    item: Item,
    index: int,
    labels: LabelSet = None,
    assets_dir: str = ASSETS_FOLDER_NAME,
) -> Item:
    """Flip criteria[index] and rebuild the block.

    An index outside the criteria list returns the item itself.
    """
    if not 0 <= index < len(item.criteria):
        return item

    criteria = list(item.criteria)
    criteria[index] = dataclasses.replace(criteria[index], checked=not criteria[index].checked)
    return update_item(item, {"criteria": criteria}, labels, assets_dir)


def replace_item(backlog: Backlog, item: Item) -> Backlog:
    """Return a backlog where the first entry with item.id is replaced.

    Untouched sections and entries are shared with the input backlog.

    Raises:
        KeyError: no item with that id
    """
    for section_pos, section in enumerate(backlog.sections):
        for entry_pos, entry in enumerate(section.entries):
            if entry.kind is EntryKind.ITEM and entry.id == item.id:
                entries = list(section.entries)
                entries[entry_pos] = item
                sections = list(backlog.sections)
                sections[section_pos] = dataclasses.replace(section, entries=entries)
                return dataclasses.replace(backlog, sections=sections)
    raise KeyError(item.id)


def export_item_for_clipboard(
    item: Item,
    source_path: str,
    screenshot_base_path: Optional[str] = None,
    labels: LabelSet = None,
) -> str:
    """Item block prefixed with its source file, for pasting elsewhere."""
    block = build_item_markdown(item, labels, screenshot_base_path=screenshot_base_path)
    return f"From {source_path} :\n\n{block.rstrip()}"
