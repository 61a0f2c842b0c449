"""
Item placement.

Decides which section a new item of a given type belongs to, allocates
the next free id for a type, and inserts a new item into a backlog.
"""

import dataclasses
import logging
from typing import Optional

from ticketflow.backlog.models import Backlog, EntryKind, Item, Section
from ticketflow.backlog.patterns import ASSETS_FOLDER_NAME, SECTION_TYPE_ALIASES, TYPE_MARKER, LabelSet
from ticketflow.backlog.serializer import build_item_markdown

logger = logging.getLogger(__name__)


def custom_type_labels(type_id: str) -> list[str]:
    """'BUG_V5' -> ['BUG_V5', 'BUG V5']"""
    labels = [type_id]
    if "_" in type_id:
        labels.append(type_id.replace("_", " "))
    return labels


def section_labels_for_type(type_id: str, extra_aliases: dict = None) -> list[str]:
    """Section titles that hold items of type_id, most specific first."""
    aliases = list((extra_aliases or {}).items()) + list(SECTION_TYPE_ALIASES)
    labels = [alias for alias, alias_type in aliases if alias_type == type_id]
    return labels or custom_type_labels(type_id)


def _title_matches(section: Section, labels: list[str]) -> bool:
    title_upper = section.title.upper()
    return any(label.upper() in title_upper for label in labels)


def _is_raw_only(section: Section) -> bool:
    return len(section.entries) == 1 and section.entries[0].kind is EntryKind.RAW_SECTION


def find_target_section_index(
    sections: list[Section],
    type_id: str,
    extra_aliases: dict = None,
) -> int:
    """Index of the section a new item of type_id should go to.

    Strategies, first hit wins:
      1. a section already holding items of the type
      2. a section whose title matches a label of the type
      3. a section carrying a `<!-- Type: X -->` marker
      4. an empty section whose title matches the custom type labels
      5. the first section that is not raw passthrough
      6. section 0
    """
    for index, section in enumerate(sections):
        if any(e.kind is EntryKind.ITEM and e.type == type_id for e in section.entries):
            return index

    labels = section_labels_for_type(type_id, extra_aliases)
    for index, section in enumerate(sections):
        if _title_matches(section, labels):
            return index

    marker = TYPE_MARKER.format(type_id=type_id)
    for index, section in enumerate(sections):
        texts = [section.intro] + [e.raw_markdown for e in section.entries]
        if any(marker in text for text in texts):
            return index

    for index, section in enumerate(sections):
        if (not section.entries or _is_raw_only(section)) and \
                _title_matches(section, custom_type_labels(type_id)):
            return index

    for index, section in enumerate(sections):
        if not section.entries or section.entries[0].kind is not EntryKind.RAW_SECTION:
            return index

    return 0


def generate_item_id(existing_ids: list[str], type_id: str) -> str:
    """Next id for a type: max existing number + 1, zero padded (BUG-004)."""
    numbers = []
    for item_id in existing_ids:
        if not item_id.startswith(f"{type_id}-"):
            continue
        suffix = item_id.split("-")[1]
        if suffix.isdigit():
            numbers.append(int(suffix))
    return f"{type_id}-{max(numbers, default=0) + 1:03d}"


def add_item(
    backlog: Backlog,
    item: Item,
    labels: Optional[LabelSet] = None,
    extra_aliases: dict = None,
    assets_dir: str = ASSETS_FOLDER_NAME,
) -> Backlog:
    """Append item to its target section and return the new backlog.

    The item's block is rendered in canonical form. Other sections are
    shared with the input backlog.

    Raises:
        ValueError: the backlog has no sections
    """
    if not backlog.sections:
        raise ValueError("Backlog has no sections to add an item to")

    index = find_target_section_index(backlog.sections, item.type, extra_aliases)
    section = backlog.sections[index]

    raw = build_item_markdown(item, labels, assets_dir=assets_dir)
    preceding = section.entries[-1].raw_markdown if section.entries else section.intro
    if preceding and not preceding.endswith("\n"):
        raw = "\n" + raw

    new_item = dataclasses.replace(item, raw_markdown=raw, section_index=len(section.entries))
    sections = list(backlog.sections)
    sections[index] = dataclasses.replace(section, entries=[*section.entries, new_item])
    logger.debug(f"Added {item.id} to section {section.id} ({section.title})")
    return dataclasses.replace(backlog, sections=sections)
