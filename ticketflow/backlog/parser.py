"""
Backlog document parser.

Splits a normalized backlog into header, table of contents and `## N. Title`
sections, then parses each section into items, table groups or raw
passthrough content. Every region keeps its text verbatim so that
serialize_backlog(parse_backlog(text)) gives back the normalized text.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from ticketflow.backlog.dialect import DEFAULT_DIALECT, DialectConfig
from ticketflow.backlog.errors import MalformedHeaderError
from ticketflow.backlog.items import is_range_id, parse_item, parse_item_header, parse_table_group
from ticketflow.backlog.models import (
    Backlog,
    EntryKind,
    Item,
    ParseWarning,
    RawSection,
    Section,
)
from ticketflow.backlog.normalize import normalize_markdown, split_lines
from ticketflow.backlog.patterns import (
    CUSTOM_TYPE_TITLE_RE,
    EMPTY_SECTION_MARKER,
    ITEM_HEADER_CANDIDATE_RE,
    NON_TYPE_TITLE_WORDS,
    RAW_SECTION_NAMES,
    RULE_LINE_RE,
    SECTION_HEADER_RE,
    SECTION_TYPE_ALIASES,
    TOC_TITLES,
    TYPE_MARKER,
    TYPE_MARKER_PREFIX,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SectionBoundary:
    start: int          # line index of the `## ` header
    id: str
    title: str


def is_toc_title(title: str) -> bool:
    return title.strip().lower() in TOC_TITLES


def find_section_boundaries(lines: list[str]) -> list[SectionBoundary]:
    """Find every `## [N.] Title` line that starts a section.

    Table-of-contents headings are skipped. Sections without a number get
    the next value of a counter that ignores explicit numbers, so an
    unnumbered section can share its id with a numbered one.
    """
    boundaries = []
    auto_id = 0
    for index, line in enumerate(lines):
        match = SECTION_HEADER_RE.match(line.rstrip('\n'))
        if not match:
            continue
        number, title = match.groups()
        if is_toc_title(title):
            continue
        if number is None:
            auto_id += 1
            number = str(auto_id)
        boundaries.append(SectionBoundary(start=index, id=number, title=title.strip()))
    return boundaries


def parse_header(lines: list[str]) -> tuple[str, str, str]:
    """Split the text before the first section into (header, toc, tail).

    The table of contents runs from its `## Table des matières` heading
    through the next `---` line. Without a rule line it runs to the end of
    the header region. Without a TOC heading the whole region is header.
    """
    toc_start = None
    for index, line in enumerate(lines):
        match = SECTION_HEADER_RE.match(line.rstrip('\n'))
        if match and is_toc_title(match.group(2)):
            toc_start = index
            break

    if toc_start is None:
        return "".join(lines), "", ""

    toc_end = len(lines)
    for index in range(toc_start + 1, len(lines)):
        if RULE_LINE_RE.match(lines[index].rstrip('\n')):
            toc_end = index + 1
            break

    return (
        "".join(lines[:toc_start]),
        "".join(lines[toc_start:toc_end]),
        "".join(lines[toc_end:]),
    )


def extract_type_from_section_title(title: str, extra_aliases: dict = None) -> Optional[str]:
    """Derive a type id from a section title.

    'BUGS (Hotfix)' -> 'BUG', 'Court terme' -> 'CT', 'BUG V5' -> 'BUG_V5'.
    Legend and table-of-contents titles, and titles with punctuation that
    cannot form an id, give None.
    """
    title_upper = title.strip().upper()

    if any(word in title_upper for word in NON_TYPE_TITLE_WORDS):
        return None

    aliases = list((extra_aliases or {}).items()) + list(SECTION_TYPE_ALIASES)

    for alias, type_id in aliases:
        if title_upper == alias:
            return type_id

    for alias, type_id in aliases:
        if re.match(rf'^{re.escape(alias)}(?:\s*[(\-:]|$)', title_upper):
            return type_id

    if CUSTOM_TYPE_TITLE_RE.match(title_upper):
        return re.sub(r'[\s-]+', '_', title_upper)

    return None


def is_raw_section_title(title: str, extra: tuple = ()) -> bool:
    title_upper = title.upper()
    return any(name.upper() in title_upper for name in (*RAW_SECTION_NAMES, *extra))


def _empty_section_entry(title: str, body: str, type_id: Optional[str]) -> RawSection:
    """RawSection for a section without item headers.

    Adds a type marker (or an empty-section placeholder) after the leading
    blank lines. A body that already has a marker, or has content but no
    derivable type, is kept as is.
    """
    has_content = bool(body.strip())
    if TYPE_MARKER_PREFIX in body or (has_content and type_id is None):
        return RawSection(title=title, raw_markdown=body)

    if type_id is not None:
        marker = TYPE_MARKER.format(type_id=type_id)
    else:
        marker = EMPTY_SECTION_MARKER.format(title=title)

    body_lines = split_lines(body)
    leading = 0
    while leading < len(body_lines) and not body_lines[leading].strip():
        leading += 1

    raw = "".join(body_lines[:leading]) + marker + "\n" + "".join(body_lines[leading:])
    return RawSection(title=title, raw_markdown=raw)


def parse_section(
    lines: list[str],
    boundary: SectionBoundary,
    diagnostics: Optional[list] = None,
    config: DialectConfig = DEFAULT_DIALECT,
    now: Callable[[], int] = None,
) -> Section:
    """Parse one section, from its header line to the next section.

    Raises:
        MalformedHeaderError: the first line is not a section header, or an
            `### ... |` line is not a valid item header
        UnknownItemTypeError: an item id has no valid type prefix
    """
    raw_header = lines[0].rstrip('\n')
    match = SECTION_HEADER_RE.match(raw_header)
    if not match:
        raise MalformedHeaderError("Invalid section header", raw_header)
    title = match.group(2).strip()
    body = "".join(lines[1:])

    if is_raw_section_title(title, config.raw_sections):
        return Section(
            id=boundary.id,
            title=title,
            raw_header=raw_header,
            entries=[RawSection(title=title, raw_markdown=body)],
        )

    starts = [i for i in range(1, len(lines)) if ITEM_HEADER_CANDIDATE_RE.match(lines[i])]

    if not starts:
        type_id = extract_type_from_section_title(title, config.section_types)
        return Section(
            id=boundary.id,
            title=title,
            raw_header=raw_header,
            entries=[_empty_section_entry(title, body, type_id)],
        )

    entries = []
    for position, start in enumerate(starts):
        end = starts[position + 1] if position + 1 < len(starts) else len(lines)
        block = lines[start:end]
        item_id, _ = parse_item_header(block[0])
        if is_range_id(item_id):
            entries.append(parse_table_group(block, position, diagnostics))
        else:
            entries.append(parse_item(block, position, diagnostics, now=now))

    return Section(
        id=boundary.id,
        title=title,
        raw_header=raw_header,
        intro="".join(lines[1:starts[0]]),
        entries=entries,
    )


def parse_backlog(
    text: str,
    diagnostics: Optional[list] = None,
    config: DialectConfig = DEFAULT_DIALECT,
    now: Callable[[], int] = None,
) -> Backlog:
    """Parse backlog markdown into a Backlog.

    Args:
        text: Document text, any line endings
        diagnostics: Optional list collecting ParseWarning for soft drops
        config: Dialect settings (extra raw sections, section type aliases)
        now: Clock (ms) for screenshots without a filename timestamp

    Raises:
        BacklogParseError: on a malformed header or unresolvable item type.
            Nothing is returned for a partially valid document.
    """
    lines = split_lines(normalize_markdown(text))
    boundaries = find_section_boundaries(lines)

    header_end = boundaries[0].start if boundaries else len(lines)
    header, table_of_contents, header_tail = parse_header(lines[:header_end])

    sections = []
    for position, boundary in enumerate(boundaries):
        end = boundaries[position + 1].start if position + 1 < len(boundaries) else len(lines)
        sections.append(parse_section(lines[boundary.start:end], boundary, diagnostics, config, now))

    logger.debug(f"Parsed {len(sections)} sections")
    return Backlog(
        header=header,
        table_of_contents=table_of_contents,
        header_tail=header_tail,
        sections=sections,
    )


def iter_items(backlog: Backlog) -> Iterator[Item]:
    """Yield every Item entry in document order, duplicates included."""
    for section in backlog.sections:
        for entry in section.entries:
            if entry.kind is EntryKind.ITEM:
                yield entry


def get_all_items(backlog: Backlog, diagnostics: Optional[list] = None) -> list[Item]:
    """Flatten all sections into items, keeping the first item of each id.

    Only this view is deduplicated; Section.entries still hold every block.
    """
    seen = set()
    items = []
    for item in iter_items(backlog):
        if item.id in seen:
            logger.debug(f"Dropping duplicate item {item.id} ({item.title})")
            if diagnostics is not None:
                diagnostics.append(ParseWarning(
                    code="duplicate-id",
                    message=f"Duplicate id {item.id} dropped from the item list",
                    item_id=item.id,
                ))
            continue
        seen.add(item.id)
        items.append(item)
    return items


def get_items_by_type(backlog: Backlog, item_type: str) -> list[Item]:
    return [item for item in get_all_items(backlog) if item.type == item_type]
