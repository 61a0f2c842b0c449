"""
Item block parser.

An item block runs from its `### ID | Title` header to the next item header
or the end of its section. The header gives the id, title and optional
emoji; body lines are classified one at a time into typed fields. Lines
that fit no rule stay in raw_markdown only.

Classification order (first match wins, do not reorder: ambiguous lines
such as `- [x] **Key:** value` resolve differently otherwise):

  1. code fence      toggles the in-code-block flag; fenced lines are skipped
  2. metadata        **Key:** Value, also sets the current list context
  3. blockquote      > text, accumulates the user story
  4. checkbox        - [ ] text / - [x] text, appends a criterion
  5. numbered list   1. text, goes to the current list (default specs)
  6. bullet list     - text, same routing as numbered lists
  7. anything else   ignored for typed fields
"""

import enum
import logging
import re
from typing import Callable, Optional

from ticketflow.backlog.errors import MalformedHeaderError, UnknownItemTypeError
from ticketflow.backlog.models import (
    EFFORTS,
    PRIORITIES,
    SEVERITIES,
    Criterion,
    Item,
    ParseWarning,
    TableGroup,
    TableRow,
)
from ticketflow.backlog.patterns import (
    BLOCKQUOTE_RE,
    BULLET_LIST_RE,
    CHECKBOX_RE,
    CODE_FENCE_RE,
    EFFORT_VALUE_RE,
    EMOJI_RE,
    ITEM_HEADER_RE,
    LIST_CONTEXTS,
    METADATA_KEYS,
    METADATA_RE,
    NUMBERED_LIST_RE,
    RANGE_CONNECTOR_RE,
    SEVERITY_VALUE_RE,
    TABLE_ROW_RE,
    TABLE_SEPARATOR_RE,
    TYPE_ID_RE,
)
from ticketflow.backlog.screenshots import extract_screenshots

logger = logging.getLogger(__name__)

SEVERITY_KEY_RE = re.compile(r's[ée]v[ée]rit[ée]|severity')

LIST_FIELDS = ("specs", "reproduction", "criteria", "dependencies", "constraints", "screens")


class LineKind(enum.Enum):
    CODE_FENCE = "code-fence"
    CODE = "code"
    METADATA = "metadata"
    BLOCKQUOTE = "blockquote"
    CHECKBOX = "checkbox"
    NUMBERED_LIST = "numbered-list"
    BULLET_LIST = "bullet-list"
    OTHER = "other"


# Rules 2-6 of the classification order; fences are handled before these
LINE_RULES = (
    (LineKind.METADATA, METADATA_RE),
    (LineKind.BLOCKQUOTE, BLOCKQUOTE_RE),
    (LineKind.CHECKBOX, CHECKBOX_RE),
    (LineKind.NUMBERED_LIST, NUMBERED_LIST_RE),
    (LineKind.BULLET_LIST, BULLET_LIST_RE),
)


def classify_line(line: str, in_code_block: bool = False) -> tuple[LineKind, Optional[re.Match]]:
    """Classify one body line (without its newline)."""
    if CODE_FENCE_RE.match(line):
        return LineKind.CODE_FENCE, None
    if in_code_block:
        return LineKind.CODE, None
    for kind, pattern in LINE_RULES:
        match = pattern.match(line)
        if match:
            return kind, match
    return LineKind.OTHER, None


def parse_item_header(line: str) -> tuple[str, str]:
    """Return (id, title) from a `### ID | Title` line."""
    match = ITEM_HEADER_RE.match(line.rstrip('\n'))
    if not match:
        raise MalformedHeaderError("Invalid item header", line.rstrip('\n'))
    return match.group('id'), match.group('title')


def split_emoji(title: str) -> tuple[Optional[str], str]:
    """Split a leading emoji off a title: '⚠️ Crash' -> ('⚠️', 'Crash')."""
    match = EMOJI_RE.match(title)
    if not match:
        return None, title
    return match.group(0), title[match.end():].strip()


def type_from_id(item_id: str) -> Optional[str]:
    """Type id is the id prefix before the first dash (BUG-001 -> BUG)."""
    prefix = item_id.split('-')[0]
    return prefix if TYPE_ID_RE.match(prefix) else None


def is_range_id(item_id: str) -> bool:
    """True for table-group ids such as 'BUG-005 to BUG-007' or 'BUG-005 à 007'."""
    return RANGE_CONNECTOR_RE.search(item_id) is not None


def detect_list_context(key: str) -> Optional[str]:
    key_lower = key.strip().lower()
    for list_field, pattern in LIST_CONTEXTS:
        if pattern.search(key_lower):
            return list_field
    return None


def _warn(diagnostics, code: str, message: str, item_id: str) -> None:
    logger.debug(f"{item_id}: {message}")
    if diagnostics is not None:
        diagnostics.append(ParseWarning(code=code, message=message, item_id=item_id))


def _parse_severity(value: str) -> Optional[str]:
    match = SEVERITY_VALUE_RE.match(value)
    if match and match.group(1) in SEVERITIES:
        return match.group(1)
    return None


def _parse_effort(value: str) -> Optional[str]:
    match = EFFORT_VALUE_RE.match(value)
    if match and match.group(1) in EFFORTS:
        return match.group(1)
    return None


class _ItemScanner:
    """Accumulates typed fields while walking an item body."""

    def __init__(self, item_id: str, diagnostics: Optional[list] = None):
        self.item_id = item_id
        self.diagnostics = diagnostics
        self.in_code_block = False
        self.list_context: Optional[str] = None
        self.fields: dict = {}
        self.lists: dict[str, list] = {name: [] for name in LIST_FIELDS}
        self.story_parts: list[str] = []

    def feed(self, line: str) -> None:
        kind, match = classify_line(line, self.in_code_block)

        if kind is LineKind.CODE_FENCE:
            self.in_code_block = not self.in_code_block
        elif kind is LineKind.METADATA:
            key = match.group(1).strip()
            self._apply_metadata(key, match.group(2).strip())
            self.list_context = detect_list_context(key)
        elif kind is LineKind.BLOCKQUOTE:
            self.story_parts.append(match.group(1))
        elif kind is LineKind.CHECKBOX:
            self.lists["criteria"].append(Criterion(
                text=match.group(2),
                checked=match.group(1).lower() == 'x',
            ))
        elif kind in (LineKind.NUMBERED_LIST, LineKind.BULLET_LIST):
            self._add_to_list(match.group(1))

    def _apply_metadata(self, key: str, value: str) -> None:
        field_name = METADATA_KEYS.get(key.lower())
        if field_name is None or not value:
            return

        if field_name == "severity":
            parsed = _parse_severity(value)
        elif field_name == "effort":
            parsed = _parse_effort(value)
        elif field_name == "priority":
            parsed = value if value in PRIORITIES else None
        else:
            parsed = value

        if parsed is None:
            _warn(self.diagnostics, f"invalid-{field_name}",
                  f"Dropped invalid {field_name} '{value}'", self.item_id)
            return
        self.fields[field_name] = parsed

    def _add_to_list(self, value: str) -> None:
        # Default to specs if no label set a context
        target = self.list_context or "specs"
        if target == "criteria":
            self.lists["criteria"].append(Criterion(text=value, checked=False))
        else:
            self.lists[target].append(value)

    def user_story(self) -> Optional[str]:
        story = " ".join(self.story_parts).strip()
        return story or None


def parse_item(
    lines: list[str],
    section_index: int,
    diagnostics: Optional[list] = None,
    now: Callable[[], int] = None,
) -> Item:
    """Parse one item block.

    Args:
        lines: Block lines, each keeping its trailing newline; lines[0] is
            the item header
        section_index: Position of the block inside its section
        diagnostics: Optional list collecting ParseWarning for dropped values
        now: Clock for screenshots without a timestamp in their filename

    Raises:
        MalformedHeaderError: lines[0] is not an item header
        UnknownItemTypeError: the id prefix is not a valid type id
    """
    raw_markdown = "".join(lines)
    header = lines[0].rstrip('\n')
    item_id, title = parse_item_header(header)
    emoji, title = split_emoji(title)

    item_type = type_from_id(item_id)
    if item_type is None:
        raise UnknownItemTypeError(item_id, header)

    scanner = _ItemScanner(item_id, diagnostics)
    for line in lines[1:]:
        scanner.feed(line.rstrip('\n'))

    return Item(
        id=item_id,
        type=item_type,
        title=title,
        emoji=emoji,
        raw_markdown=raw_markdown,
        section_index=section_index,
        user_story=scanner.user_story(),
        screenshots=extract_screenshots(raw_markdown, now=now),
        **scanner.fields,
        **scanner.lists,
    )


def parse_table_group(
    lines: list[str],
    section_index: int,
    diagnostics: Optional[list] = None,
) -> TableGroup:
    """Parse a legacy table group block.

    The header id is a range (`### BUG-005 to BUG-007 | Minor fixes`) and the
    body holds a 3-column table whose header row has an ID column:

        | ID      | Description | Action     |
        |---------|-------------|------------|
        | BUG-005 | Minor issue | Fix margin |
    """
    header = lines[0].rstrip('\n')
    group_id, group_title = parse_item_header(header)

    severity = None
    rows = []
    in_table = False

    for raw_line in lines[1:]:
        line = raw_line.rstrip()

        metadata_match = METADATA_RE.match(line)
        if metadata_match and SEVERITY_KEY_RE.search(metadata_match.group(1).lower()):
            value = metadata_match.group(2).strip()
            parsed = _parse_severity(value)
            if parsed is None:
                _warn(diagnostics, "invalid-severity",
                      f"Dropped invalid severity '{value}'", group_id)
            else:
                severity = parsed
            continue

        if not line.startswith('|'):
            continue

        if not in_table:
            # Header row of the table
            if 'ID' in line:
                in_table = True
            continue

        if TABLE_SEPARATOR_RE.match(line):
            continue

        row_match = TABLE_ROW_RE.match(line)
        if row_match:
            row_id, description, action = row_match.groups()
            rows.append(TableRow(id=row_id, description=description, action=action))

    return TableGroup(
        title=f"{group_id} | {group_title}",
        raw_markdown="".join(lines),
        section_index=section_index,
        severity=severity,
        rows=rows,
    )
