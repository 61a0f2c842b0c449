"""
Data models for the backlog document.

A Backlog is rebuilt from scratch on every parse. Instances are frozen;
mutators in serializer.py return new instances built with
dataclasses.replace and never touch the lists of their input.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional, Union


SEVERITIES = ("P0", "P1", "P2", "P3", "P4")
EFFORTS = ("XS", "S", "M", "L", "XL")
PRIORITIES = ("Haute", "Moyenne", "Faible", "High", "Medium", "Low")


class EntryKind(str, enum.Enum):
    """Discriminant for the entries of a Section."""
    ITEM = "item"
    TABLE_GROUP = "table-group"
    RAW_SECTION = "raw-section"


@dataclass(frozen=True)
class Criterion:
    """An acceptance criterion checkbox."""
    text: str
    checked: bool = False


@dataclass(frozen=True)
class Screenshot:
    """An image reference found in an item block."""
    filename: str                  # BUG-001_1704153600000.png
    alt: Optional[str] = None
    added_at: int = 0              # ms since epoch


@dataclass(frozen=True)
class Item:
    """A single ticket block (### ID | Title)."""
    id: str                        # BUG-001, CT-002, BUG_V5-001
    type: str                      # derived from the id prefix
    title: str
    raw_markdown: str              # verbatim block, serialization source
    section_index: int             # position inside its section
    emoji: Optional[str] = None
    component: Optional[str] = None
    module: Optional[str] = None
    severity: Optional[str] = None     # P0..P4
    priority: Optional[str] = None
    effort: Optional[str] = None       # XS..XL
    description: Optional[str] = None
    user_story: Optional[str] = None
    specs: list[str] = field(default_factory=list)
    reproduction: list[str] = field(default_factory=list)
    criteria: list[Criterion] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    constraints: list[str] = field(default_factory=list)
    screens: list[str] = field(default_factory=list)
    screenshots: list[Screenshot] = field(default_factory=list)
    kind: EntryKind = field(default=EntryKind.ITEM, init=False)


@dataclass(frozen=True)
class TableRow:
    id: str
    description: str
    action: str


@dataclass(frozen=True)
class TableGroup:
    """Legacy shorthand: several minor items as rows of one table."""
    title: str                     # "BUG-005 to BUG-007 | Batch fix"
    raw_markdown: str
    section_index: int
    severity: Optional[str] = None
    rows: list[TableRow] = field(default_factory=list)
    kind: EntryKind = field(default=EntryKind.TABLE_GROUP, init=False)


@dataclass(frozen=True)
class RawSection:
    """Section content kept verbatim (legend, roadmap, empty sections)."""
    title: str
    raw_markdown: str
    section_index: int = 0
    kind: EntryKind = field(default=EntryKind.RAW_SECTION, init=False)


SectionEntry = Union[Item, TableGroup, RawSection]


@dataclass(frozen=True)
class Section:
    """A top-level `## N. Title` grouping."""
    id: str
    title: str
    raw_header: str                # "## 1. BUGS (Hotfix)", without newline
    intro: str = ""                # text between the header and the first item
    entries: list[SectionEntry] = field(default_factory=list)


@dataclass(frozen=True)
class Backlog:
    """The whole parsed document."""
    header: str = ""
    table_of_contents: str = ""
    header_tail: str = ""          # between the TOC rule line and the first section
    sections: list[Section] = field(default_factory=list)


@dataclass(frozen=True)
class ParseWarning:
    """A non-fatal problem found while parsing.

    Only collected when the caller passes a diagnostics list; the default
    behavior drops these silently.
    """
    code: str                      # "invalid-severity", "duplicate-id", ...
    message: str
    item_id: Optional[str] = None
