"""
Shared regexes and lookup tables for the backlog dialect.

Everything here is immutable so the parser can run concurrently on
independent inputs without coordination.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType

# Structure
SECTION_HEADER_RE = re.compile(r'^## (?:(\d+)\.\s+)?(.+)$')
# Item boundary: an id-shaped token (PREFIX-NNN, ranges included) before the pipe
ITEM_HEADER_CANDIDATE_RE = re.compile(r'^###\s+\S+-\d+[^|]*\|')
ITEM_HEADER_RE = re.compile(r'^###\s+(?P<id>[^|]*[^|\s])\s*\|\s*(?P<title>\S.*?)\s*$')
RANGE_CONNECTOR_RE = re.compile(r'\sto\s|à')
RULE_LINE_RE = re.compile(r'^-{3,}\s*$')
TYPE_ID_RE = re.compile(r'^[A-Z][A-Z0-9_]*$')

# Item body, in classification order
CODE_FENCE_RE = re.compile(r'^```')
METADATA_RE = re.compile(r'^\*\*([^:*]+):\*\*\s*(.*)$')
BLOCKQUOTE_RE = re.compile(r'^>\s*(.+)$')
CHECKBOX_RE = re.compile(r'^- \[([ xX])\]\s*(.+)$')
NUMBERED_LIST_RE = re.compile(r'^\d+\.\s+(.+)$')
BULLET_LIST_RE = re.compile(r'^[-*] (.+)$')

# Metadata values
SEVERITY_VALUE_RE = re.compile(r'^(P\d)')
EFFORT_VALUE_RE = re.compile(r'^([A-Z]+)')

# Table groups
TABLE_ROW_RE = re.compile(r'^\|\s*([^|]+?)\s*\|\s*([^|]+?)\s*\|\s*([^|]+?)\s*\|$')
TABLE_SEPARATOR_RE = re.compile(r'^\|\s*:?-')

# Leading emoji in an item title: pictographs or dingbats, optional VS16,
# then any skin-tone modifiers and ZWJ-joined pictographs
_PICTOGRAPH = r'(?:[\U0001F300-\U0001FAFF]|[\u2600-\u27BF])\uFE0F?'
EMOJI_RE = re.compile(rf'^{_PICTOGRAPH}(?:[\U0001F3FB-\U0001F3FF]|\u200D{_PICTOGRAPH})*')

# Screenshots: ![alt](<anything>/screenshots/<file>)
SCREENSHOT_RE = re.compile(r'!\[([^\]]*)\]\((?:[^)\s]*[/\\])?screenshots[/\\]([^)\s/\\]+)\)')
SCREENSHOT_FILENAME_RE = re.compile(r'^([A-Z][A-Z0-9_]*-\d+)_(\d+)\.(?:png|jpe?g|gif|webp)$')
ASSETS_FOLDER_NAME = ".backlog-assets"
SCREENSHOTS_FOLDER_NAME = "screenshots"

# Section markers
TYPE_MARKER_PREFIX = "<!-- Type:"
TYPE_MARKER_RE = re.compile(r'<!--\s*Type:\s*([A-Z][A-Z0-9_]*)\s*-->')
TYPE_MARKER = "<!-- Type: {type_id} -->"
EMPTY_SECTION_MARKER = "<!-- Empty section: {title} -->"

# Section titles that are table-of-contents headings, never sections
TOC_TITLES = frozenset({
    "table des matières",
    "table des matieres",
    "sommaire",
    "contents",
    "table of contents",
})

# Section titles kept verbatim (substring, case-insensitive)
RAW_SECTION_NAMES = (
    "ROADMAP",
    "LÉGENDE",
    "LEGEND",
    "CONVENTIONS",
    "SÉVÉRITÉ",
    "PRIORITÉ",
)

# Known section titles -> canonical type id, checked in order
SECTION_TYPE_ALIASES = (
    ("BUGS", "BUG"),
    ("BUG", "BUG"),
    ("COURT TERME", "CT"),
    ("COURT-TERME", "CT"),
    ("CT", "CT"),
    ("LONG TERME", "LT"),
    ("LONG-TERME", "LT"),
    ("LT", "LT"),
    ("AUTRES IDÉES", "AUTRE"),
    ("AUTRES IDEES", "AUTRE"),
    ("AUTRES", "AUTRE"),
    ("AUTRE", "AUTRE"),
    ("TESTS", "TEST"),
    ("TEST", "TEST"),
)
CUSTOM_TYPE_TITLE_RE = re.compile(r'^[A-Z\u00C0-\u00FF0-9\s_-]+$', re.IGNORECASE)
NON_TYPE_TITLE_WORDS = ("LÉGENDE", "LEGENDE", "LEGEND", "TABLE DES MATIÈRES", "TABLE DES MATIERES")

# Lowercased metadata key -> Item field
METADATA_KEYS = MappingProxyType({
    "component": "component",
    "composant": "component",
    "module": "module",
    "severity": "severity",
    "sévérité": "severity",
    "severité": "severity",
    "severite": "severity",
    "priority": "priority",
    "priorité": "priority",
    "priorite": "priority",
    "effort": "effort",
    "description": "description",
})

# Lowercased metadata key -> list context, first match wins
LIST_CONTEXTS = (
    ("specs", re.compile(r'sp[ée]cification')),
    ("reproduction", re.compile(r'reproduction')),
    ("criteria", re.compile(r'crit[èe]re|acceptation|criteria|acceptance')),
    ("dependencies", re.compile(r'd[ée]pendance|dependenc')),
    ("constraints", re.compile(r'contrainte|constraint')),
    ("screens", re.compile(r'[ée]cran|\bscreens?\b')),
)


@dataclass(frozen=True)
class LabelSet:
    """Labels used when an item block is regenerated."""
    component: str
    module: str
    severity: str
    priority: str
    effort: str
    description: str
    user_story: str
    reproduction: str
    specs: str
    screens: str
    criteria: str
    dependencies: str
    constraints: str
    screenshots: str
    severity_full: MappingProxyType
    effort_short: MappingProxyType


_EFFORT_SHORT = MappingProxyType({
    "XS": "XS (Extra Small)",
    "S": "S (Small)",
    "M": "M (Medium)",
    "L": "L (Large)",
    "XL": "XL (Extra Large)",
})

LABELS = MappingProxyType({
    "fr": LabelSet(
        component="Composant",
        module="Module",
        severity="Sévérité",
        priority="Priorité",
        effort="Effort",
        description="Description",
        user_story="User Story",
        reproduction="Reproduction",
        specs="Spécifications",
        screens="Écrans",
        criteria="Critères d'acceptation",
        dependencies="Dépendances",
        constraints="Contraintes",
        screenshots="Screenshots",
        severity_full=MappingProxyType({
            "P0": "P0 - Bloquant",
            "P1": "P1 - Critique",
            "P2": "P2 - Moyenne",
            "P3": "P3 - Faible",
            "P4": "P4 - Mineure",
        }),
        effort_short=_EFFORT_SHORT,
    ),
    "en": LabelSet(
        component="Component",
        module="Module",
        severity="Severity",
        priority="Priority",
        effort="Effort",
        description="Description",
        user_story="User Story",
        reproduction="Reproduction",
        specs="Specifications",
        screens="Screens",
        criteria="Acceptance Criteria",
        dependencies="Dependencies",
        constraints="Constraints",
        screenshots="Screenshots",
        severity_full=MappingProxyType({
            "P0": "P0 - Blocker",
            "P1": "P1 - Critical",
            "P2": "P2 - Major",
            "P3": "P3 - Minor",
            "P4": "P4 - Trivial",
        }),
        effort_short=_EFFORT_SHORT,
    ),
})
DEFAULT_LANGUAGE = "fr"
