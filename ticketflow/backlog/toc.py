"""
Section removal and table-of-contents maintenance.

These work on document text rather than on a Backlog: removing a section
changes the numbering of every later header and the TOC, which are exactly
the regions a Backlog keeps verbatim.
"""

import logging
import re
import unicodedata

from ticketflow.backlog.patterns import RULE_LINE_RE, SECTION_HEADER_RE, SECTION_TYPE_ALIASES, TOC_TITLES

logger = logging.getLogger(__name__)

NUMBERED_SECTION_RE = re.compile(r'^## (\d+)\.\s+(.+)$')


def _labels_for_type(type_id: str, extra_aliases: dict = None) -> list[str]:
    aliases = list((extra_aliases or {}).items()) + list(SECTION_TYPE_ALIASES)
    return [alias for alias, alias_type in aliases if alias_type == type_id] or [type_id]


def _squash(text: str) -> str:
    return re.sub(r'[_\s-]+', ' ', text)


def _is_toc_heading(line: str) -> bool:
    match = SECTION_HEADER_RE.match(line)
    return bool(match) and match.group(2).strip().lower() in TOC_TITLES


def section_anchor(number: int, label: str) -> str:
    """'1', 'Améliorations UX' -> '1-ameliorations-ux'"""
    decomposed = unicodedata.normalize("NFD", label.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    slug = re.sub(r'\s+', '-', re.sub(r'[^a-z0-9\s-]', '', stripped))
    return f"{number}-{slug}"


def rebuild_table_of_contents(markdown: str) -> str:
    """Regenerate the TOC entries from the numbered section headers.

    The entries between the TOC heading and its closing `---` (or the next
    `## ` header) are replaced with `N. [Label](#anchor)` lines. A document
    without a TOC is returned unchanged.
    """
    lines = markdown.split("\n")

    toc_start = next((i for i, line in enumerate(lines) if _is_toc_heading(line)), None)
    if toc_start is None:
        return markdown

    toc_end = None
    for index in range(toc_start + 1, len(lines)):
        line = lines[index]
        if RULE_LINE_RE.match(line) or (line.startswith("## ") and not _is_toc_heading(line)):
            toc_end = index
            break
    if toc_end is None:
        return markdown

    entries = [""]
    for line in lines:
        match = NUMBERED_SECTION_RE.match(line)
        if match:
            number, label = int(match.group(1)), match.group(2).strip()
            entries.append(f"{number}. [{label}](#{section_anchor(number, label)})")
    entries.append("")

    return "\n".join(lines[:toc_start + 1] + entries + lines[toc_end:])


def remove_section(markdown: str, type_id: str, extra_aliases: dict = None) -> str:
    """Remove the first section whose title matches type_id.

    Later numbered sections are renumbered (only if the removed one had a
    number) and the TOC is rebuilt. Returns markdown unchanged when no
    section matches.
    """
    lines = markdown.split("\n")
    labels = [label.upper() for label in _labels_for_type(type_id, extra_aliases)]

    start = end = None
    number = None
    for index, line in enumerate(lines):
        match = SECTION_HEADER_RE.match(line)
        if not match or _is_toc_heading(line):
            continue
        if start is None:
            title = match.group(2).strip().upper()
            if any(title == label or title.startswith(label) for label in labels) or \
                    _squash(title) == _squash(type_id):
                start, number = index, match.group(1)
        else:
            end = index
            break

    if start is None:
        logger.debug(f"No section found for type {type_id}")
        return markdown
    if end is None:
        end = len(lines)

    remaining = lines[:start] + lines[end:]

    if number is not None:
        counter = 1
        for index, line in enumerate(remaining):
            match = NUMBERED_SECTION_RE.match(line)
            if match:
                remaining[index] = f"## {counter}. {match.group(2).strip()}"
                counter += 1

    logger.debug(f"Removed section for type {type_id} (lines {start}-{end})")
    return rebuild_table_of_contents("\n".join(remaining))
