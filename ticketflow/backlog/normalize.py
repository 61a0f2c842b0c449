"""
Normalizer for hand-authored backlog text.

Converts line endings to \\n and repairs headings that were glued onto the
previous line. The repairs run in a fixed order, each as one global pass,
and are not code-fence aware: heading-like text inside fenced examples is
rewritten too.
"""

import re

# (pattern, replacement), applied in order
GLUED_HEADING_REPAIRS = (
    # "---## 1. Title" -> "---\n\n## 1. Title"
    (re.compile(r'---([ \t]*## \d+\.)'), '---\n\n\\1'),
    # "## Title### Item" -> "## Title\n\n### Item"
    (re.compile(r'(##[^#\n]+)(###)'), '\\1\n\n\\2'),
    # "---### Item" -> "---\n\n### Item"
    (re.compile(r'---([ \t]*###)'), '---\n\n\\1'),
    # "# Title## Section" -> "# Title\n\n## Section"
    (re.compile(r'(#[^#\n]+)(##)'), '\\1\n\n\\2'),
)


def normalize_line_endings(text: str) -> str:
    return text.replace('\r\n', '\n').replace('\r', '\n')


def normalize_markdown(text: str) -> str:
    """Return text with \\n line endings and glued headings split apart.

    A document without glued headings is returned unchanged, so
    normalizing twice gives the same result as normalizing once.
    """
    text = normalize_line_endings(text)
    for pattern, replacement in GLUED_HEADING_REPAIRS:
        text = pattern.sub(replacement, text)
    return text


def split_lines(text: str) -> list[str]:
    """Split text into lines that keep their trailing \\n.

    Joining the result with '' gives back the input exactly. Only \\n
    separates lines; str.splitlines would also break on form feeds and
    unicode separators that can legitimately appear inside a line.
    """
    parts = text.split('\n')
    lines = [part + '\n' for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines
