"""
ticketflow check - Verify that a backlog file round-trips.
"""

from pathlib import Path

from ticketflow.backlog import BacklogParseError, DialectConfig, get_all_items, normalize_markdown, serialize_backlog
from ticketflow.lib.backlog_file import BacklogFileError, load_backlog


def first_difference(expected: str, actual: str) -> tuple[int, str, str]:
    """(1-based line number, expected line, actual line) of the first mismatch."""
    expected_lines = expected.split("\n")
    actual_lines = actual.split("\n")
    for number, (want, got) in enumerate(zip(expected_lines, actual_lines), start=1):
        if want != got:
            return number, want, got
    number = min(len(expected_lines), len(actual_lines)) + 1
    want = expected_lines[number - 1] if number <= len(expected_lines) else "<end of file>"
    got = actual_lines[number - 1] if number <= len(actual_lines) else "<end of file>"
    return number, want, got


def cmd_check(args, dialect: DialectConfig) -> int:
    """Parse, serialize and compare with the normalized file text.

    Exit code 0 when identical, 1 on the first mismatch, 2 if the file
    does not parse.
    """
    path = Path(args.file)
    diagnostics = []
    try:
        text, backlog = load_backlog(path, dialect, diagnostics)
    except (BacklogFileError, BacklogParseError) as e:
        print(f"ERROR: {e}")
        return 2

    items = get_all_items(backlog, diagnostics)
    for warning in diagnostics:
        where = f"{warning.item_id}: " if warning.item_id else ""
        print(f"  [WARN] {where}{warning.message}")

    expected = normalize_markdown(text)
    if expected and not expected.endswith("\n"):
        expected += "\n"
    actual = serialize_backlog(backlog)

    if actual != expected:
        number, want, got = first_difference(expected, actual)
        print(f"FAIL: {path} does not round-trip (line {number})")
        print(f"  expected: {want!r}")
        print(f"  actual:   {got!r}")
        return 1

    print(f"OK: {path} ({len(backlog.sections)} sections, {len(items)} items)")
    return 0
