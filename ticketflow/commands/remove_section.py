"""
ticketflow remove-section - Delete the section holding a type.
"""

from pathlib import Path

from ticketflow.backlog import BacklogParseError, DialectConfig, parse_backlog, remove_section
from ticketflow.lib.backlog_file import BacklogFileError, read_backlog_text


def cmd_remove_section(args, dialect: DialectConfig) -> int:
    """Remove the section for TYPE, renumber the rest and rebuild the TOC."""
    path = Path(args.file)
    try:
        text = read_backlog_text(path)
    except BacklogFileError as e:
        print(f"ERROR: {e}")
        return 2

    updated = remove_section(text, args.type, dialect.section_types)
    if updated == text:
        print(f"ERROR: No section found for type '{args.type}'")
        return 1

    try:
        parse_backlog(updated, config=dialect)
    except BacklogParseError as e:
        print(f"ERROR: Result would not parse, file left unchanged: {e}")
        return 1

    path.write_text(updated, encoding="utf-8")
    print(f"Removed section for {args.type}")
    return 0
