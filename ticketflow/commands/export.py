"""
ticketflow export - Write the parsed backlog as JSON.
"""

import dataclasses
import json
import sys
from pathlib import Path

from ticketflow.backlog import Backlog, BacklogParseError, DialectConfig
from ticketflow.lib.backlog_file import BacklogFileError, load_backlog
from ticketflow.lib.validate import ValidationError, validate_before_write


def entry_to_dict(entry) -> dict:
    """Plain JSON-ready dict for a section entry."""
    data = dataclasses.asdict(entry)
    data["kind"] = entry.kind.value
    return data


def backlog_to_dict(backlog: Backlog) -> dict:
    data = {
        "header": backlog.header,
        "table_of_contents": backlog.table_of_contents,
        "header_tail": backlog.header_tail,
        "sections": [],
    }
    for section in backlog.sections:
        data["sections"].append({
            "id": section.id,
            "title": section.title,
            "raw_header": section.raw_header,
            "intro": section.intro,
            "entries": [entry_to_dict(entry) for entry in section.entries],
        })
    return data


def cmd_export(args, dialect: DialectConfig) -> int:
    """Export the backlog model to -o FILE, or stdout."""
    path = Path(args.file)
    try:
        _, backlog = load_backlog(path, dialect)
    except (BacklogFileError, BacklogParseError) as e:
        print(f"ERROR: {e}")
        return 2

    data = backlog_to_dict(backlog)
    target = Path(args.output) if args.output else Path("<stdout>")
    try:
        validate_before_write(data, "backlog", target)
    except ValidationError as e:
        print(f"ERROR: {e}")
        return 1

    content = json.dumps(data, indent=2, ensure_ascii=False)
    if args.output:
        target.write_text(content + "\n", encoding="utf-8")
        print(f"Exported {len(backlog.sections)} sections to {target}")
    else:
        sys.stdout.write(content + "\n")
    return 0
