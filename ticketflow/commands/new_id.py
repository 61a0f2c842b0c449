"""
ticketflow new-id - Print the next free id for a type.
"""

from pathlib import Path

from ticketflow.backlog import BacklogParseError, DialectConfig, generate_item_id
from ticketflow.backlog.parser import iter_items
from ticketflow.lib.backlog_file import BacklogFileError, load_backlog


def cmd_new_id(args, dialect: DialectConfig) -> int:
    path = Path(args.file)
    try:
        _, backlog = load_backlog(path, dialect)
    except (BacklogFileError, BacklogParseError) as e:
        print(f"ERROR: {e}")
        return 2

    print(generate_item_id([item.id for item in iter_items(backlog)], args.type))
    return 0
