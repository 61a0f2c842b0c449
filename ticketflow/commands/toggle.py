"""
ticketflow toggle - Check or uncheck an acceptance criterion.
"""

from pathlib import Path

from ticketflow.backlog import BacklogParseError, DialectConfig, replace_item, toggle_criterion
from ticketflow.lib.backlog_file import BacklogFileError, find_item, load_backlog, write_backlog


def cmd_toggle(args, dialect: DialectConfig) -> int:
    """Toggle criterion INDEX (1-based) of an item and save the file."""
    path = Path(args.file)
    try:
        _, backlog = load_backlog(path, dialect)
    except (BacklogFileError, BacklogParseError) as e:
        print(f"ERROR: {e}")
        return 2

    item = find_item(backlog, args.id)
    if item is None:
        print(f"ERROR: Item '{args.id}' not found")
        return 1

    index = args.index - 1
    updated = toggle_criterion(item, index, dialect.labels, dialect.assets_dir)
    if updated is item:
        print(f"ERROR: {item.id} has no criterion #{args.index} ({len(item.criteria)} criteria)")
        return 1

    write_backlog(path, replace_item(backlog, updated))
    criterion = updated.criteria[index]
    marker = "[x]" if criterion.checked else "[ ]"
    print(f"{item.id}: {marker} {criterion.text}")
    return 0
