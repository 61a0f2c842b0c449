"""
ticketflow edit - Update fields of an item.
"""

from pathlib import Path

from ticketflow.backlog import BacklogParseError, DialectConfig, replace_item, update_item
from ticketflow.lib.backlog_file import BacklogFileError, find_item, load_backlog, write_backlog
from ticketflow.lib.patches import PatchError, build_patch
from ticketflow.lib.validate import ValidationError


def cmd_edit(args, dialect: DialectConfig) -> int:
    """Apply --set/--patch to an item, rebuild its block and save the file."""
    path = Path(args.file)
    try:
        patch = build_patch(args.set, args.patch)
    except (PatchError, ValidationError) as e:
        print(f"ERROR: {e}")
        return 2

    if not patch:
        print("ERROR: Nothing to change. Use --set key=value or --patch FILE")
        return 2

    try:
        _, backlog = load_backlog(path, dialect)
    except (BacklogFileError, BacklogParseError) as e:
        print(f"ERROR: {e}")
        return 2

    item = find_item(backlog, args.id)
    if item is None:
        print(f"ERROR: Item '{args.id}' not found")
        return 1

    try:
        updated = update_item(item, patch, dialect.labels, dialect.assets_dir)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1

    write_backlog(path, replace_item(backlog, updated))
    print(f"Updated {item.id}: {', '.join(sorted(patch))}")
    return 0
