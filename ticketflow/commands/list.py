"""
ticketflow list - List backlog items.
"""

from pathlib import Path

from ticketflow.backlog import BacklogParseError, DialectConfig, get_all_items
from ticketflow.lib.backlog_file import BacklogFileError, load_backlog


def cmd_list(args, dialect: DialectConfig) -> int:
    """List deduplicated items, optionally filtered by type."""
    path = Path(args.file)
    try:
        _, backlog = load_backlog(path, dialect)
    except (BacklogFileError, BacklogParseError) as e:
        print(f"ERROR: {e}")
        return 2

    items = get_all_items(backlog)
    if args.type:
        items = [item for item in items if item.type == args.type]

    if not items:
        print("Items: none")
        return 0

    print(f"Items ({len(items)})")
    print("-" * 60)
    for item in items:
        title = item.title[:40] + "..." if len(item.title) > 40 else item.title
        done = sum(1 for c in item.criteria if c.checked)
        progress = f" [{done}/{len(item.criteria)}]" if item.criteria else ""
        print(f"  {item.id:<12} {item.severity or '-':<4} {title}{progress}")
    return 0
