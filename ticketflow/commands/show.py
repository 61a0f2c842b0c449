"""
ticketflow show - Show one item.
"""

import json
from pathlib import Path

from ticketflow.backlog import BacklogParseError, DialectConfig, export_item_for_clipboard
from ticketflow.commands.export import entry_to_dict
from ticketflow.lib.backlog_file import BacklogFileError, find_item, load_backlog, screenshots_dir
from ticketflow.lib.validate import ValidationError, validate

LIST_FIELDS = (
    ("Reproduction", "reproduction"),
    ("Specs", "specs"),
    ("Screens", "screens"),
    ("Dependencies", "dependencies"),
    ("Constraints", "constraints"),
)


def cmd_show(args, dialect: DialectConfig) -> int:
    """Show an item's fields, or its block ready for pasting with --export."""
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

    if args.export:
        print(export_item_for_clipboard(
            item,
            str(path.resolve()),
            screenshot_base_path=str(screenshots_dir(path, dialect)),
            labels=dialect.labels,
        ))
        return 0

    if args.json:
        data = entry_to_dict(item)
        try:
            validate(data, "item")
        except ValidationError as e:
            print(f"ERROR: {e}")
            return 1
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return 0

    if args.raw:
        print(item.raw_markdown, end="")
        return 0

    print(f"Item: {item.id}")
    print("=" * 60)
    title = f"{item.emoji} {item.title}" if item.emoji else item.title
    print(f"Title:      {title}")
    print(f"Type:       {item.type}")
    for label, value in (
        ("Component", item.component),
        ("Module", item.module),
        ("Severity", item.severity),
        ("Priority", item.priority),
        ("Effort", item.effort),
        ("Description", item.description),
    ):
        if value:
            print(f"{label + ':':<12}{value}")
    print()

    if item.user_story:
        print("User Story")
        print("-" * 40)
        print(f"  {item.user_story}")
        print()

    for label, field_name in LIST_FIELDS:
        values = getattr(item, field_name)
        if values:
            print(label)
            print("-" * 40)
            for value in values:
                print(f"  - {value}")
            print()

    if item.criteria:
        done = sum(1 for c in item.criteria if c.checked)
        print("Acceptance Criteria")
        print("-" * 40)
        print(f"  Progress: {done}/{len(item.criteria)}")
        for index, criterion in enumerate(item.criteria, start=1):
            marker = "[x]" if criterion.checked else "[ ]"
            print(f"  {index}. {marker} {criterion.text}")
        print()

    if item.screenshots:
        print("Screenshots")
        print("-" * 40)
        for screenshot in item.screenshots:
            print(f"  {screenshot.filename}")
        print()

    return 0
