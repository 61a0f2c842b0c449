"""
ticketflow add - Add a new item to the backlog.
"""

from pathlib import Path

from ticketflow.backlog import (
    BacklogParseError,
    DialectConfig,
    Item,
    add_item,
    find_target_section_index,
    generate_item_id,
    update_item,
)
from ticketflow.backlog.items import split_emoji
from ticketflow.backlog.parser import iter_items
from ticketflow.backlog.patterns import TYPE_ID_RE
from ticketflow.lib.backlog_file import BacklogFileError, load_backlog, write_backlog
from ticketflow.lib.patches import PatchError, build_patch
from ticketflow.lib.validate import ValidationError


def cmd_add(args, dialect: DialectConfig) -> int:
    """Create TYPE-NNN with the given title in the section for its type."""
    path = Path(args.file)
    if not TYPE_ID_RE.match(args.type):
        print(f"ERROR: Invalid type '{args.type}' (expected e.g. BUG, CT, BUG_V5)")
        return 2

    try:
        patch = build_patch(args.set, args.patch)
    except (PatchError, ValidationError) as e:
        print(f"ERROR: {e}")
        return 2

    try:
        _, backlog = load_backlog(path, dialect)
    except (BacklogFileError, BacklogParseError) as e:
        print(f"ERROR: {e}")
        return 2

    if not backlog.sections:
        print(f"ERROR: {path} has no sections")
        return 1

    item_id = generate_item_id([item.id for item in iter_items(backlog)], args.type)
    emoji, title = split_emoji(args.title)
    item = Item(id=item_id, type=args.type, title=title, emoji=emoji, raw_markdown="", section_index=0)
    if patch:
        try:
            item = update_item(item, patch, dialect.labels, dialect.assets_dir)
        except ValueError as e:
            print(f"ERROR: {e}")
            return 1

    index = find_target_section_index(backlog.sections, args.type, dialect.section_types)
    backlog = add_item(backlog, item, dialect.labels, dialect.section_types, dialect.assets_dir)
    write_backlog(path, backlog)
    section = backlog.sections[index]
    print(f"Added {item_id} to section {section.id}. {section.title}")
    return 0
