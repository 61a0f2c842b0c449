"""
ticketflow attach - Copy an image into the screenshots folder and reference it from an item.
"""

import shutil
from pathlib import Path

from ticketflow.backlog import BacklogParseError, DialectConfig, Screenshot, replace_item, update_item
from ticketflow.backlog.screenshots import generate_screenshot_filename, parse_screenshot_filename
from ticketflow.lib.backlog_file import BacklogFileError, find_item, load_backlog, screenshots_dir, write_backlog

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif", ".webp")


def cmd_attach(args, dialect: DialectConfig) -> int:
    """Store IMAGE as <ID>_<millis>.<ext> and add it to the item's screenshots."""
    path = Path(args.file)
    image = Path(args.image)
    if not image.is_file():
        print(f"ERROR: Image not found: {image}")
        return 2
    if image.suffix.lower() not in IMAGE_SUFFIXES:
        print(f"ERROR: Unsupported image type '{image.suffix}' (expected {', '.join(IMAGE_SUFFIXES)})")
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

    filename = generate_screenshot_filename(item.id, extension=image.suffix)
    info = parse_screenshot_filename(filename)
    target_dir = screenshots_dir(path, dialect)
    target_dir.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(str(image), str(target_dir / filename))

    screenshot = Screenshot(filename=filename, alt=args.alt, added_at=info.timestamp)
    updated = update_item(
        item,
        {"screenshots": [*item.screenshots, screenshot]},
        dialect.labels,
        dialect.assets_dir,
    )
    write_backlog(path, replace_item(backlog, updated))
    print(f"Attached {filename} to {item.id}")
    return 0
