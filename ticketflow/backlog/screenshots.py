"""
Screenshot references inside item blocks.

Screenshots live in .backlog-assets/screenshots/ next to the backlog file
and are named {TICKET-ID}_{MILLIS}.png. The parser only reads references;
it never touches the files.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from ticketflow.backlog.models import Screenshot
from ticketflow.backlog.patterns import (
    ASSETS_FOLDER_NAME,
    SCREENSHOT_FILENAME_RE,
    SCREENSHOT_RE,
    SCREENSHOTS_FOLDER_NAME,
)


@dataclass(frozen=True)
class ScreenshotInfo:
    ticket_id: str
    timestamp: int  # ms since epoch


def _now_millis() -> int:
    return int(time.time() * 1000)


def parse_screenshot_filename(filename: str) -> Optional[ScreenshotInfo]:
    """Split BUG-001_1704153600000.png into ticket id and timestamp."""
    match = SCREENSHOT_FILENAME_RE.match(filename)
    if not match:
        return None
    return ScreenshotInfo(ticket_id=match.group(1), timestamp=int(match.group(2)))


def generate_screenshot_filename(
    ticket_id: str,
    now: Callable[[], int] = None,
    extension: str = "png",
) -> str:
    """BUG-001 -> BUG-001_<millis>.png"""
    timestamp = (now or _now_millis)()
    return f"{ticket_id}_{timestamp}.{extension.lstrip('.').lower()}"


def screenshot_markdown_ref(
    filename: str,
    alt: Optional[str] = None,
    assets_dir: str = ASSETS_FOLDER_NAME,
) -> str:
    """Markdown image reference relative to the backlog file."""
    alt_text = alt or filename.rsplit(".", 1)[0]
    return f"![{alt_text}]({assets_dir}/{SCREENSHOTS_FOLDER_NAME}/{filename})"


def extract_screenshots(raw_markdown: str, now: Callable[[], int] = None) -> list[Screenshot]:
    """Find every screenshot reference in an item block.

    Scans the raw text, not the typed fields, so references inside code
    blocks or free-form lines are found too. The timestamp comes from the
    filename when it follows the naming convention, else from now().
    """
    clock = now or _now_millis
    screenshots = []
    for match in SCREENSHOT_RE.finditer(raw_markdown):
        filename = match.group(2)
        info = parse_screenshot_filename(filename)
        screenshots.append(Screenshot(
            filename=filename,
            alt=match.group(1) or None,
            added_at=info.timestamp if info else clock(),
        ))
    return screenshots
