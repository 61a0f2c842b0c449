"""Tests for ticketflow.backlog.screenshots module."""

from ticketflow.backlog.models import Screenshot
from ticketflow.backlog.screenshots import (
    ScreenshotInfo,
    extract_screenshots,
    generate_screenshot_filename,
    parse_screenshot_filename,
    screenshot_markdown_ref,
)


class TestParseScreenshotFilename:
    """Tests for parse_screenshot_filename()."""

    def test_convention(self):
        assert parse_screenshot_filename("BUG-001_1704153600000.png") == ScreenshotInfo("BUG-001", 1704153600000)

    def test_custom_type_and_jpeg(self):
        assert parse_screenshot_filename("BUG_V5-012_42.jpeg") == ScreenshotInfo("BUG_V5-012", 42)

    def test_other_names(self):
        assert parse_screenshot_filename("capture.png") is None
        assert parse_screenshot_filename("BUG-001_123.bmp") is None


class TestGenerateScreenshotFilename:
    """Tests for generate_screenshot_filename()."""

    def test_uses_clock(self):
        assert generate_screenshot_filename("CT-003", now=lambda: 1700000000000) == "CT-003_1700000000000.png"

    def test_round_trips_through_parser(self):
        name = generate_screenshot_filename("BUG-002", now=lambda: 5)
        assert parse_screenshot_filename(name) == ScreenshotInfo("BUG-002", 5)

    def test_keeps_image_extension(self):
        assert generate_screenshot_filename("BUG-002", now=lambda: 9, extension=".JPG") == "BUG-002_9.jpg"


class TestScreenshotMarkdownRef:
    """Tests for screenshot_markdown_ref()."""

    def test_default_alt_and_folder(self):
        assert screenshot_markdown_ref("BUG-001_123.png") == \
            "![BUG-001_123](.backlog-assets/screenshots/BUG-001_123.png)"

    def test_default_alt_drops_any_extension(self):
        assert screenshot_markdown_ref("BUG-001_123.webp") == \
            "![BUG-001_123](.backlog-assets/screenshots/BUG-001_123.webp)"

    def test_custom_alt_and_assets_dir(self):
        assert screenshot_markdown_ref("BUG-001_123.png", "crash", "assets") == \
            "![crash](assets/screenshots/BUG-001_123.png)"


class TestExtractScreenshots:
    """Tests for extract_screenshots()."""

    def test_timestamp_from_filename(self):
        raw = "text\n![crash](.backlog-assets/screenshots/BUG-001_1704153600000.png)\n"
        assert extract_screenshots(raw) == [
            Screenshot(filename="BUG-001_1704153600000.png", alt="crash", added_at=1704153600000),
        ]

    def test_fallback_to_clock(self):
        raw = "![x](.backlog-assets/screenshots/capture.png)"
        assert extract_screenshots(raw, now=lambda: 42)[0].added_at == 42

    def test_empty_alt_is_none(self):
        raw = "![](.backlog-assets/screenshots/BUG-001_1.png)"
        assert extract_screenshots(raw)[0].alt is None

    def test_windows_absolute_path(self):
        raw = "![a](C:\\proj\\.backlog-assets\\screenshots\\BUG-002_5.png)"
        assert extract_screenshots(raw)[0].filename == "BUG-002_5.png"

    def test_relative_folder_without_prefix(self):
        raw = "![a](screenshots/BUG-002_5.png)"
        assert extract_screenshots(raw)[0].filename == "BUG-002_5.png"

    def test_ignores_other_images(self):
        assert extract_screenshots("![logo](img/logo.png)") == []

    def test_multiple_in_order(self):
        raw = (
            "![a](.backlog-assets/screenshots/BUG-001_2.png)\n"
            "```\n![b](.backlog-assets/screenshots/BUG-001_1.png)\n```\n"
        )
        assert [s.added_at for s in extract_screenshots(raw)] == [2, 1]
