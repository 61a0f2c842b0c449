"""End-to-end tests for the ticketflow command line."""

import json
import re

from ticketflow.cli import main
from ticketflow.lib.config import CONFIG_FILENAME


class TestCheck:
    """Test `ticketflow check`."""

    def test_canonical_file(self, backlog_file, capsys):
        assert main(["check", str(backlog_file)]) == 0
        assert "OK:" in capsys.readouterr().out

    def test_counts(self, backlog_file, capsys):
        main(["check", str(backlog_file)])
        assert "(4 sections, 2 items)" in capsys.readouterr().out

    def test_section_missing_marker(self, tmp_path, capsys):
        path = tmp_path / "BACKLOG.md"
        path.write_text("# T\n\n## 1. BUGS\n\nNothing yet.\n", encoding="utf-8")
        assert main(["check", str(path)]) == 1
        out = capsys.readouterr().out
        assert "FAIL:" in out
        assert "(line 5)" in out

    def test_reports_dropped_values(self, tmp_path, capsys):
        path = tmp_path / "BACKLOG.md"
        path.write_text("## 1. BUGS\n### BUG-001 | x\n**Severity:** urgent\n", encoding="utf-8")
        assert main(["check", str(path)]) == 0
        assert "[WARN] BUG-001: Dropped invalid severity 'urgent'" in capsys.readouterr().out

    def test_unparseable_file(self, tmp_path, capsys):
        path = tmp_path / "BACKLOG.md"
        path.write_text("## 1. BUGS\n### bug-001 | no type\n", encoding="utf-8")
        assert main(["check", str(path)]) == 2
        assert "ERROR:" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["check", str(tmp_path / "absent.md")]) == 2
        assert "Backlog file not found" in capsys.readouterr().out


class TestListAndShow:
    """Test the read-only commands."""

    def test_list(self, backlog_file, capsys):
        assert main(["list", str(backlog_file)]) == 0
        out = capsys.readouterr().out
        assert "Items (2)" in out
        assert "BUG-001" in out
        assert "[1/2]" in out

    def test_list_by_type(self, backlog_file, capsys):
        main(["list", str(backlog_file), "--type", "LT"])
        assert "Items: none" in capsys.readouterr().out

    def test_show(self, backlog_file, capsys):
        assert main(["show", str(backlog_file), "BUG-001"]) == 0
        out = capsys.readouterr().out
        assert "Item: BUG-001" in out
        assert "Progress: 1/2" in out

    def test_show_unknown(self, backlog_file, capsys):
        assert main(["show", str(backlog_file), "BUG-404"]) == 1

    def test_show_raw(self, backlog_file, capsys):
        main(["show", str(backlog_file), "CT-001", "--raw"])
        assert capsys.readouterr().out == (
            "### CT-001 | Export PDF\n"
            "**Priorité:** Haute\n"
            "\n"
            "**Spécifications:**\n"
            "- Format A4\n"
            "\n"
            "---\n"
            "\n"
        )

    def test_show_json(self, backlog_file, capsys):
        assert main(["show", str(backlog_file), "BUG-001", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["kind"] == "item"
        assert data["severity"] == "P0"
        assert data["criteria"][1] == {"text": "Error shown", "checked": False}

    def test_show_export(self, backlog_file, capsys):
        main(["show", str(backlog_file), "BUG-001", "--export"])
        out = capsys.readouterr().out
        assert out.startswith(f"From {backlog_file.resolve()} :\n\n### BUG-001 |")
        assert out.endswith("---\n")

    def test_new_id(self, backlog_file, capsys):
        assert main(["new-id", str(backlog_file), "BUG"]) == 0
        assert capsys.readouterr().out.strip() == "BUG-002"


class TestToggle:
    """Test `ticketflow toggle`."""

    def test_only_criterion_line_changes(self, backlog_file, sample_text, capsys):
        assert main(["toggle", str(backlog_file), "BUG-001", "2"]) == 0
        assert capsys.readouterr().out.strip() == "BUG-001: [x] Error shown"
        assert backlog_file.read_text(encoding="utf-8") == sample_text.replace(
            "- [ ] Error shown", "- [x] Error shown"
        )

    def test_twice_restores_file(self, backlog_file, sample_text):
        main(["toggle", str(backlog_file), "BUG-001", "1"])
        main(["toggle", str(backlog_file), "BUG-001", "1"])
        assert backlog_file.read_text(encoding="utf-8") == sample_text

    def test_index_out_of_range(self, backlog_file, sample_text, capsys):
        assert main(["toggle", str(backlog_file), "BUG-001", "3"]) == 1
        assert "no criterion #3" in capsys.readouterr().out
        assert backlog_file.read_text(encoding="utf-8") == sample_text


class TestEdit:
    """Test `ticketflow edit`."""

    def test_set_severity(self, backlog_file, sample_text, capsys):
        assert main(["edit", str(backlog_file), "BUG-001", "--set", "severity=P1"]) == 0
        assert "Updated BUG-001: severity" in capsys.readouterr().out
        assert backlog_file.read_text(encoding="utf-8") == sample_text.replace(
            "P0 - Bloquant", "P1 - Critique"
        )

    def test_patch_file(self, backlog_file, tmp_path):
        patch_file = tmp_path / "patch.yaml"
        patch_file.write_text("effort: M\nspecs:\n  - Format A4\n  - Logo\n")
        assert main(["edit", str(backlog_file), "CT-001", "--patch", str(patch_file)]) == 0
        text = backlog_file.read_text(encoding="utf-8")
        assert "**Effort:** M (Medium)\n" in text
        assert "- Format A4\n- Logo\n" in text

    def test_clear_list_field(self, backlog_file):
        assert main(["edit", str(backlog_file), "CT-001", "--set", "specs="]) == 0
        text = backlog_file.read_text(encoding="utf-8")
        assert "### CT-001 | Export PDF\n**Priorité:** Haute\n\n---\n\n## 3. BUG V5" in text

    def test_protected_field(self, backlog_file, sample_text, capsys):
        assert main(["edit", str(backlog_file), "BUG-001", "--set", "id=BUG-999"]) == 2
        assert "ERROR:" in capsys.readouterr().out
        assert backlog_file.read_text(encoding="utf-8") == sample_text

    def test_nothing_to_change(self, backlog_file):
        assert main(["edit", str(backlog_file), "BUG-001"]) == 2

    def test_unknown_item(self, backlog_file):
        assert main(["edit", str(backlog_file), "BUG-404", "--set", "severity=P1"]) == 1

    def test_english_labels_from_config(self, backlog_file):
        (backlog_file.parent / CONFIG_FILENAME).write_text("language: en\n")
        assert main(["edit", str(backlog_file), "BUG-001", "--set", "severity=P2"]) == 0
        text = backlog_file.read_text(encoding="utf-8")
        assert "**Component:** Auth\n**Severity:** P2 - Major\n" in text
        assert "**Acceptance Criteria:**\n" in text
        assert "**Priorité:** Haute" in text

    def test_explicit_config(self, backlog_file, tmp_path):
        config = tmp_path / "other.yaml"
        config.write_text("language: en\n")
        main(["--config", str(config), "edit", str(backlog_file), "BUG-001", "--set", "severity=P2"])
        assert "**Severity:** P2 - Major" in backlog_file.read_text(encoding="utf-8")


class TestAdd:
    """Test `ticketflow add`."""

    def test_add_to_type_section(self, backlog_file, capsys):
        args = ["add", str(backlog_file), "CT", "Dark mode", "--set", "priority=Moyenne"]
        assert main(args) == 0
        assert "Added CT-002 to section 2. COURT TERME" in capsys.readouterr().out
        text = backlog_file.read_text(encoding="utf-8")
        assert "---\n\n### CT-002 | Dark mode\n**Priorité:** Moyenne\n\n---\n\n## 3. BUG V5" in text
        assert main(["check", str(backlog_file)]) == 0

    def test_add_to_custom_section(self, backlog_file, capsys):
        assert main(["add", str(backlog_file), "BUG_V5", "First"]) == 0
        assert "Added BUG_V5-001 to section 3. BUG V5" in capsys.readouterr().out

    def test_invalid_type(self, backlog_file, sample_text):
        assert main(["add", str(backlog_file), "bug", "x"]) == 2
        assert backlog_file.read_text(encoding="utf-8") == sample_text


class TestAttach:
    """Test `ticketflow attach`."""

    def test_copies_image_and_references_it(self, backlog_file, tmp_path, capsys):
        image = tmp_path / "capture.png"
        image.write_bytes(b"\x89PNG\r\n")
        assert main(["attach", str(backlog_file), "BUG-001", str(image), "--alt", "crash"]) == 0

        stored = list((tmp_path / ".backlog-assets" / "screenshots").iterdir())
        assert len(stored) == 1
        assert re.match(r"^BUG-001_\d+\.png$", stored[0].name)
        assert stored[0].read_bytes() == b"\x89PNG\r\n"
        assert f"Attached {stored[0].name} to BUG-001" in capsys.readouterr().out

        text = backlog_file.read_text(encoding="utf-8")
        assert (
            "- [ ] Error shown\n"
            "\n"
            "**Screenshots:**\n"
            f"![crash](.backlog-assets/screenshots/{stored[0].name})\n"
        ) in text
        assert main(["check", str(backlog_file)]) == 0

    def test_unsupported_type(self, backlog_file, tmp_path, sample_text):
        notes = tmp_path / "notes.txt"
        notes.write_text("x")
        assert main(["attach", str(backlog_file), "BUG-001", str(notes)]) == 2
        assert backlog_file.read_text(encoding="utf-8") == sample_text

    def test_missing_image(self, backlog_file, tmp_path):
        assert main(["attach", str(backlog_file), "BUG-001", str(tmp_path / "absent.png")]) == 2

    def test_unknown_item(self, backlog_file, tmp_path):
        image = tmp_path / "capture.png"
        image.write_bytes(b"\x89PNG")
        assert main(["attach", str(backlog_file), "BUG-404", str(image)]) == 1
        assert not (tmp_path / ".backlog-assets").exists()


class TestRemoveSection:
    """Test `ticketflow remove-section`."""

    def test_remove(self, backlog_file, capsys):
        assert main(["remove-section", str(backlog_file), "BUG_V5"]) == 0
        text = backlog_file.read_text(encoding="utf-8")
        assert "## 3. Légende\n" in text
        assert "BUG V5" not in text

    def test_no_match(self, backlog_file, sample_text, capsys):
        assert main(["remove-section", str(backlog_file), "LT"]) == 1
        assert backlog_file.read_text(encoding="utf-8") == sample_text


class TestExport:
    """Test `ticketflow export`."""

    def test_to_file(self, backlog_file, tmp_path):
        output = tmp_path / "backlog.json"
        assert main(["export", str(backlog_file), "-o", str(output)]) == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert [s["title"] for s in data["sections"]] == ["BUGS", "COURT TERME", "BUG V5", "Légende"]
        kinds = [e["kind"] for e in data["sections"][0]["entries"]]
        assert kinds == ["item", "table-group"]
        assert data["sections"][0]["entries"][1]["rows"][0]["id"] == "BUG-005"

    def test_to_stdout(self, backlog_file, capsys):
        assert main(["export", str(backlog_file)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["sections"][3]["entries"][0]["kind"] == "raw-section"
