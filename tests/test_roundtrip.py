"""Round-trip properties of parse_backlog and serialize_backlog."""

import pytest

from ticketflow.backlog import normalize_markdown, parse_backlog, serialize_backlog

CANONICAL_DOCUMENTS = {
    "header-only": "# Backlog\n\nNothing planned yet.\n",
    "no-toc": (
        "# Backlog\n"
        "\n"
        "## 1. BUGS\n"
        "\n"
        "Known issues, newest first.\n"
        "\n"
        "### BUG-002 | Slow search\n"
        "**Severity:** P2 - Major\n"
        "Some free text with  double  spaces.\n"
        "\n"
        "```js\n"
        "- [ ] not a criterion\n"
        "```\n"
        "\n"
        "---\n"
        "\n"
        "### BUG-001 | Crash\n"
        "\n"
        "---\n"
    ),
    "toc-and-tail": (
        "# Backlog\n"
        "\n"
        "## Sommaire\n"
        "1. [BUGS](#1-bugs)\n"
        "\n"
        "---\n"
        "\n"
        "> Last reviewed in March.\n"
        "\n"
        "## 1. BUGS\n"
        "### BUG-001 | x\n"
    ),
    "unnumbered-and-raw": (
        "## Roadmap\n"
        "\n"
        "| Q1 | Q2 |\n"
        "|----|----|\n"
        "\n"
        "## BUGS\n"
        "\n"
        "<!-- Type: BUG -->\n"
        "\n"
        "## Notes, idées en vrac\n"
        "\n"
        "Pas encore triées.\n"
    ),
    "no-final-blank": "## 1. CT\n### CT-001 | x\n- [x] done\n---\n",
}


class TestRoundTripLaw:
    """serialize(parse(text)) == text for canonical documents."""

    def test_sample(self, sample_text):
        assert serialize_backlog(parse_backlog(sample_text)) == sample_text

    @pytest.mark.parametrize("name", sorted(CANONICAL_DOCUMENTS))
    def test_canonical_documents(self, name):
        text = CANONICAL_DOCUMENTS[name]
        assert serialize_backlog(parse_backlog(text)) == text

    def test_crlf_comes_back_normalized(self, sample_text):
        crlf = sample_text.replace("\n", "\r\n")
        assert serialize_backlog(parse_backlog(crlf)) == sample_text


class TestFixedPoint:
    """A second parse/serialize pass changes nothing."""

    NON_CANONICAL = (
        "# Backlog## 1. BUGS### BUG-001 | Crash\n"
        "---### BUG-002 | Other\n"
        "\n"
        "## 2. BUG V5\n"
        "\n"
        "---\n"
        "\n"
        "## 3. Idées & notes\n"
    )

    def test_normalize_then_serialize_twice(self):
        once = serialize_backlog(parse_backlog(normalize_markdown(self.NON_CANONICAL)))
        twice = serialize_backlog(parse_backlog(normalize_markdown(once)))
        assert twice == once

    def test_first_pass_adds_markers(self):
        once = serialize_backlog(parse_backlog(self.NON_CANONICAL))
        assert "<!-- Type: BUG_V5 -->" in once
        assert "<!-- Empty section: Idées & notes -->" in once

    def test_sample_is_fixed_point(self, sample_text):
        once = serialize_backlog(parse_backlog(sample_text))
        assert serialize_backlog(parse_backlog(once)) == once == sample_text
