"""Shared backlog documents for the test suite."""

import pytest

# Canonical document: parsing and serializing it changes nothing.
SAMPLE_BACKLOG = """# Backlog Projet

Intro text.

## Table des matières

1. [BUGS](#1-bugs)
2. [COURT TERME](#2-court-terme)

---

## 1. BUGS

### BUG-001 | ⚠️ Login crash
**Composant:** Auth
**Sévérité:** P0 - Bloquant

**Critères d'acceptation:**
- [x] Login works
- [ ] Error shown

---

### BUG-005 à 007 | Corrections mineures
**Sévérité:** P3

| ID | Description | Action |
|----|-------------|--------|
| BUG-005 | Marge | Corriger |
| BUG-006 | Typo | Corriger |

---

## 2. COURT TERME

### CT-001 | Export PDF
**Priorité:** Haute

**Spécifications:**
- Format A4

---

## 3. BUG V5

<!-- Type: BUG_V5 -->

---

## 4. Légende

- P0: bloquant
"""

SCENARIO_BACKLOG = """# Backlog

## 1. BUGS

### BUG-001 | Login crash
**Severity:** P0 - Critical

**Acceptance Criteria:**
- [x] User can log in again

**Screenshots:**
![crash](.backlog-assets/screenshots/BUG-001_1704153600000.png)

---
"""


@pytest.fixture
def sample_text():
    return SAMPLE_BACKLOG


@pytest.fixture
def backlog_file(tmp_path):
    path = tmp_path / "BACKLOG.md"
    path.write_text(SAMPLE_BACKLOG, encoding="utf-8")
    return path


@pytest.fixture
def scenario_text():
    return SCENARIO_BACKLOG
