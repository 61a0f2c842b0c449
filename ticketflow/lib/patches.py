"""
Item patches from the command line.

A patch is a mapping of Item field names to new values. It comes from
repeated `--set key=value` options, a YAML/JSON file given with --patch,
or both (--set wins). Patches are checked against the item_patch schema
before they reach update_item.
"""

from pathlib import Path
from typing import Optional

import yaml

from ticketflow.lib import validate


class PatchError(Exception):
    """A --set option could not be parsed."""


def parse_set_value(value: str):
    """'' clears a field; '[a, b]' is read as a YAML list; anything else is text."""
    if value == "":
        return None
    if value.startswith("["):
        try:
            return yaml.safe_load(value)
        except yaml.YAMLError as e:
            raise PatchError(f"Invalid list value '{value}': {e}") from None
    return value


def parse_assignments(assignments: Optional[list[str]]) -> dict:
    """['severity=P1', 'specs=[a, b]'] -> {'severity': 'P1', 'specs': ['a', 'b']}"""
    patch = {}
    for assignment in assignments or []:
        key, sep, value = assignment.partition("=")
        if not sep or not key.strip():
            raise PatchError(f"Expected key=value, got '{assignment}'")
        patch[key.strip()] = parse_set_value(value.strip())
    return patch


def build_patch(assignments: Optional[list[str]], patch_file: Optional[str]) -> dict:
    """Merge a patch file and --set options, then validate the result.

    Raises:
        PatchError: malformed --set option
        validate.ValidationError: patch file unreadable or patch off schema
    """
    patch = {}
    if patch_file:
        patch.update(validate.validate_file(Path(patch_file), "item_patch") or {})
    patch.update(parse_assignments(assignments))
    validate.validate(patch, "item_patch")
    return patch
