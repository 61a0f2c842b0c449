"""
Schema validation at the CLI boundaries.

Exported JSON and edit patches are checked against the schemas shipped in
ticketflow/schemas/ before they are written or applied. The parsing core
never loads schemas.
"""

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml

SCHEMAS_DIR = Path(__file__).parent.parent / "schemas"

_schemas: dict[str, dict] = {}


class ValidationError(Exception):
    """Data does not match a ticketflow schema."""

    def __init__(self, schema_name: str, message: str, path: str = None):
        self.schema_name = schema_name
        self.path = path
        location = f" at {path}" if path else ""
        super().__init__(f"[{schema_name}] {message}{location}")


def load_schema(schema_name: str) -> dict:
    """Return the parsed <schema_name>.schema.json, read once per process."""
    if schema_name in _schemas:
        return _schemas[schema_name]

    schema_file = SCHEMAS_DIR / f"{schema_name}.schema.json"
    if not schema_file.exists():
        raise ValidationError(schema_name, f"Schema file not found: {schema_file}")
    _schemas[schema_name] = json.loads(schema_file.read_text(encoding="utf-8"))
    return _schemas[schema_name]


def validate(data: Any, schema_name: str) -> None:
    """
    Check decoded data against one of the shipped schemas.

    Args:
        data: Value from json.loads / yaml.safe_load, or built by a command
        schema_name: "backlog", "item", "item_patch" or "config"

    Raises:
        ValidationError: carrying the dotted path of the first failing value,
            or "(root)"
    """
    try:
        jsonschema.validate(instance=data, schema=load_schema(schema_name))
    except jsonschema.ValidationError as e:
        where = ".".join(str(part) for part in e.absolute_path) or "(root)"
        raise ValidationError(schema_name, e.message, where) from None


def _decode(filepath: Path, text: str) -> Any:
    if filepath.suffix in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)


def validate_file(filepath: Path, schema_name: str) -> Any:
    """
    Read a patch or config file and return its validated content.

    .yaml/.yml files go through yaml.safe_load, everything else through
    json.loads.

    Raises:
        ValidationError: missing file, undecodable content or schema mismatch
    """
    if not filepath.exists():
        raise ValidationError(schema_name, f"File not found: {filepath}")

    try:
        data = _decode(filepath, filepath.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValidationError(schema_name, f"Invalid data in {filepath}: {e}") from None

    validate(data, schema_name)
    return data


def validate_before_write(data: Any, schema_name: str, filepath: Path) -> None:
    """Raise ValidationError instead of letting invalid data reach filepath."""
    try:
        validate(data, schema_name)
    except ValidationError as e:
        raise ValidationError(schema_name, f"Refusing to write invalid data to {filepath}: {e}") from None
