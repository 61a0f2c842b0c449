"""
Fatal parse errors.

Any of these aborts the whole parse; there is no partial backlog.
"""


class BacklogParseError(ValueError):
    """Backlog text could not be parsed."""

    def __init__(self, message: str, line: str = None):
        self.line = line
        super().__init__(message + (f": {line}" if line is not None else ""))


class MalformedHeaderError(BacklogParseError):
    """A section or item header line does not have the expected shape."""


class UnknownItemTypeError(BacklogParseError):
    """An item id prefix does not resolve to a type."""

    def __init__(self, item_id: str, line: str = None):
        self.item_id = item_id
        super().__init__(f"Unknown item type for ID '{item_id}'", line)
