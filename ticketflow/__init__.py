"""ticketflow: round-trip parser and editor for markdown backlog files."""

__version__ = "0.1.0"
