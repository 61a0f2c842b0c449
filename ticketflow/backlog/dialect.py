"""Dialect settings that adjust parsing and item rendering."""

from dataclasses import dataclass, field

from ticketflow.backlog.patterns import ASSETS_FOLDER_NAME, DEFAULT_LANGUAGE, LABELS, LabelSet


@dataclass(frozen=True)
class DialectConfig:
    """Dialect settings, usually loaded from ticketflow.yaml."""
    language: str = DEFAULT_LANGUAGE       # labels for regenerated items (fr, en)
    raw_sections: tuple[str, ...] = ()     # extra titles kept verbatim
    section_types: dict[str, str] = field(default_factory=dict)  # TITLE -> type id
    assets_dir: str = ASSETS_FOLDER_NAME

    @property
    def labels(self) -> LabelSet:
        return LABELS[self.language]


DEFAULT_DIALECT = DialectConfig()
