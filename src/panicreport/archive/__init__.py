"""Report archive assembly."""

from .builder import (
    DEFAULT_RELATED_PATTERNS,
    DEFAULT_SCHEMA_FILE_NAMES,
    ArchiveBuilder,
    RelatedFile,
    collect_related_files,
)

__all__ = [
    "ArchiveBuilder",
    "RelatedFile",
    "collect_related_files",
    "DEFAULT_RELATED_PATTERNS",
    "DEFAULT_SCHEMA_FILE_NAMES",
]
