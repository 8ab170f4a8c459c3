"""Zip archive assembly for report uploads."""

from __future__ import annotations

import logging
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from ..errors import ArchiveError, SchemaReadError
from ..privacy.redactor import SchemaRedactor

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_FILE_NAMES = ("schema.prisma",)
DEFAULT_RELATED_PATTERNS = ("migrations/**/*",)


@dataclass(frozen=True)
class RelatedFile:
    """A file bundled next to the schema; ``arcname`` is its name inside the zip."""

    path: Path
    arcname: str


def collect_related_files(
    schema_dir: Union[str, Path],
    patterns: Sequence[str] = DEFAULT_RELATED_PATTERNS,
) -> List[RelatedFile]:
    """
    Find files next to the schema that belong in the archive.

    Args:
        schema_dir: Directory holding the schema file
        patterns: Glob patterns relative to ``schema_dir``

    Returns:
        Matching regular files, sorted, named relative to ``schema_dir``
    """
    schema_dir = Path(schema_dir)
    if not schema_dir.is_dir():
        return []

    found = {}
    for pattern in patterns:
        for path in schema_dir.glob(pattern):
            if path.is_file():
                arcname = path.relative_to(schema_dir).as_posix()
                found[arcname] = RelatedFile(path=path, arcname=arcname)
    return [found[name] for name in sorted(found)]


class ArchiveBuilder:
    """
    Bundles the redacted schema and its related files into a zip payload.

    Related files named like a schema file are redacted before inclusion,
    everything else is copied verbatim.
    """

    def __init__(
        self,
        redactor: Optional[SchemaRedactor] = None,
        schema_file_names: Sequence[str] = DEFAULT_SCHEMA_FILE_NAMES,
        compresslevel: int = 9,
    ):
        self.redactor = redactor or SchemaRedactor()
        self.schema_file_names = tuple(schema_file_names)
        self.compresslevel = compresslevel

    def is_schema_file(self, name: str, primary_name: Optional[str] = None) -> bool:
        names = self.schema_file_names + ((primary_name,) if primary_name else ())
        return any(name.endswith(n) for n in names)

    def _read_entry(self, related: RelatedFile, primary_name: str) -> bytes:
        try:
            content = related.path.read_bytes()
        except OSError as e:
            raise SchemaReadError(f"Cannot read {related.path}: {e}") from e

        if self.is_schema_file(related.arcname, primary_name):
            text = content.decode("utf-8", errors="replace")
            return self.redactor.redact(text).encode("utf-8")
        return content

    def build(
        self,
        primary_name: str,
        primary_redacted_text: str,
        related_files: Iterable[RelatedFile] = (),
    ) -> bytes:
        """
        Build the archive.

        Args:
            primary_name: Entry name of the primary schema (its basename)
            primary_redacted_text: Redacted schema text
            related_files: Files to bundle alongside

        Returns:
            The zip payload

        Raises:
            SchemaReadError: If a related file cannot be read
            ArchiveError: If the zip cannot be written
        """
        entries = [(primary_name, self.redactor.redact(primary_redacted_text).encode("utf-8"))]
        for related in related_files:
            if related.arcname == primary_name:
                continue
            entries.append((related.arcname, self._read_entry(related, primary_name)))

        # Temporary file is removed when the block exits, on error too
        with tempfile.TemporaryFile(prefix="panicreport-", suffix=".zip") as tmp:
            try:
                with zipfile.ZipFile(
                    tmp,
                    "w",
                    compression=zipfile.ZIP_DEFLATED,
                    compresslevel=self.compresslevel,
                ) as zf:
                    for arcname, data in entries:
                        zf.writestr(arcname, data)
            except (OSError, zipfile.BadZipFile, ValueError) as e:
                raise ArchiveError(f"Cannot assemble report archive: {e}") from e
            tmp.seek(0)
            payload = tmp.read()

        logger.debug("Built archive with %d entries (%d bytes)", len(entries), len(payload))
        return payload

    def build_for_schema(self, schema_path: Union[str, Path], redacted_text: str) -> bytes:
        """Build the archive for a schema file on disk and its related files."""
        schema_path = Path(schema_path)
        related = collect_related_files(schema_path.parent)
        return self.build(schema_path.name, redacted_text, related)
