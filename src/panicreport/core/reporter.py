"""
Main PanicReporter class for sending crash reports.

This is the primary public API for panicreport.
"""

import json
import logging
import traceback
from pathlib import Path
from typing import Optional, Sequence

from ..archive.builder import ArchiveBuilder
from ..config import ReporterConfig
from ..errors import EnginePanic, SchemaReadError
from ..privacy.redactor import SchemaRedactor
from ..schemas.base import CreateErrorReportInput, ErrorKind, ReportResult
from ..submitters import BaseReportSubmitter, get_submitter
from .environment import (
    get_command,
    get_fingerprint,
    get_operating_system,
    get_platform,
    strip_ansi,
)

logger = logging.getLogger(__name__)


class PanicReporter:
    """
    Collects crash context, redacts it and sends it to a collection endpoint.

    The pipeline runs read -> redact -> archive -> open -> upload -> complete.
    The archive is built before the remote report is opened so that a local
    failure never leaves a half-submitted report.

    ``send`` never raises unless ``raise_errors`` is set: the caller is
    already handling a crash and reporting must not add a second one.
    """

    def __init__(
        self,
        config: Optional[ReporterConfig] = None,
        submitter: Optional[BaseReportSubmitter] = None,
        redactor: Optional[SchemaRedactor] = None,
        archive_builder: Optional[ArchiveBuilder] = None,
        raise_errors: bool = False,
    ):
        """
        Initialize PanicReporter.

        Args:
            config: Settings (read from the environment if not provided)
            submitter: Report submitter (built from config if not provided)
            redactor: Schema redactor
            archive_builder: Archive builder (shares the redactor by default)
            raise_errors: Propagate failures instead of swallowing them
        """
        self.config = config or ReporterConfig.from_env()
        self.redactor = redactor or SchemaRedactor()
        self.archive_builder = archive_builder or ArchiveBuilder(redactor=self.redactor)
        self.raise_errors = raise_errors
        self._submitter = submitter
        self._owns_submitter = submitter is None

    def _get_submitter(self) -> BaseReportSubmitter:
        if self._submitter is None:
            name = self.config.submitter_name
            if name == "local":
                kwargs = {"outbox": self.config.outbox}
            else:
                kwargs = {"endpoint": self.config.endpoint, "timeout": self.config.timeout}
            self._submitter = get_submitter(name, **kwargs)
        return self._submitter

    @staticmethod
    def load_schema(panic: EnginePanic) -> Optional[str]:
        """
        Schema text for a panic: inline text wins over the path.

        Raises:
            SchemaReadError: If the schema file cannot be read
        """
        if panic.schema is not None:
            return panic.schema
        if panic.schema_path is None:
            return None
        try:
            return Path(panic.schema_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SchemaReadError(f"Cannot read schema {panic.schema_path}: {e}") from e

    def build_report_input(
        self,
        panic: EnginePanic,
        cli_version: str,
        binary_version: str,
        redacted_schema: Optional[str] = None,
        argv: Optional[Sequence[str]] = None,
    ) -> CreateErrorReportInput:
        """Assemble the report metadata. ``redacted_schema`` must already be redacted."""
        stack = panic.__traceback__
        js_stack = panic.message
        if stack is not None:
            js_stack = "".join(traceback.format_exception(type(panic), panic, stack))

        return CreateErrorReportInput(
            area=panic.area,
            kind=ErrorKind.RUST_PANIC,
            cli_version=cli_version,
            binary_version=binary_version,
            command=get_command(argv),
            js_stack_trace=strip_ansi(js_stack),
            rust_stack_trace=panic.rust_stack,
            operating_system=get_operating_system(),
            platform=get_platform(),
            lift_request=json.dumps(panic.request) if panic.request is not None else None,
            schema_file=redacted_schema,
            fingerprint=get_fingerprint(self.config.fingerprint_secret),
            sql_dump=panic.sql_dump,
        )

    def _submit(
        self,
        panic: EnginePanic,
        cli_version: str,
        binary_version: str,
        argv: Optional[Sequence[str]],
    ) -> ReportResult:
        schema = self.load_schema(panic)
        redacted = self.redactor.redact(schema) if schema is not None else None

        archive = None
        if panic.schema_path is not None:
            archive = self.archive_builder.build_for_schema(panic.schema_path, redacted or "")

        data = self.build_report_input(
            panic, cli_version, binary_version, redacted_schema=redacted, argv=argv
        )

        submitter = self._get_submitter()
        signed_url = submitter.open_report(data)
        if archive is not None:
            submitter.upload_archive(archive, signed_url)
        report_id = submitter.complete_report(signed_url)

        logger.debug("Error report %s submitted", report_id)
        return ReportResult(
            success=True,
            report_id=report_id,
            signed_url=signed_url,
            archive_size=len(archive) if archive is not None else 0,
        )

    def send(
        self,
        panic: EnginePanic,
        cli_version: str,
        binary_version: str,
        argv: Optional[Sequence[str]] = None,
    ) -> ReportResult:
        """
        Send a report for ``panic``.

        Args:
            panic: The crash being reported
            cli_version: Version of the calling tool
            binary_version: Version of the crashed engine
            argv: Argument vector to describe (defaults to ``sys.argv``)

        Returns:
            ReportResult; ``success`` is False when anything failed
        """
        if self.config.disabled:
            logger.debug("Error reporting disabled, not sending")
            return ReportResult(success=False, error="reporting disabled")

        try:
            return self._submit(panic, cli_version, binary_version, argv)
        except Exception as e:
            if self.raise_errors:
                raise
            logger.debug("Error report failed", exc_info=True)
            return ReportResult(success=False, error=str(e))

    def close(self) -> None:
        if self._owns_submitter and self._submitter is not None:
            self._submitter.close()


def send_panic(
    panic: EnginePanic,
    cli_version: str,
    binary_version: str,
    config: Optional[ReporterConfig] = None,
    submitter: Optional[BaseReportSubmitter] = None,
) -> Optional[int]:
    """
    One-liner report function.

    Args:
        panic: The crash being reported
        cli_version: Version of the calling tool
        binary_version: Version of the crashed engine
        config: Optional settings
        submitter: Optional submitter

    Returns:
        The report id, or None if the report could not be sent
    """
    try:
        reporter = PanicReporter(config=config, submitter=submitter)
    except Exception:
        logger.debug("Cannot set up error reporting", exc_info=True)
        return None
    try:
        return reporter.send(panic, cli_version, binary_version).report_id
    finally:
        reporter.close()
