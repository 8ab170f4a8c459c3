"""Exception types for panicreport."""

from __future__ import annotations

from enum import IntEnum
from pathlib import Path
from typing import Any, Optional, Union

from .schemas.base import ErrorArea


class ExitCode(IntEnum):
    OK = 0
    REPORT_FAILED = 1
    CONFIG_ERROR = 2


class PanicReportError(Exception):
    """Base error for the reporting pipeline."""


class ConfigError(PanicReportError):
    """Raised for invalid configuration values."""


class SchemaReadError(PanicReportError):
    """Raised when the schema or one of its related files cannot be read."""


class ArchiveError(PanicReportError):
    """Raised when the report archive cannot be assembled."""


class ReportTransportError(PanicReportError):
    """Raised when the collection endpoint rejects or fails a request."""

    def __init__(self, message: str, status: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status = status
        self.payload = payload


class EnginePanic(Exception):
    """
    A crash of the engine binary, carrying the context needed for a report.

    Attributes:
        area: Subsystem that crashed
        rust_stack: Stack trace printed by the engine
        request: Request being processed when it crashed (JSON-serializable)
        schema_path: Path to the schema file in use, if any
        schema: Schema text, when it was passed inline instead of by path
        sql_dump: Optional database dump attached by the caller
    """

    def __init__(
        self,
        message: str,
        rust_stack: str = "",
        area: Union[ErrorArea, str] = ErrorArea.QUERY_ENGINE,
        request: Any = None,
        schema_path: Optional[Union[str, Path]] = None,
        schema: Optional[str] = None,
        sql_dump: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.rust_stack = rust_stack
        self.area = ErrorArea(area)
        self.request = request
        self.schema_path = Path(schema_path) if schema_path else None
        self.schema = schema
        self.sql_dump = sql_dump


def as_exit_code(exc: BaseException) -> int:
    if isinstance(exc, (ConfigError, ValueError)):
        return int(ExitCode.CONFIG_ERROR)
    return int(ExitCode.REPORT_FAILED)
