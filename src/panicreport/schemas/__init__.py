"""Data models for panicreport."""

from .base import CreateErrorReportInput, ErrorArea, ErrorKind, ReportResult

__all__ = [
    "ErrorKind",
    "ErrorArea",
    "CreateErrorReportInput",
    "ReportResult",
]
