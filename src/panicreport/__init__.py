"""
panicreport - Crash reports that never leak your connection strings

Collects crash context (command, OS, stack traces, the schema and its
migrations), strips datasource credentials, and sends it to a collection
endpoint for triage.
"""

__version__ = "0.1.0"

import sys

if sys.version_info < (3, 10):
    raise RuntimeError("panicreport requires Python 3.10 or higher")

from .archive import ArchiveBuilder, RelatedFile, collect_related_files
from .config import ReporterConfig
from .core.reporter import PanicReporter, send_panic
from .errors import (
    ArchiveError,
    ConfigError,
    EnginePanic,
    PanicReportError,
    ReportTransportError,
    SchemaReadError,
)
from .privacy import (
    REDACTED_PLACEHOLDER,
    EnvRef,
    LiteralUrl,
    SchemaRedactor,
    UnrecognizedValue,
    redact_schema,
)
from .schemas.base import CreateErrorReportInput, ErrorArea, ErrorKind, ReportResult
from .submitters import (
    SUBMITTERS,
    BaseReportSubmitter,
    GraphQLReportSubmitter,
    LocalReportSubmitter,
    get_submitter,
    list_submitters,
)

__all__ = [
    "__version__",
    # Main API
    "send_panic",
    "PanicReporter",
    "redact_schema",
    "SchemaRedactor",
    # Redaction variants
    "LiteralUrl",
    "EnvRef",
    "UnrecognizedValue",
    "REDACTED_PLACEHOLDER",
    # Archive
    "ArchiveBuilder",
    "RelatedFile",
    "collect_related_files",
    # Models
    "CreateErrorReportInput",
    "ErrorArea",
    "ErrorKind",
    "ReportResult",
    # Config
    "ReporterConfig",
    # Errors
    "EnginePanic",
    "PanicReportError",
    "ConfigError",
    "SchemaReadError",
    "ArchiveError",
    "ReportTransportError",
    # Submitters
    "SUBMITTERS",
    "BaseReportSubmitter",
    "GraphQLReportSubmitter",
    "LocalReportSubmitter",
    "get_submitter",
    "list_submitters",
]
