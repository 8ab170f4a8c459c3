"""
Payload models exchanged with the report collection endpoint.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ErrorKind(str, Enum):
    """What kind of failure is being reported."""

    JS_ERROR = "JS_ERROR"
    RUST_PANIC = "RUST_PANIC"


class ErrorArea(str, Enum):
    """Subsystem in which the failure happened."""

    MIGRATE_CLI = "MIGRATE_CLI"
    MIGRATE_ENGINE = "MIGRATE_ENGINE"
    INTROSPECTION_CLI = "INTROSPECTION_CLI"
    QUERY_ENGINE = "QUERY_ENGINE"
    CLIENT = "CLIENT"


class CreateErrorReportInput(BaseModel):
    """
    Metadata sent when opening a report.

    Field names are camelCase on the wire (``cliVersion``, ``jsStackTrace``...).
    ``schema_file`` must already be redacted.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    area: ErrorArea
    kind: ErrorKind = ErrorKind.RUST_PANIC
    cli_version: str
    binary_version: str
    command: str
    js_stack_trace: str = ""
    rust_stack_trace: str = ""
    operating_system: str
    platform: str
    lift_request: Optional[str] = Field(None, description="JSON of the failing request")
    schema_file: Optional[str] = Field(None, description="Redacted schema text")
    fingerprint: Optional[str] = None
    sql_dump: Optional[str] = None

    def to_payload(self) -> dict:
        """Wire representation, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


@dataclass
class ReportResult:
    """Outcome of one reporting attempt."""

    success: bool
    report_id: Optional[int] = None
    signed_url: Optional[str] = None
    archive_size: int = 0
    error: Optional[str] = None
