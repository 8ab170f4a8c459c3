"""Credential redaction for schema files before they leave the machine."""

from panicreport.privacy.redactor import (
    DEFAULT_URL_KEYS,
    REDACTED_PLACEHOLDER,
    DatasourceBlock,
    EnvRef,
    LiteralUrl,
    SchemaRedactor,
    UnrecognizedValue,
    UrlAssignment,
    UrlValue,
    looks_like_credential_url,
    redact_schema,
)

__all__ = [
    "SchemaRedactor",
    "DatasourceBlock",
    "UrlAssignment",
    "UrlValue",
    "LiteralUrl",
    "EnvRef",
    "UnrecognizedValue",
    "DEFAULT_URL_KEYS",
    "REDACTED_PLACEHOLDER",
    "looks_like_credential_url",
    "redact_schema",
]
