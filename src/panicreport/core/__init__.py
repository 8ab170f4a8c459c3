"""Reporting pipeline and environment probe."""

from .environment import (
    get_command,
    get_fingerprint,
    get_operating_system,
    get_platform,
    strip_ansi,
)
from .reporter import PanicReporter, send_panic

__all__ = [
    "PanicReporter",
    "send_panic",
    "get_command",
    "get_fingerprint",
    "get_operating_system",
    "get_platform",
    "strip_ansi",
]
