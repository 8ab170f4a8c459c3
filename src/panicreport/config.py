"""
Configuration for panicreport.

Settings come from environment variables (a ``.env`` file is loaded by the
CLI through python-dotenv). Library callers can also build a
``ReporterConfig`` directly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import ConfigError

DEFAULT_ENDPOINT = "https://error-reports.prisma.sh/"
DEFAULT_TIMEOUT = 20.0
DEFAULT_FINGERPRINT_SECRET = "panicreport-fingerprint"

ENV_ENDPOINT = "PANICREPORT_ENDPOINT"
ENV_TIMEOUT = "PANICREPORT_TIMEOUT"
ENV_DISABLED = "PANICREPORT_DISABLED"
ENV_OUTBOX = "PANICREPORT_OUTBOX"
ENV_FINGERPRINT_SECRET = "PANICREPORT_FINGERPRINT_SECRET"
ENV_LOG_LEVEL = "PANICREPORT_LOG_LEVEL"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_str(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None:
        return None
    raw = raw.strip()
    if not raw:
        return None
    return raw


def _env_bool(name: str) -> bool:
    raw = _env_str(name)
    return raw is not None and raw.lower() in _TRUE_VALUES


def _env_float(name: str, default: float) -> float:
    raw = _env_str(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class ReporterConfig:
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT
    disabled: bool = False
    outbox: Optional[Path] = None  # local submitter instead of the endpoint
    fingerprint_secret: str = DEFAULT_FINGERPRINT_SECRET

    @property
    def submitter_name(self) -> str:
        return "local" if self.outbox else "graphql"

    @classmethod
    def from_env(cls) -> "ReporterConfig":
        outbox = _env_str(ENV_OUTBOX)
        return cls(
            endpoint=_env_str(ENV_ENDPOINT) or DEFAULT_ENDPOINT,
            timeout=_env_float(ENV_TIMEOUT, DEFAULT_TIMEOUT),
            disabled=_env_bool(ENV_DISABLED),
            outbox=Path(outbox) if outbox else None,
            fingerprint_secret=_env_str(ENV_FINGERPRINT_SECRET)
            or DEFAULT_FINGERPRINT_SECRET,
        )


__all__ = [
    "DEFAULT_ENDPOINT",
    "DEFAULT_TIMEOUT",
    "ENV_LOG_LEVEL",
    "ReporterConfig",
]
