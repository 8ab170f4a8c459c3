"""
Process and platform details attached to a report.
"""

import hashlib
import hmac
import platform
import re
import sys
import uuid
from typing import Optional, Sequence

from ..privacy.redactor import REDACTED_PLACEHOLDER, looks_like_credential_url

# CSI and OSC escape sequences plus single-character escapes
_ANSI_RE = re.compile(
    r"\x1b\[[0-?]*[ -/]*[@-~]|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)|\x1b[@-Z\\-_]"
)

# Subcommands whose arguments carry a connection string
_SENSITIVE_COMMANDS = {"introspect"}


def get_command(argv: Optional[Sequence[str]] = None) -> str:
    """
    Describe the command that was running, without leaking connection strings.

    Args:
        argv: Full argument vector (defaults to ``sys.argv``)

    Returns:
        Arguments after the program name joined by spaces
    """
    args = list(sys.argv if argv is None else argv)[1:]
    if args and args[0] in _SENSITIVE_COMMANDS:
        return args[0]
    return " ".join(
        REDACTED_PLACEHOLDER if looks_like_credential_url(arg) else arg for arg in args
    )


def get_operating_system() -> str:
    """Architecture, OS name and release, e.g. ``x86_64 Linux 6.1.0``."""
    return f"{platform.machine()} {platform.system()} {platform.release()}"


def get_platform() -> str:
    """Short platform tag, e.g. ``linux-x86_64``."""
    return f"{platform.system()}-{platform.machine()}".lower()


def strip_ansi(text: str) -> str:
    """Remove terminal color and cursor escape sequences."""
    return _ANSI_RE.sub("", text)


def _hardware_mac() -> Optional[int]:
    node = uuid.getnode()
    # Multicast bit set means getnode() fell back to a random number
    if (node >> 40) & 1:
        return None
    return node


def get_fingerprint(secret: str) -> Optional[str]:
    """
    Opaque machine fingerprint: HMAC-SHA256 of the MAC address.

    Returns None when no hardware address is available.
    """
    mac = _hardware_mac()
    if mac is None:
        return None
    mac_text = ":".join(f"{(mac >> shift) & 0xFF:02x}" for shift in range(40, -1, -8))
    return hmac.new(secret.encode("utf-8"), mac_text.encode("utf-8"), hashlib.sha256).hexdigest()
