"""
Input validation — allow-lists for values that reach files or commands (pure).

Configuration values are untrusted. Anything placed on a command line is
passed as its own argv element (never through a shell) and must also
match one of the allow-lists below; anything written into an artifact
must be a single token so it cannot inject extra lines or keys.

Patterns are applied with ``fullmatch`` so a trailing newline never passes.
Every check returns an error message string, or ``None`` if valid.
No I/O, no subprocess.
"""

from __future__ import annotations

import ipaddress
import re

_HOST_LABEL = re.compile(r"(?!-)[A-Za-z0-9-]{1,63}(?<!-)")
_MAC = re.compile(r"[0-9A-Fa-f]{2}(:[0-9A-Fa-f]{2}){5}")
# IFNAMSIZ is 16 including the terminating NUL
_IFNAME = re.compile(r"[A-Za-z0-9_.:@-]{1,15}")
_KEY_ALGO = re.compile(r"[A-Za-z0-9@._+-]+")
_KEY_DATA = re.compile(r"[A-Za-z0-9+/]+={0,3}")
_CONTROL = re.compile(r"[\x00-\x1f\x7f]")


def check_token(value: str, what: str = "value") -> str | None:
    """A single whitespace-free token suitable for a config file line."""
    if not isinstance(value, str) or not value:
        return f"{what} must be a non-empty string"
    if any(ch.isspace() for ch in value) or _CONTROL.search(value):
        return f"{what} {value!r} must not contain whitespace or control characters"
    return None


def check_hostname(value: str) -> str | None:
    """RFC 1123 host name."""
    if not isinstance(value, str) or not value:
        return "hostname must be a non-empty string"
    if len(value) > 253:
        return f"hostname {value[:32]!r}... exceeds 253 characters"
    for label in value.split("."):
        if not _HOST_LABEL.fullmatch(label):
            return f"hostname {value!r} is not a valid RFC 1123 name"
    return None


def check_ip_address(value: str) -> str | None:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return f"{value!r} is not a valid IP address"
    return None


def check_mac_address(value: str) -> str | None:
    if not isinstance(value, str) or not _MAC.fullmatch(value):
        return f"{value!r} is not a valid MAC address"
    return None


def check_interface_name(value: str) -> str | None:
    """Kernel interface name; also used as a file name component."""
    if not isinstance(value, str) or not _IFNAME.fullmatch(value):
        return f"{value!r} is not a valid interface name"
    if value in (".", "..") or value.startswith("-"):
        return f"{value!r} is not a valid interface name"
    return None


def check_ssh_key(algo: str, data: str, comment: str) -> str | None:
    """One authorized_keys entry: algorithm, base64 blob, free comment."""
    if not _KEY_ALGO.fullmatch(algo or ""):
        return f"SSH key algorithm {algo!r} is not valid"
    if not _KEY_DATA.fullmatch(data or ""):
        return f"SSH key data for {algo} is not base64"
    if _CONTROL.search(comment or ""):
        return "SSH key comment must not contain control characters"
    return None


def first_error(*errors: str | None) -> str | None:
    """Return the first non-None error from a series of checks."""
    for err in errors:
        if err:
            return err
    return None
