"""Validation of host entry fields."""

import ipaddress
import re

from hostpick.types import HostEntry

ALIAS_RE = re.compile(r"^[A-Za-z0-9_.-]+$")
HOSTNAME_RE = re.compile(r"^[A-Za-z0-9.-]+$")


class EntryValidationError(ValueError):
    """Raised when a host entry has an invalid field."""


def _is_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def validate_entry(entry: HostEntry) -> None:
    """Raise EntryValidationError describing the first invalid field."""
    if not entry.alias.strip():
        raise EntryValidationError("alias is required")
    if not ALIAS_RE.match(entry.alias):
        raise EntryValidationError("alias may contain letters, digits, dot, dash, underscore")

    host = entry.host
    if not host.strip():
        raise EntryValidationError("Host/IP is required")

    if not _is_ip(host):
        if " " in host:
            raise EntryValidationError("host must not contain spaces")
        if not HOSTNAME_RE.match(host):
            raise EntryValidationError("host contains invalid characters")
        if host.startswith(".") or host.endswith("."):
            raise EntryValidationError("host must not start or end with a dot")
        for label in host.split("."):
            if not label:
                raise EntryValidationError("host must not contain empty labels")
            if label.startswith("-") or label.endswith("-"):
                raise EntryValidationError("hostname labels must not start or end with a hyphen")

    # 0 means unset
    if entry.port != 0 and not 1 <= entry.port <= 65535:
        raise EntryValidationError("port must be a number between 1 and 65535")


def validate_registry(entries: list[HostEntry]) -> list[str]:
    """Validate every entry and return a list of errors, prefixed by alias."""
    errors = []
    for entry in entries:
        # ssh connects to the alias itself when HostName is unset
        effective = entry if entry.host else entry.model_copy(update={"host": entry.alias})
        try:
            validate_entry(effective)
        except EntryValidationError as e:
            errors.append(f"{entry.alias} ({entry.source_file}): {e}")
    return errors
