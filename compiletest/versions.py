"""Extract debugger versions from ``--version`` banner lines."""

import logging
import re

log = logging.getLogger(__name__)

# A "digit.digit" pair not preceded by another digit, plus trailing digits.
GDB_VERSION_PATTERN = re.compile(r"(?<![0-9])[0-9]\.[0-9]+")

LLDB_VERSION_PATTERN = re.compile(r"lldb-([0-9]+)", re.IGNORECASE)

BLACKLISTED_LLDB_VERSION = "350"


def extract_gdb_version(full_version_line: str | None) -> str | None:
    """Extract the gdb version from a banner such as ``GNU gdb 7.11``.

    Returns:
        The version (e.g. ``"7.11"``), or None when the line is absent, blank,
        or carries no version.

    """
    if full_version_line is None or not full_version_line.strip():
        return None

    full_version_line = full_version_line.strip()
    if match := GDB_VERSION_PATTERN.search(full_version_line):
        return match.group(0)

    log.info("Could not extract GDB version from line '%s'", full_version_line)
    return None


def extract_lldb_version(full_version_line: str | None) -> str | None:
    """Extract the major LLDB version from a banner line.

    Only the Apple variant is understood, which looks like ``LLDB-179.5``
    (older releases) or ``lldb-300.2.51`` (newer ones). Both yield the major
    number: ``"179"`` and ``"300"``.
    """
    if full_version_line is None or not full_version_line.strip():
        return None

    full_version_line = full_version_line.strip()
    if match := LLDB_VERSION_PATTERN.search(full_version_line):
        return match.group(1)

    log.info("Could not extract LLDB version from line '%s'", full_version_line)
    return None


def is_blacklisted_lldb_version(version: str) -> bool:
    """Check whether this exact LLDB build is known to break debuginfo tests."""
    return version == BLACKLISTED_LLDB_VERSION


def version_tuple(version: str) -> tuple[int, ...]:
    """Turn a dotted version into a comparable tuple, ignoring junk parts."""
    return tuple(int(part) for part in version.split(".") if part.isdecimal())
