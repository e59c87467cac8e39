"""Read the header directives a test needs before it is scheduled."""

import logging
import re
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Protocol

from compiletest.models.config import Config
from compiletest.models.mode import Mode
from compiletest.models.test import EarlyProps
from compiletest.versions import is_blacklisted_lldb_version, version_tuple

log = logging.getLogger(__name__)

# `name` or `name: value`; prose after a bare name is dropped.
DIRECTIVE_PATTERN = re.compile(r"\s*(?P<name>[^\s:]+)(?::\s*(?P<value>\S*))?")

# Substring of the target triple -> name used in ``ignore-<os>`` directives.
OS_TABLE: Sequence[tuple[str, str]] = (
    ("android", "android"),
    ("bitrig", "bitrig"),
    ("darwin", "macos"),
    ("dragonfly", "dragonfly"),
    ("emscripten", "emscripten"),
    ("freebsd", "freebsd"),
    ("ios", "ios"),
    ("linux", "linux"),
    ("netbsd", "netbsd"),
    ("openbsd", "openbsd"),
    ("solaris", "solaris"),
    ("windows", "windows"),
)

# Prefix of the target triple -> name used in ``ignore-<arch>`` directives.
ARCH_TABLE: Sequence[tuple[str, str]] = (
    ("aarch64", "aarch64"),
    ("x86_64", "x86_64"),
    ("i386", "x86"),
    ("i586", "x86"),
    ("i686", "x86"),
    ("arm", "arm"),
    ("mips64", "mips64"),
    ("mips", "mips"),
    ("powerpc64", "powerpc64"),
    ("powerpc", "powerpc"),
    ("s390x", "systemz"),
    ("sparc", "sparc"),
    ("asmjs", "asmjs"),
    ("wasm32", "wasm32"),
)


class EarlyPropsScanner(Protocol):
    """Callable returning the early properties of a test file."""

    def __call__(self, config: Config, testfile: Path) -> EarlyProps:
        """Scan ``testfile`` for header directives."""


def get_os(target: str) -> str:
    """Return the OS name used by directives for a target triple."""
    for key, name in OS_TABLE:
        if key in target:
            return name
    return "unknown"


def get_arch(target: str) -> str:
    """Return the architecture name used by directives for a target triple."""
    for prefix, name in ARCH_TABLE:
        if target.startswith(prefix):
            return name
    return "unknown"


def iter_header(testfile: Path) -> Iterator[str]:
    """Yield the directive text of each header comment line.

    Reading stops at the first item definition; directories yield nothing.
    """
    if testfile.is_dir():
        return

    with testfile.open(encoding="utf-8", errors="replace") as handle:
        for line in handle:
            line = line.strip()
            if line.startswith(("fn", "mod")):
                return
            if line.startswith("//"):
                yield line[2:].strip()


def parse_directive(text: str) -> tuple[str, str | None]:
    """Split ``name: value`` into its parts; bare names have no value.

    The name ends at the first space or colon. Text after the name is only a
    value when a colon follows the name directly; anything else is prose.
    """
    match = DIRECTIVE_PATTERN.match(text)
    if match is None:
        return "", None
    return match.group("name"), match.group("value")


def ignored_names(config: Config) -> frozenset[str]:
    """Return the ``ignore-*`` directive names that apply to this config."""
    names = {
        "ignore-test",
        f"ignore-{get_os(config.target)}",
        f"ignore-{get_arch(config.target)}",
        f"ignore-{config.target}",
        f"ignore-{config.stage_id.split('-')[0]}",
    }
    if config.mode == Mode.PRETTY:
        names.add("ignore-pretty")
    if config.mode == Mode.DEBUGINFO_GDB:
        names.add("ignore-gdb")
    if config.mode == Mode.DEBUGINFO_LLDB:
        names.add("ignore-lldb")
    if config.target != config.host:
        names.add("ignore-cross-compile")
    return frozenset(names)


def debugger_unavailable(config: Config) -> bool:
    """Check whether the active debugger mode cannot run at all.

    An unknown debugger version means the capability is unsupported.
    """
    if config.mode == Mode.DEBUGINFO_GDB:
        return config.gdb_version is None
    if config.mode == Mode.DEBUGINFO_LLDB:
        return config.lldb_version is None or is_blacklisted_lldb_version(
            config.lldb_version
        )
    return False


def below_min_version(actual: str | None, minimum: str) -> bool:
    """Check a ``min-*-version`` directive against a detected version."""
    if actual is None:
        return True
    return version_tuple(actual) < version_tuple(minimum)


def early_props_from_file(config: Config, testfile: Path) -> EarlyProps:
    """Scan a test file for the ``ignore`` and ``should-fail`` directives.

    Files without any directive yield the all-false default.

    Raises:
        OSError: If the file cannot be read

    """
    ignore = debugger_unavailable(config)
    should_fail = False
    ignores = ignored_names(config)

    for text in iter_header(testfile):
        name, value = parse_directive(text)
        if name in ignores:
            ignore = True
        elif name == "should-fail":
            should_fail = True
        elif name == "min-gdb-version" and value:
            if config.mode == Mode.DEBUGINFO_GDB and below_min_version(
                config.gdb_version, value
            ):
                ignore = True
        elif name == "min-lldb-version" and value:
            if config.mode == Mode.DEBUGINFO_LLDB and below_min_version(
                config.lldb_version, value
            ):
                ignore = True

    if ignore:
        log.debug("ignoring test: %s", testfile)
    return EarlyProps(ignore=ignore, should_fail=should_fail)
