"""Test modes and the policies each mode selects."""

from collections.abc import Mapping
from enum import StrEnum


class Mode(StrEnum):
    """Testing strategy applied to every test of a suite.

    The value doubles as the label used to prefix test names.
    """

    COMPILE_FAIL = "compile-fail"
    PARSE_FAIL = "parse-fail"
    RUN_FAIL = "run-fail"
    RUN_PASS = "run-pass"
    RUN_PASS_VALGRIND = "run-pass-valgrind"
    PRETTY = "pretty"
    DEBUGINFO_GDB = "debuginfo-gdb"
    DEBUGINFO_LLDB = "debuginfo-lldb"
    CODEGEN = "codegen"
    RUSTDOC = "rustdoc"
    CODEGEN_UNITS = "codegen-units"
    INCREMENTAL = "incremental"
    RUN_MAKE = "run-make"
    UI = "ui"
    MIR_OPT = "mir-opt"


DIRECTORY_UNIT_MODES: frozenset[Mode] = frozenset({Mode.RUN_MAKE})

# The pretty printer runs across every test, so should-fail does not apply.
FAILURE_SUPPRESSING_MODES: frozenset[Mode] = frozenset({Mode.PRETTY})

# Older LLDB builds misbehave with several instances running in parallel.
SERIAL_MODES: frozenset[Mode] = frozenset({Mode.DEBUGINFO_LLDB})

DEBUGGER_FOR_MODE: Mapping[Mode, str] = {
    Mode.DEBUGINFO_GDB: "gdb",
    Mode.DEBUGINFO_LLDB: "lldb",
}


def mode_label(mode: Mode) -> str:
    """Return the prefix used for test names in the given mode."""
    return mode.value


def is_directory_unit(mode: Mode) -> bool:
    """Check whether a whole directory, not a file, is one test in this mode."""
    return mode in DIRECTORY_UNIT_MODES


def suppresses_expected_failure(mode: Mode) -> bool:
    """Check whether should-fail annotations are ignored in this mode."""
    return mode in FAILURE_SUPPRESSING_MODES


def is_android_target(target: str) -> bool:
    """Check whether the target triple names an Android device."""
    return "android" in target


def requires_serial_execution(mode: Mode, target: str) -> bool:
    """Check whether tests must run one at a time.

    Android tests go through a single remote device and debugger, so every
    mode is serialized for Android targets.
    """
    return mode in SERIAL_MODES or is_android_target(target)


def debugger_for_mode(mode: Mode) -> str | None:
    """Return the debugger a mode drives, if any."""
    return DEBUGGER_FOR_MODE.get(mode)
