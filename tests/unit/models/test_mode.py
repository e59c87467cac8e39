"""Tests for mode policies."""

import pytest

from compiletest.models.mode import (
    Mode,
    debugger_for_mode,
    is_directory_unit,
    mode_label,
    requires_serial_execution,
    suppresses_expected_failure,
)

LINUX = "x86_64-unknown-linux-gnu"


def test_mode_label_is_value() -> None:
    """Labels are the hyphenated mode names."""
    assert mode_label(Mode.RUN_PASS) == "run-pass"
    assert mode_label(Mode.DEBUGINFO_GDB) == "debuginfo-gdb"


def test_modes_parse_from_labels() -> None:
    """Every mode round-trips through its label."""
    assert all(Mode(mode_label(mode)) is mode for mode in Mode)


@pytest.mark.parametrize("mode", list(Mode))
def test_only_run_make_uses_directory_units(mode: Mode) -> None:
    """Directories are test units only in run-make mode."""
    assert is_directory_unit(mode) is (mode == Mode.RUN_MAKE)


@pytest.mark.parametrize("mode", list(Mode))
def test_only_pretty_suppresses_expected_failure(mode: Mode) -> None:
    """Only pretty mode ignores should-fail."""
    assert suppresses_expected_failure(mode) is (mode == Mode.PRETTY)


@pytest.mark.parametrize(
    ("mode", "target", "expected"),
    [
        (Mode.DEBUGINFO_LLDB, LINUX, True),
        (Mode.DEBUGINFO_GDB, LINUX, False),
        (Mode.RUN_PASS, LINUX, False),
        (Mode.RUN_PASS, "arm-linux-androideabi", True),
        (Mode.DEBUGINFO_GDB, "aarch64-linux-android", True),
    ],
)
def test_requires_serial_execution(mode: Mode, target: str, expected: bool) -> None:
    """LLDB sessions and Android targets run one test at a time."""
    assert requires_serial_execution(mode, target) is expected


def test_debugger_for_mode() -> None:
    """Only debuginfo modes drive a debugger."""
    assert debugger_for_mode(Mode.DEBUGINFO_GDB) == "gdb"
    assert debugger_for_mode(Mode.DEBUGINFO_LLDB) == "lldb"
    assert debugger_for_mode(Mode.UI) is None
