"""Models describing discovered tests."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

ShouldPanic = Literal["must-pass", "must-fail", "never-fails"]

TestFn = Callable[[], Any]


@dataclass(frozen=True, kw_only=True)
class TestPaths:
    """Location of one discovered test.

    ``file`` is a source file, or a whole directory for directory-unit modes.
    ``relative_dir`` is the directory of the test relative to ``base``.
    """

    __test__ = False

    file: Path
    base: Path
    relative_dir: Path


@dataclass(frozen=True, kw_only=True)
class EarlyProps:
    """Header directives needed before a test is scheduled."""

    ignore: bool = False
    should_fail: bool = False


@dataclass(frozen=True, kw_only=True)
class TestDesc:
    """What the runner needs to filter and report a test."""

    __test__ = False

    name: str
    ignore: bool
    should_panic: ShouldPanic


@dataclass(frozen=True, kw_only=True)
class TestDescAndFn:
    """A test descriptor paired with the thunk that runs it."""

    __test__ = False

    desc: TestDesc
    testfn: TestFn
