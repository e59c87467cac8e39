"""Discover test files and mirror the source tree into the build tree."""

import logging
from collections.abc import Sequence
from pathlib import Path

from compiletest.models.config import Config
from compiletest.models.mode import is_directory_unit
from compiletest.models.test import TestPaths

log = logging.getLogger(__name__)

IGNORE_DIR_MARKER = "compiletest-ignore-dir"
DIRECTORY_UNIT_MARKER = "Makefile"
AUXILIARY_DIR = "auxiliary"
TEST_EXTENSION = ".rs"

# Common editor and temp-file prefixes.
INVALID_PREFIXES = (".", "#", "~")


def is_test(file_name: str) -> bool:
    """Check whether a file name is a test source."""
    if not file_name.endswith(TEST_EXTENSION):
        return False
    return not file_name.startswith(INVALID_PREFIXES)


def collect_tests(config: Config, src_base: Path) -> Sequence[TestPaths]:
    """Collect every test under ``src_base``, creating mirror build dirs.

    Every mirror directory exists once this returns, so tests running in
    parallel never race to create them.

    Raises:
        OSError: If a directory cannot be read or a mirror directory cannot
            be created

    """
    log.debug("making tests from %s", src_base)
    tests: list[TestPaths] = []
    _collect_tests_from_dir(config, src_base, src_base, Path(), tests)
    return tests


def _collect_tests_from_dir(
    config: Config,
    base: Path,
    dir_path: Path,
    relative_dir_path: Path,
    tests: list[TestPaths],
) -> None:
    entries = sorted(dir_path.iterdir())
    names = {entry.name for entry in entries}

    if IGNORE_DIR_MARKER in names:
        log.debug("ignoring directory: %s", dir_path)
        return

    if is_directory_unit(config.mode) and DIRECTORY_UNIT_MARKER in names:
        log.debug("found test directory: %s", dir_path)
        tests.append(
            TestPaths(
                file=dir_path,
                base=base,
                relative_dir=relative_dir_path.parent,
            )
        )
        return

    # A test foo/bar.rs writes $build/foo/bar, so $build/foo must exist
    # before any test runs.
    ensure_build_dir(config, relative_dir_path)

    for entry in entries:
        if is_test(entry.name) and not entry.is_dir():
            log.debug("found test file: %s", entry)
            tests.append(
                TestPaths(file=entry, base=base, relative_dir=relative_dir_path)
            )
        elif entry.is_dir():
            relative_file_path = relative_dir_path / entry.name
            if entry.name == AUXILIARY_DIR:
                # Auxiliary crates are built into the mirror but hold no tests.
                ensure_build_dir(config, relative_file_path)
            else:
                log.debug("found directory: %s", entry)
                _collect_tests_from_dir(
                    config, base, entry, relative_file_path, tests
                )
        else:
            log.debug("found other file/directory: %s", entry)


def ensure_build_dir(config: Config, relative_dir_path: Path) -> Path:
    """Create the mirror build directory for a relative path if missing."""
    build_dir = config.build_base / relative_dir_path
    build_dir.mkdir(parents=True, exist_ok=True)
    return build_dir
