"""Turn discovered tests into descriptors and runnable closures."""

import dataclasses
import logging
from collections.abc import Sequence
from pathlib import PurePosixPath

from compiletest.collector import collect_tests
from compiletest.engines.base import ExecutionEngine
from compiletest.header import EarlyPropsScanner, early_props_from_file
from compiletest.models.config import Config
from compiletest.models.mode import mode_label, suppresses_expected_failure
from compiletest.models.test import (
    ShouldPanic,
    TestDesc,
    TestDescAndFn,
    TestFn,
    TestPaths,
)

log = logging.getLogger(__name__)


def make_tests(
    config: Config,
    engine: ExecutionEngine,
    scanner: EarlyPropsScanner = early_props_from_file,
) -> Sequence[TestDescAndFn]:
    """Discover every test under ``config.src_base``.

    Discovery finishes, including creation of all mirror build directories,
    before this returns; nothing is run.

    Raises:
        OSError: If discovery fails; no partial list is returned

    """
    testpaths = collect_tests(config, config.src_base)
    tests = [make_test(config, paths, engine, scanner) for paths in testpaths]
    log.info("Discovered %d %s test(s)", len(tests), config.mode)
    return tests


def make_test(
    config: Config,
    testpaths: TestPaths,
    engine: ExecutionEngine,
    scanner: EarlyPropsScanner = early_props_from_file,
) -> TestDescAndFn:
    """Build the descriptor and closure for one test."""
    early_props = scanner(config, testpaths.file)

    should_panic: ShouldPanic
    if suppresses_expected_failure(config.mode):
        should_panic = "never-fails"
    elif early_props.should_fail:
        should_panic = "must-fail"
    else:
        should_panic = "must-pass"

    return TestDescAndFn(
        desc=TestDesc(
            name=make_test_name(config, testpaths),
            ignore=early_props.ignore,
            should_panic=should_panic,
        ),
        testfn=make_test_closure(config, testpaths, engine),
    )


def make_test_name(config: Config, testpaths: TestPaths) -> str:
    """Name a test after its mode and location, e.g. ``run-pass/foo/bar.rs``."""
    path = (
        PurePosixPath(mode_label(config.mode))
        / testpaths.relative_dir.as_posix()
        / testpaths.file.name
    )
    return str(path)


def make_test_closure(
    config: Config, testpaths: TestPaths, engine: ExecutionEngine
) -> TestFn:
    """Capture copies of the config and paths in an argument-less thunk."""
    config = config.model_copy(deep=True)
    testpaths = dataclasses.replace(testpaths)

    def run_test() -> None:
        return engine.run(config, testpaths)

    return run_test
