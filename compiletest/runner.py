"""Console runner for (descriptor, closure) pairs."""

import asyncio
import dataclasses
import logging
import os
import time
from collections.abc import Mapping, Sequence
from concurrent.futures import Executor, ThreadPoolExecutor
from pathlib import Path

from pydantic import Field

from compiletest.environment import TEST_THREADS_ENV
from compiletest.models.base import Model
from compiletest.models.config import Config
from compiletest.models.result import RunSummary, TestResult
from compiletest.models.test import TestDesc, TestDescAndFn, TestFn

log = logging.getLogger(__name__)

LOGFILE_STATUS: Mapping[str, str] = {
    "success": "ok",
    "failure": "failed",
    "ignored": "ignored",
}


class TestOpts(Model):
    """Options controlling which tests run and how they are reported."""

    __test__ = False

    filter: str | None = Field(default=None, description="Name filter")
    filter_exact: bool = Field(
        default=False, description="Match the filter against whole names only"
    )
    run_ignored: bool = Field(default=False, description="Run only ignored tests")
    quiet: bool = False
    logfile: Path | None = None
    test_threads: int | None = Field(
        default=None, description="Concurrency ceiling (None reads the environment)"
    )


def build_test_opts(config: Config) -> TestOpts:
    """Derive runner options from the harness configuration."""
    return TestOpts(
        filter=config.filter,
        filter_exact=config.filter_exact,
        run_ignored=config.run_ignored,
        quiet=config.quiet,
        logfile=config.logfile,
    )


def get_concurrency() -> int:
    """Read the concurrency ceiling from the environment, else CPU count."""
    if value := os.environ.get(TEST_THREADS_ENV):
        threads = int(value)
        if threads < 1:
            raise ValueError(f"{TEST_THREADS_ENV} must be positive, got {value}")
        return threads
    return os.cpu_count() or 1


def filter_tests(
    opts: TestOpts, tests: Sequence[TestDescAndFn]
) -> Sequence[TestDescAndFn]:
    """Apply the name filter and ignored-test selection, sorted by name."""
    filtered = list(tests)

    if opts.filter is not None:
        if opts.filter_exact:
            filtered = [t for t in filtered if t.desc.name == opts.filter]
        else:
            filtered = [t for t in filtered if opts.filter in t.desc.name]

    if opts.run_ignored:
        filtered = [
            dataclasses.replace(t, desc=dataclasses.replace(t.desc, ignore=False))
            for t in filtered
            if t.desc.ignore
        ]

    return sorted(filtered, key=lambda t: t.desc.name)


def calc_result(
    desc: TestDesc, error: BaseException | None, duration: float
) -> TestResult:
    """Judge a finished test against its expected outcome."""
    if desc.should_panic == "must-fail":
        if error is None:
            return TestResult(
                name=desc.name,
                status="failure",
                duration=duration,
                message="test did not fail as expected",
            )
        return TestResult(name=desc.name, status="success", duration=duration)

    if error is not None:
        return TestResult(
            name=desc.name,
            status="failure",
            duration=duration,
            message=str(error) or type(error).__name__,
        )
    return TestResult(name=desc.name, status="success", duration=duration)


def call_timed(testfn: TestFn) -> tuple[Exception | None, float]:
    """Call a thunk, returning what it raised and how long it took."""
    start = time.monotonic()
    try:
        testfn()
    except Exception as exc:
        return exc, time.monotonic() - start
    return None, time.monotonic() - start


async def run_test(test: TestDescAndFn, executor: Executor) -> TestResult:
    """Run one closure on the worker pool unless it is ignored."""
    if test.desc.ignore:
        return TestResult(name=test.desc.name, status="ignored", duration=0.0)

    loop = asyncio.get_running_loop()
    error, duration = await loop.run_in_executor(executor, call_timed, test.testfn)
    return calc_result(test.desc, error, duration)


async def run_tests_console(
    opts: TestOpts, tests: Sequence[TestDescAndFn]
) -> RunSummary:
    """Run the selected tests concurrently and report each result.

    Returns:
        Summary of every selected test

    Raises:
        OSError: If the log file cannot be written

    """
    selected = filter_tests(opts, tests)
    threads = opts.test_threads or get_concurrency()
    log.info("running %d test(s) with %d thread(s)", len(selected), threads)

    with ThreadPoolExecutor(
        max_workers=threads, thread_name_prefix="compiletest"
    ) as executor:
        results = await asyncio.gather(*(run_test(t, executor) for t in selected))

    level = logging.DEBUG if opts.quiet else logging.INFO
    for result in results:
        log.log(level, "test %s ... %s", result.name, LOGFILE_STATUS[result.status])
        if result.status == "failure":
            log.error("%s failed: %s", result.name, result.message)

    if opts.logfile is not None:
        write_logfile(opts.logfile, results)

    summary = RunSummary(results=results)
    log.info(
        "test result: %s. %d passed; %d failed; %d ignored; %d filtered out",
        "ok" if summary.passed else "FAILED",
        summary.count("success"),
        summary.count("failure"),
        summary.count("ignored"),
        len(tests) - len(selected),
    )
    return summary


def write_logfile(logfile: Path, results: Sequence[TestResult]) -> None:
    """Write one ``<status> <name>`` line per result."""
    with logfile.open("w", encoding="utf-8") as handle:
        for result in results:
            handle.write(f"{LOGFILE_STATUS[result.status]} {result.name}\n")
