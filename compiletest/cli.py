"""CLI entry point for compiletest."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from compiletest.debuggers import get_version_line
from compiletest.engines.loading import (
    EngineNotFoundError,
    InvalidEngineError,
    load_engine,
)
from compiletest.environment import apply_mode_overrides
from compiletest.models.config import Config
from compiletest.models.mode import Mode, debugger_for_mode
from compiletest.models.result import RunSummary
from compiletest.runner import build_test_opts, run_tests_console
from compiletest.suite import make_tests
from compiletest.versions import extract_gdb_version, extract_lldb_version

EXIT_OK = 0
EXIT_TESTS_FAILED = 1
EXIT_IO_FAILURE = 2
EXIT_CONFIG_FAILURE = 3

STATUS_SYMBOLS = {
    "success": "✓",
    "failure": "✗",
    "ignored": "-",
}


def log_results_summary(log: logging.Logger, summary: RunSummary) -> None:
    """Log a formatted summary of failed and ignored tests."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for result in summary.results:
        if result.status == "success":
            continue
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        log.info("%s %s: %s (%.2fs)", symbol, result.name, result.status, result.duration)
        if result.message:
            log.info("  Message: %s", result.message)


async def detect_debugger_versions(config: Config) -> Config:
    """Fill in the debugger version the active mode needs, if not given."""
    debugger = debugger_for_mode(config.mode)
    if debugger == "gdb" and config.gdb_version is None:
        line = await get_version_line("gdb")
        return config.model_copy(update={"gdb_version": extract_gdb_version(line)})
    if debugger == "lldb" and config.lldb_version is None:
        line = await get_version_line("lldb")
        return config.model_copy(update={"lldb_version": extract_lldb_version(line)})
    return config


async def run(config: Config, engine_key: str) -> int:
    """Discover and run tests, returning the exit code."""
    log = logging.getLogger("compiletest")

    log.info("Loading engine: %s", engine_key)
    try:
        engine = load_engine(engine_key)
    except (EngineNotFoundError, InvalidEngineError) as e:
        log.error("Cannot load engine: %s", e)
        return EXIT_CONFIG_FAILURE

    config = await detect_debugger_versions(config)
    apply_mode_overrides(config)

    try:
        tests = make_tests(config, engine)
    except OSError as e:
        log.error("I/O failure during test discovery: %s", e)
        return EXIT_IO_FAILURE

    try:
        summary = await run_tests_console(build_test_opts(config), tests)
    except OSError as e:
        log.error("I/O failure during tests: %s", e)
        return EXIT_IO_FAILURE

    log_results_summary(log, summary)

    if not summary.passed:
        log.error("Some tests failed")
        return EXIT_TESTS_FAILED
    return EXIT_OK


def build_config(args: argparse.Namespace) -> Config:
    """Build the configuration from parsed arguments.

    Fields from ``--config`` are kept unless the matching flag was given.

    Raises:
        ValueError: If ``--config`` is not a JSON object or a field is invalid

    """
    fields: dict[str, Any] = json.loads(args.config) if args.config else {}
    if not isinstance(fields, dict):
        raise ValueError("--config must be a JSON object")

    fields.update(src_base=args.src_base, build_base=args.build_base)
    optional = {
        "mode": args.mode,
        "filter": args.filter,
        "filter_exact": args.exact,
        "run_ignored": args.ignored,
        "quiet": args.quiet,
        "logfile": args.logfile,
        "target": args.target,
        "host": args.host,
    }
    fields.update({k: v for k, v in optional.items() if v is not None})
    if args.gdb_version is not None:
        fields["gdb_version"] = extract_gdb_version(args.gdb_version)
    if args.lldb_version is not None:
        fields["lldb_version"] = extract_lldb_version(args.lldb_version)
    return Config.model_validate(fields)


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Discover and run compiler tests from a source tree"
    )
    parser.add_argument(
        "--src-base", type=Path, required=True, help="Directory containing tests"
    )
    parser.add_argument(
        "--build-base",
        type=Path,
        required=True,
        help="Directory mirroring the source tree for build output",
    )
    parser.add_argument(
        "--mode",
        type=Mode,
        choices=list(Mode),
        help="Testing mode (default: run-pass)",
    )
    parser.add_argument(
        "--engine", default="dry-run", help="Execution engine key (default: dry-run)"
    )
    parser.add_argument("--filter", help="Only run tests whose name contains this")
    parser.add_argument(
        "--exact",
        action="store_true",
        default=None,
        help="Match --filter against whole names",
    )
    parser.add_argument(
        "--ignored", action="store_true", default=None, help="Run only ignored tests"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        default=None,
        help="Only report failures and totals",
    )
    parser.add_argument("--logfile", type=Path, help="Write per-test results here")
    parser.add_argument("--target", help="Target triple")
    parser.add_argument("--host", help="Host triple")
    parser.add_argument("--gdb-version", help="Banner line printed by gdb --version")
    parser.add_argument(
        "--lldb-version", help="Banner line printed by lldb --version"
    )
    parser.add_argument(
        "--config", help="JSON object with further configuration fields"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        config = build_config(args)
    except ValueError as e:
        logging.getLogger("compiletest").error("Invalid configuration: %s", e)
        sys.exit(EXIT_CONFIG_FAILURE)

    exit_code = asyncio.run(run(config=config, engine_key=args.engine))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
