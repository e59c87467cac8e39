"""Tests for descriptor and closure assembly."""

import threading
from pathlib import Path
from unittest.mock import Mock

import pytest

from compiletest.engines.base import ExecutionEngine
from compiletest.models.config import Config
from compiletest.models.mode import Mode
from compiletest.models.test import EarlyProps, TestPaths
from compiletest.suite import make_test, make_test_closure, make_test_name, make_tests
from compiletest.testing.factories import EarlyPropsFactory, TestPathsFactory


@pytest.fixture
def engine() -> Mock:
    """Create mock execution engine."""
    return Mock(spec=ExecutionEngine)


def scanner_returning(props: EarlyProps) -> Mock:
    """Create a scanner stub returning fixed early properties."""
    return Mock(return_value=props)


class TestMakeTestName:
    """Tests for make_test_name."""

    def test_joins_mode_relative_dir_and_file(self) -> None:
        """Names a test mode/relative-dir/file."""
        config = Config(mode=Mode.COMPILE_FAIL)
        paths = TestPathsFactory.build()

        assert make_test_name(config, paths) == "compile-fail/foo/bar.rs"

    def test_collapses_empty_relative_dir(self) -> None:
        """Top-level tests have no empty path segment."""
        config = Config(mode=Mode.RUN_PASS)
        paths = TestPaths(
            file=Path("src/top.rs"), base=Path("src"), relative_dir=Path()
        )

        assert make_test_name(config, paths) == "run-pass/top.rs"

    def test_names_directory_units_after_directory(self) -> None:
        """Directory units are named after the directory itself."""
        config = Config(mode=Mode.RUN_MAKE)
        paths = TestPaths(
            file=Path("src/group/linking"),
            base=Path("src"),
            relative_dir=Path("group"),
        )

        assert make_test_name(config, paths) == "run-make/group/linking"


class TestMakeTest:
    """Tests for make_test."""

    @pytest.mark.parametrize(
        ("mode", "props", "expected"),
        [
            (Mode.RUN_PASS, EarlyProps(), "must-pass"),
            (Mode.RUN_PASS, EarlyProps(should_fail=True), "must-fail"),
            (Mode.COMPILE_FAIL, EarlyProps(should_fail=True), "must-fail"),
            (Mode.PRETTY, EarlyProps(), "never-fails"),
            (Mode.PRETTY, EarlyProps(should_fail=True), "never-fails"),
        ],
    )
    def test_expected_outcome(
        self, engine: Mock, mode: Mode, props: EarlyProps, expected: str
    ) -> None:
        """Derives the expected outcome from mode and should-fail."""
        test = make_test(
            Config(mode=mode), TestPathsFactory.build(), engine, scanner_returning(props)
        )

        assert test.desc.should_panic == expected

    def test_pretty_mode_never_fails_for_any_props(self, engine: Mock) -> None:
        """Pretty descriptors ignore should-fail regardless of other props."""
        config = Config(mode=Mode.PRETTY)
        for props in EarlyPropsFactory.batch(size=10):
            test = make_test(
                config, TestPathsFactory.build(), engine, scanner_returning(props)
            )
            assert test.desc.should_panic == "never-fails"
            assert test.desc.ignore == props.ignore

    def test_copies_ignore_flag_and_scans_file(self, engine: Mock) -> None:
        """Passes the unit file to the scanner and keeps its ignore flag."""
        config = Config()
        paths = TestPathsFactory.build()
        scanner = scanner_returning(EarlyProps(ignore=True))

        test = make_test(config, paths, engine, scanner)

        assert test.desc.ignore is True
        scanner.assert_called_once_with(config, paths.file)
        engine.run.assert_not_called()


class TestMakeTestClosure:
    """Tests for make_test_closure."""

    def test_calls_engine_with_config_and_paths(self, engine: Mock) -> None:
        """Invoking the thunk delegates to the engine once."""
        config = Config(mode=Mode.UI)
        paths = TestPathsFactory.build()
        engine.run.return_value = None

        thunk = make_test_closure(config, paths, engine)
        engine.run.assert_not_called()
        thunk()

        engine.run.assert_called_once()
        called_config, called_paths = engine.run.call_args.args
        assert called_config == config
        assert called_paths == paths

    def test_later_config_mutation_is_not_seen(self, engine: Mock) -> None:
        """The thunk owns a copy of the config taken at construction."""
        config = Config(mode=Mode.RUN_PASS, filter="before")
        thunk = make_test_closure(config, TestPathsFactory.build(), engine)

        config.mode = Mode.PRETTY
        config.filter = "after"
        thunk()

        called_config = engine.run.call_args.args[0]
        assert called_config.mode == Mode.RUN_PASS
        assert called_config.filter == "before"
        assert called_config is not config

    def test_engine_failure_propagates(self, engine: Mock) -> None:
        """The engine's exception is the thunk's failure signal."""
        engine.run.side_effect = AssertionError("output mismatch")
        thunk = make_test_closure(Config(), TestPathsFactory.build(), engine)

        with pytest.raises(AssertionError, match="output mismatch"):
            thunk()

    def test_thunks_share_no_config(self, engine: Mock) -> None:
        """Each thunk gets its own config copy."""
        config = Config()
        make_test_closure(config, TestPathsFactory.build(), engine)()
        make_test_closure(config, TestPathsFactory.build(), engine)()

        first, second = (call.args[0] for call in engine.run.call_args_list)
        assert first is not second

    def test_runs_from_any_thread(self, engine: Mock) -> None:
        """Thunks can be invoked from a worker thread."""
        thunk = make_test_closure(Config(), TestPathsFactory.build(), engine)

        worker = threading.Thread(target=thunk)
        worker.start()
        worker.join()

        engine.run.assert_called_once()


class TestMakeTests:
    """Tests for make_tests."""

    def test_builds_pairs_for_discovered_tests(
        self, tmp_path: Path, engine: Mock
    ) -> None:
        """Builds one descriptor and thunk per discovered file."""
        src = tmp_path / "src"
        (src / "foo").mkdir(parents=True)
        (src / "a.rs").write_text("fn main() {}\n")
        (src / "foo" / "b.rs").write_text("// should-fail\nfn main() {}\n")
        config = Config(src_base=src, build_base=tmp_path / "build")

        tests = make_tests(config, engine)

        assert [t.desc.name for t in tests] == ["run-pass/a.rs", "run-pass/foo/b.rs"]
        assert [t.desc.should_panic for t in tests] == ["must-pass", "must-fail"]
        assert (tmp_path / "build" / "foo").is_dir()
        engine.run.assert_not_called()

    def test_discovery_failure_propagates(self, tmp_path: Path, engine: Mock) -> None:
        """No partial list is returned when discovery fails."""
        config = Config(src_base=tmp_path / "missing", build_base=tmp_path / "build")

        with pytest.raises(OSError):
            make_tests(config, engine)
