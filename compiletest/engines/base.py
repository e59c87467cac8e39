"""Abstract base class for execution engines."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from compiletest.models.config import Config
from compiletest.models.test import TestPaths


@dataclass(frozen=True, kw_only=True)
class ExecutionEngine(ABC):
    """Runs one discovered test and decides whether it passed.

    A single engine instance is shared by every test closure and may be
    called from several worker threads at once, so implementations must not
    keep per-test state on the instance.
    """

    @abstractmethod
    def run(self, config: Config, testpaths: TestPaths) -> None:
        """Run a test.

        Args:
            config: Copy of the configuration owned by this test
            testpaths: Location of the test

        Raises:
            Exception: Any exception marks the test as failed

        """

    def output_base_name(self, config: Config, testpaths: TestPaths) -> str:
        """Return the mirror build path prefix for a test's artifacts."""
        stem = testpaths.file.stem if testpaths.file.suffix else testpaths.file.name
        return str(config.build_base / testpaths.relative_dir / stem)
