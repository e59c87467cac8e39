"""Engine that only reports what would be run."""

import logging
from dataclasses import dataclass

from compiletest.engines.base import ExecutionEngine
from compiletest.models.config import Config
from compiletest.models.test import TestPaths

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class DryRunEngine(ExecutionEngine):
    """Logs each test and its build output location without running it."""

    def run(self, config: Config, testpaths: TestPaths) -> None:
        """Log the test instead of running it."""
        log.info(
            "Would run %s test %s (output: %s)",
            config.mode,
            testpaths.file,
            self.output_base_name(config, testpaths),
        )


dry_run_engine = DryRunEngine()
