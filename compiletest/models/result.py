"""Models for test execution results."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Result of a single test execution."""

    __test__ = False

    name: str
    status: Literal["success", "failure", "ignored"]
    duration: float
    message: str | None = None


@dataclass(frozen=True, kw_only=True)
class RunSummary:
    """Aggregate outcome of a console run."""

    results: Sequence[TestResult]

    def count(self, status: str) -> int:
        """Count results with the given status."""
        return sum(1 for result in self.results if result.status == status)

    @property
    def passed(self) -> bool:
        """True when no test failed."""
        return self.count("failure") == 0
