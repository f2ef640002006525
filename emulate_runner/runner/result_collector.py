"""Result collector for multiplexed test runs.

Plugs into the host's lifecycle callbacks and aggregates outcomes across
every profile iteration.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..host.base import AggregatedResult, TestFileHandle, TestOutcome
from .orchestrator import current_emulate

logger = logging.getLogger(__name__)

NO_PROFILE = "default"


@dataclass
class CollectedTest:
    """One test file run under one profile."""
    path: str
    profile: str
    passed: bool = False
    duration_ms: int = 0
    error: Optional[str] = None


@dataclass
class CollectedResult:
    """Aggregated collection of test results."""
    tests: list[CollectedTest] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def passed_count(self) -> int:
        return sum(1 for t in self.tests if t.passed)

    @property
    def failed_count(self) -> int:
        return sum(1 for t in self.tests if not t.passed)

    @property
    def total_count(self) -> int:
        return len(self.tests)

    @property
    def all_passed(self) -> bool:
        return all(t.passed for t in self.tests) and not self.errors

    def by_profile(self) -> dict[str, list[CollectedTest]]:
        """Group results by profile label, keeping run order."""
        grouped: dict[str, list[CollectedTest]] = {}
        for test in self.tests:
            grouped.setdefault(test.profile, []).append(test)
        return grouped


def _profile_label() -> str:
    data = current_emulate()
    if not data:
        return NO_PROFILE
    if data.get("device"):
        return data["device"]
    if data.get("userAgent") and data["userAgent"] != "default":
        return data["userAgent"]
    viewport = data.get("viewport") or {}
    return f"{viewport.get('width')}x{viewport.get('height')}"


class ResultCollector:
    """Collects host callback events into a CollectedResult."""

    def __init__(self) -> None:
        self.result = CollectedResult()
        self._pending: dict[tuple[str, str], CollectedTest] = {}

    async def on_start(self, test: TestFileHandle) -> None:
        key = (_profile_label(), test.path)
        entry = CollectedTest(path=test.path, profile=key[0])
        self._pending[key] = entry
        self.result.tests.append(entry)

    async def on_result(self, test: TestFileHandle, outcome: TestOutcome) -> None:
        entry = self._entry_for(test)
        entry.passed = outcome.passed
        entry.duration_ms = outcome.duration_ms
        entry.error = outcome.error
        status = "PASS" if outcome.passed else "FAIL"
        logger.info("[%s] %s (%s)", status, test.path, entry.profile)

    async def on_failure(self, test: TestFileHandle, error: Exception) -> None:
        entry = self._entry_for(test)
        entry.passed = False
        entry.error = f"{type(error).__name__}: {error}"
        self.result.errors.append(f"{test.path} ({entry.profile}): {entry.error}")
        logger.error("[ERROR] %s (%s): %s", test.path, entry.profile, error)

    def _entry_for(self, test: TestFileHandle) -> CollectedTest:
        key = (_profile_label(), test.path)
        entry = self._pending.pop(key, None)
        if entry is None:
            # Host reported without announcing the start.
            entry = CollectedTest(path=test.path, profile=key[0])
            self.result.tests.append(entry)
        return entry

    def aggregate(self) -> AggregatedResult:
        return AggregatedResult(
            success=self.result.all_passed,
            num_total=self.result.total_count,
            num_passed=self.result.passed_count,
            num_failed=self.result.failed_count,
        )
