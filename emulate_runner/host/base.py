"""Contracts of the external test-execution host.

The orchestrator never schedules tests itself. It decides what to hand to
a host and how many times, so everything it needs from the host is
described here as a protocol.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from ..config.schema import RunnerConfig


@dataclass
class TestFileHandle:
    """A discovered test file. Created by the host."""
    __test__ = False

    path: str
    context: dict[str, Any] = field(default_factory=dict)


class TestWatcher:
    """Cancellation object handed through to the host untouched."""
    __test__ = False

    def __init__(self) -> None:
        self._interrupted = False

    @property
    def interrupted(self) -> bool:
        return self._interrupted

    def interrupt(self) -> None:
        self._interrupted = True


@dataclass
class TestOutcome:
    """Outcome of a single test file run."""
    __test__ = False

    path: str
    passed: bool
    duration_ms: int = 0
    output: str = ""
    error: Optional[str] = None


OnTestStart = Callable[[TestFileHandle], Awaitable[None]]
OnTestResult = Callable[[TestFileHandle, TestOutcome], Awaitable[None]]
OnTestFailure = Callable[[TestFileHandle, Exception], Awaitable[None]]


class HostExecution(Protocol):
    """Single-shot "run these tests" capability of a host."""

    async def __call__(
        self,
        tests: Sequence[TestFileHandle],
        watcher: TestWatcher,
        on_start: OnTestStart,
        on_result: OnTestResult,
        on_failure: OnTestFailure,
        options: dict[str, Any],
    ) -> None: ...


@dataclass
class AggregatedResult:
    success: bool
    num_total: int = 0
    num_passed: int = 0
    num_failed: int = 0


@dataclass
class HostRunResult:
    """What a host's top-level run returns."""
    results: AggregatedResult
    report: dict[str, Any] = field(default_factory=dict)


class Host(Protocol):
    """Top-level run capability of a host."""

    def build_argv(self, config: "RunnerConfig") -> list[str]: ...

    def project_list(self, config: "RunnerConfig", argv: Sequence[str]) -> list[Path]: ...

    async def run_cli(self, argv: Sequence[str], projects: Sequence[Path]) -> HostRunResult: ...
