"""Host module - test execution host contracts and the pytest host."""

from .base import (
    AggregatedResult,
    Host,
    HostExecution,
    HostRunResult,
    TestFileHandle,
    TestOutcome,
    TestWatcher,
)

__all__ = [
    "AggregatedResult",
    "Host",
    "HostExecution",
    "HostRunResult",
    "TestFileHandle",
    "TestOutcome",
    "TestWatcher",
]
