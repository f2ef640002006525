"""Multiplexed test execution.

Wraps a host's single-shot "run these tests" capability. Files are first
filtered by category; in screenshot mode the filtered set then runs once
per selected emulation profile:

1. Read run mode flags from the channel
2. Filter test files by category
3. For each selected profile, in order:
   a. Publish the profile's emulation data
   b. Run the full filtered list through the host
4. Otherwise run the filtered list once
"""

import contextvars
import logging
import os
from contextlib import contextmanager
from typing import Any, Iterator, MutableMapping, Optional, Sequence

from ..channel import EMULATE_KEY, RunModeFlags, read_emulate_configs
from ..host.base import (
    HostExecution,
    OnTestFailure,
    OnTestResult,
    OnTestStart,
    TestFileHandle,
    TestWatcher,
)
from ..profiles.emulate import set_screenshot_emulate_data
from ..profiles.schema import EmulateProfile
from .classifier import include_test_file

logger = logging.getLogger(__name__)

_current_emulate: contextvars.ContextVar[Optional[dict[str, Any]]] = contextvars.ContextVar(
    "current_emulate", default=None
)


def current_emulate() -> Optional[dict[str, Any]]:
    """Emulation data of the profile iteration in progress, if any.

    Setup code running in the same process as the orchestrator reads this
    instead of the channel. Code in host worker processes reads the channel.
    """
    return _current_emulate.get()


@contextmanager
def _profile_scope(profile: EmulateProfile, env: MutableMapping[str, str]) -> Iterator[dict[str, Any]]:
    data = set_screenshot_emulate_data(profile, env)
    token = _current_emulate.set(data)
    try:
        yield data
    finally:
        _current_emulate.reset(token)
        env.pop(EMULATE_KEY, None)


class MultiplexRunner:
    """Runs a host's test execution once, or once per emulation profile."""

    def __init__(
        self,
        base_run_tests: HostExecution,
        env: Optional[MutableMapping[str, str]] = None,
    ):
        """Initialize multiplex runner.

        Args:
            base_run_tests: The host's own execution capability.
            env: Out-of-band channel. Defaults to ``os.environ``.
        """
        self.base_run_tests = base_run_tests
        self.env = os.environ if env is None else env

    def filter_tests(
        self, tests: Sequence[TestFileHandle], flags: RunModeFlags
    ) -> list[TestFileHandle]:
        return [t for t in tests if include_test_file(t.path, flags)]

    async def run_tests(
        self,
        tests: Sequence[TestFileHandle],
        watcher: TestWatcher,
        on_start: OnTestStart,
        on_result: OnTestResult,
        on_failure: OnTestFailure,
        options: dict[str, Any],
    ) -> None:
        """Hand the filtered tests to the host the right number of times.

        Exceptions raised by the host are not caught. A failing profile
        iteration stops the remaining profiles from running.
        """
        flags = RunModeFlags.from_env(self.env)
        tests = self.filter_tests(tests, flags)

        if not flags.screenshot:
            await self.base_run_tests(tests, watcher, on_start, on_result, on_failure, options)
            return

        profiles = read_emulate_configs(self.env)
        if not profiles:
            logger.info("No emulate profiles selected, skipping e2e screenshot run")
            return

        # Profiles share the channel's current-emulate slot, so they must
        # never overlap.
        for index, profile in enumerate(profiles, 1):
            logger.info("Emulate profile %d/%d: %s", index, len(profiles), profile.label)
            with _profile_scope(profile, self.env):
                await self.base_run_tests(tests, watcher, on_start, on_result, on_failure, options)


def multiplexed(
    base_run_tests: HostExecution,
    env: Optional[MutableMapping[str, str]] = None,
) -> HostExecution:
    """Wrap a host execution capability with profile multiplexing."""
    return MultiplexRunner(base_run_tests, env).run_tests
