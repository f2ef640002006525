"""Built-in host that runs Python test files with pytest.

Each test file runs in its own ``python -m pytest`` subprocess, with the
out-of-band channel copied into the child's environment so test code can
read the run mode, default timeout and current emulation data.
"""

import asyncio
import logging
import os
import sys
import time
from pathlib import Path
from typing import Any, MutableMapping, Optional, Sequence

from .. import channel
from ..config.schema import DEFAULT_TEST_MATCH, RunnerConfig
from ..reporting.json_reporter import JsonReporter
from ..runner.orchestrator import multiplexed
from ..runner.result_collector import ResultCollector
from .base import (
    HostRunResult,
    OnTestFailure,
    OnTestResult,
    OnTestStart,
    TestFileHandle,
    TestOutcome,
    TestWatcher,
)

logger = logging.getLogger(__name__)

# pytest exit codes treated as a pass: OK and NO_TESTS_COLLECTED
PASSING_EXIT_CODES = {0, 5}


class PytestHost:
    """Discovers test files and runs each one through pytest."""

    def __init__(
        self,
        env: Optional[MutableMapping[str, str]] = None,
        test_match: Optional[Sequence[str]] = None,
        python: Optional[str] = None,
    ):
        """Initialize pytest host.

        Args:
            env: Out-of-band channel. Defaults to ``os.environ``.
            test_match: Globs used to discover test files under a project.
            python: Interpreter used for the pytest subprocesses.
        """
        self.env = os.environ if env is None else env
        self.test_match = list(test_match) if test_match else list(DEFAULT_TEST_MATCH)
        self.python = python or sys.executable
        self.watcher = TestWatcher()
        self.last_result: Optional[HostRunResult] = None
        self._reporter = JsonReporter()

    def build_argv(self, config: RunnerConfig) -> list[str]:
        """Translate run flags into pytest arguments."""
        # Test files are named like button.e2e.py, which is not an importable
        # module name under the default prepend import mode.
        argv = ["-p", "no:cacheprovider", "--import-mode=importlib"]
        if config.flags.bail:
            argv.append("-x")
        if config.flags.pattern:
            argv.extend(["-k", config.flags.pattern])
        argv.append("-v" if config.flags.verbose else "-q")
        return argv

    def project_list(self, config: RunnerConfig, argv: Sequence[str]) -> list[Path]:
        return [Path(config.root_dir)]

    def discover(self, projects: Sequence[Path]) -> list[TestFileHandle]:
        """Find test files under each project root, in a stable order."""
        seen: set[Path] = set()
        handles = []

        for project in projects:
            found: set[Path] = set()
            for pattern in self.test_match:
                found.update(p for p in Path(project).glob(pattern) if p.is_file())
            for path in sorted(found):
                if path not in seen:
                    seen.add(path)
                    handles.append(TestFileHandle(path=str(path), context={"project": str(project)}))

        return handles

    async def run_cli(self, argv: Sequence[str], projects: Sequence[Path]) -> HostRunResult:
        """Discover, run and summarise every test file."""
        start_time = time.time()

        tests = self.discover(projects)
        logger.info("Discovered %d test files", len(tests))

        collector = ResultCollector()
        run_tests = multiplexed(self.run_tests, self.env)
        await run_tests(
            tests,
            self.watcher,
            collector.on_start,
            collector.on_result,
            collector.on_failure,
            {"argv": list(argv)},
        )

        duration_ms = int((time.time() - start_time) * 1000)
        report = self._reporter.generate(collector.result, duration_ms=duration_ms)
        self.last_result = HostRunResult(results=collector.aggregate(), report=report)
        return self.last_result

    async def run_tests(
        self,
        tests: Sequence[TestFileHandle],
        watcher: TestWatcher,
        on_start: OnTestStart,
        on_result: OnTestResult,
        on_failure: OnTestFailure,
        options: dict[str, Any],
    ) -> None:
        """Run each test file serially in a pytest subprocess."""
        argv = options.get("argv", [])

        for test in tests:
            if watcher.interrupted:
                logger.info("Run interrupted, skipping remaining tests")
                return

            await on_start(test)
            try:
                outcome = await self._run_file(test, argv)
            except (OSError, TimeoutError) as e:
                await on_failure(test, e)
                continue
            await on_result(test, outcome)

    async def _run_file(self, test: TestFileHandle, argv: Sequence[str]) -> TestOutcome:
        """Run one file in a pytest subprocess.

        Raises:
            TimeoutError: If the file runs past the session's default
                timeout. The child is killed first.
            OSError: If the interpreter cannot be started.
        """
        timeout_ms = channel.RunModeFlags.from_env(self.env).default_timeout_ms
        child_env = dict(os.environ)
        child_env.update(channel.snapshot(self.env))

        start_time = time.time()
        proc = await asyncio.create_subprocess_exec(
            self.python, "-m", "pytest", *argv, test.path,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            env=child_env,
            cwd=test.context.get("project"),
        )
        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout_ms / 1000)
        except TimeoutError:
            raise TimeoutError(
                f"{test.path} exceeded the default timeout of {timeout_ms} ms"
            ) from None
        finally:
            # Timed out or cancelled
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
        duration_ms = int((time.time() - start_time) * 1000)

        output = stdout.decode("utf-8", errors="replace") if stdout else ""
        passed = proc.returncode in PASSING_EXIT_CODES
        return TestOutcome(
            path=test.path,
            passed=passed,
            duration_ms=duration_ms,
            output=output,
            error=None if passed else f"pytest exited with code {proc.returncode}",
        )
