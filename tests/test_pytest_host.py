"""Tests for the built-in pytest host."""

import asyncio
import sys
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from emulate_runner import channel
from emulate_runner.channel import RunModeFlags
from emulate_runner.host.base import TestFileHandle, TestOutcome, TestWatcher
from emulate_runner.host.pytest_host import PytestHost
from emulate_runner.profiles.schema import EmulateProfile


@pytest.fixture
def project(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "button.spec.py").write_text("def test_ok(): pass\n")
    (tmp_path / "src" / "button.e2e.py").write_text("def test_ok(): pass\n")
    (tmp_path / "tests").mkdir()
    (tmp_path / "tests" / "test_util.py").write_text("def test_ok(): pass\n")
    (tmp_path / "README.md").write_text("docs\n")
    return tmp_path


def _fake_process(returncode=0, stdout=b"1 passed"):
    proc = MagicMock()
    proc.returncode = returncode
    proc.communicate = AsyncMock(return_value=(stdout, None))
    return proc


class TestBuildArgv:
    def test_defaults(self, make_config):
        assert PytestHost(env={}).build_argv(make_config()) == ["-p", "no:cacheprovider", "--import-mode=importlib", "-q"]

    def test_flags(self, make_config):
        argv = PytestHost(env={}).build_argv(make_config(bail=True, pattern="smoke", verbose=True))
        assert argv == ["-p", "no:cacheprovider", "--import-mode=importlib", "-x", "-k", "smoke", "-v"]

    def test_project_list_is_root(self, make_config, tmp_path):
        assert PytestHost(env={}).project_list(make_config(), []) == [tmp_path]

    def test_does_not_touch_discovery_globs(self, make_config):
        host = PytestHost(env={}, test_match=["**/*.e2e.py"])
        config = make_config()
        config.testing.test_match = ["**/*.other.py"]

        host.build_argv(config)

        assert host.test_match == ["**/*.e2e.py"]


class TestDiscover:
    def test_default_globs(self, project):
        paths = [t.path for t in PytestHost(env={}).discover([project])]
        assert paths == sorted([
            str(project / "src" / "button.e2e.py"),
            str(project / "src" / "button.spec.py"),
            str(project / "tests" / "test_util.py"),
        ])

    def test_custom_globs(self, project):
        host = PytestHost(env={}, test_match=["**/*.e2e.py"])
        assert [t.path for t in host.discover([project])] == [str(project / "src" / "button.e2e.py")]

    def test_no_duplicates_across_projects(self, project):
        assert len(PytestHost(env={}).discover([project, project])) == 3


class TestRunTests:
    @pytest.mark.asyncio
    async def test_spawns_pytest_with_channel_env(self, channel_env):
        channel_env[channel.E2E_TESTS_KEY] = "true"
        host = PytestHost(env=channel_env, python="python3")
        handle = TestFileHandle(path="a.e2e.py", context={"project": "/proj"})
        on_start, on_result, on_failure = AsyncMock(), AsyncMock(), AsyncMock()

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=_fake_process())) as spawn:
            await host.run_tests([handle], TestWatcher(), on_start, on_result, on_failure, {"argv": ["-q"]})

        args = spawn.await_args.args
        assert args == ("python3", "-m", "pytest", "-q", "a.e2e.py")
        assert spawn.await_args.kwargs["env"][channel.E2E_TESTS_KEY] == "true"
        assert spawn.await_args.kwargs["cwd"] == "/proj"
        on_start.assert_awaited_once_with(handle)
        outcome = on_result.await_args.args[1]
        assert outcome.passed and outcome.output == "1 passed"
        on_failure.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("returncode,passed", [(0, True), (5, True), (1, False), (2, False)])
    async def test_exit_codes(self, channel_env, returncode, passed):
        host = PytestHost(env=channel_env)
        on_result = AsyncMock()

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=_fake_process(returncode))):
            await host.run_tests([TestFileHandle(path="a.py")], TestWatcher(), AsyncMock(), on_result, AsyncMock(), {})

        outcome = on_result.await_args.args[1]
        assert outcome.passed is passed

    @pytest.mark.asyncio
    async def test_timeout_kills_child_and_reports_failure(self, channel_env):
        RunModeFlags(spec=True, default_timeout_ms=50).to_env(channel_env)
        host = PytestHost(env=channel_env)
        on_result, on_failure = AsyncMock(), AsyncMock()

        async def hang():
            await asyncio.sleep(10)

        proc = MagicMock()
        proc.returncode = None
        proc.communicate = MagicMock(side_effect=hang)
        proc.wait = AsyncMock(return_value=-9)

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            await host.run_tests([TestFileHandle(path="a.py")], TestWatcher(), AsyncMock(), on_result, on_failure, {})

        proc.kill.assert_called_once()
        proc.wait.assert_awaited_once()
        on_result.assert_not_awaited()
        error = on_failure.await_args.args[1]
        assert isinstance(error, TimeoutError)
        assert "50 ms" in str(error)

    @pytest.mark.asyncio
    async def test_spawn_error_reported_as_failure(self, channel_env):
        host = PytestHost(env=channel_env)
        on_result, on_failure = AsyncMock(), AsyncMock()
        handles = [TestFileHandle(path="a.py"), TestFileHandle(path="b.py")]

        with patch("asyncio.create_subprocess_exec", AsyncMock(side_effect=FileNotFoundError("python"))):
            await host.run_tests(handles, TestWatcher(), AsyncMock(), on_result, on_failure, {})

        assert on_failure.await_count == 2
        on_result.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_interrupted_watcher_stops_run(self, channel_env):
        host = PytestHost(env=channel_env)
        watcher = TestWatcher()
        watcher.interrupt()
        on_start = AsyncMock()

        with patch("asyncio.create_subprocess_exec", AsyncMock()) as spawn:
            await host.run_tests([TestFileHandle(path="a.py")], watcher, on_start, AsyncMock(), AsyncMock(), {})

        spawn.assert_not_awaited()
        on_start.assert_not_awaited()


class TestRunCli:
    @pytest.mark.asyncio
    async def test_multiplexes_e2e_files(self, project, channel_env):
        RunModeFlags(e2e=True, spec=False, screenshot=True).to_env(channel_env)
        channel.write_emulate_configs(
            channel_env, [EmulateProfile(device="iPhone X"), EmulateProfile(device="Pixel 2")]
        )
        host = PytestHost(env=channel_env)
        ran = []

        async def run_file(test, argv):
            ran.append((test.path, channel.snapshot(channel_env)[channel.EMULATE_KEY]))
            return TestOutcome(path=test.path, passed=True)

        with patch.object(host, "_run_file", side_effect=run_file):
            result = await host.run_cli(["-q"], [project])

        assert len(ran) == 2
        assert all(path.endswith("button.e2e.py") for path, _ in ran)
        assert result.results.success is True
        assert result.results.num_total == 2
        assert [p["profile"] for p in result.report["profiles"]] == ["iPhone X", "Pixel 2"]
        assert host.last_result is result

    @pytest.mark.asyncio
    async def test_failing_file_fails_session(self, project, channel_env):
        RunModeFlags(e2e=True, spec=True).to_env(channel_env)
        host = PytestHost(env=channel_env)

        async def run_file(test, argv):
            return TestOutcome(path=test.path, passed=not test.path.endswith(".spec.py"))

        with patch.object(host, "_run_file", side_effect=run_file):
            result = await host.run_cli([], [project])

        assert result.results.success is False
        assert result.results.num_total == 3
        assert result.results.num_failed == 1
        assert result.report["profiles"][0]["profile"] == "default"


class TestRealPytestRuns:
    """Runs real pytest children against a small project on disk."""

    @pytest.fixture
    def sample_project(self, tmp_path):
        src = tmp_path / "src"
        src.mkdir()
        (src / "button.e2e.py").write_text(
            "import os\n"
            "\n"
            "def test_sees_run_mode():\n"
            "    assert os.environ['EMULATE_RUNNER_E2E_TESTS'] == 'true'\n"
        )
        (src / "button.spec.py").write_text("def test_ok():\n    assert True\n")
        return tmp_path

    @pytest.mark.asyncio
    async def test_runs_only_the_selected_category(self, sample_project, channel_env, make_config):
        RunModeFlags(e2e=True, spec=False).to_env(channel_env)
        host = PytestHost(env=channel_env, python=sys.executable)

        result = await host.run_cli(host.build_argv(make_config()), [sample_project])

        assert [(t["path"], t["status"]) for t in result.report["tests"]] == [
            (str(sample_project / "src" / "button.e2e.py"), "pass"),
        ]
        assert result.results.success is True

    @pytest.mark.asyncio
    async def test_spec_file_runs_under_its_own_name(self, sample_project, channel_env, make_config):
        RunModeFlags(e2e=False, spec=True).to_env(channel_env)
        host = PytestHost(env=channel_env, python=sys.executable)

        result = await host.run_cli(host.build_argv(make_config()), [sample_project])

        assert [t["status"] for t in result.report["tests"]] == ["pass"]
        assert result.report["tests"][0]["path"].endswith("button.spec.py")

    @pytest.mark.asyncio
    async def test_hung_file_is_stopped_at_default_timeout(self, tmp_path, channel_env, make_config):
        (tmp_path / "slow.spec.py").write_text(
            "import time\n"
            "\n"
            "def test_slow():\n"
            "    time.sleep(30)\n"
        )
        RunModeFlags(spec=True, default_timeout_ms=2000).to_env(channel_env)
        host = PytestHost(env=channel_env, python=sys.executable)

        result = await host.run_cli(host.build_argv(make_config()), [tmp_path])

        [test] = result.report["tests"]
        assert test["status"] == "fail"
        assert test["error"].startswith("TimeoutError")
        assert result.report["summary"]["duration_ms"] < 20000
        assert result.results.success is False
