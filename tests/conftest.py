"""Shared fixtures for emulate-runner tests."""

import logging
from unittest.mock import MagicMock

import pytest

from emulate_runner.config.schema import ConfigFlags, RunnerConfig, TestingConfig
from emulate_runner.profiles.schema import EmulateProfile, Viewport


@pytest.fixture
def profiles() -> list[EmulateProfile]:
    return [
        EmulateProfile(device="iPhone X"),
        EmulateProfile(device="Pixel 2"),
        EmulateProfile(
            user_agent="Mozilla/5.0 (X11; Linux x86_64) HeadlessChrome",
            viewport=Viewport(width=1024, height=768),
        ),
    ]


@pytest.fixture
def channel_env() -> dict[str, str]:
    """Isolated out-of-band channel instead of os.environ."""
    return {}


@pytest.fixture
def logger() -> MagicMock:
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def make_config(tmp_path, profiles, logger):
    def _make(**flag_overrides) -> RunnerConfig:
        return RunnerConfig(
            root_dir=tmp_path,
            testing=TestingConfig(emulate=list(profiles)),
            flags=ConfigFlags(**flag_overrides),
            env={"API_URL": "http://localhost:3333"},
            logger=logger,
        )
    return _make
