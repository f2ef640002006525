"""Out-of-band channel between the session and the test host.

The session and the code the host runs live in different execution
contexts (the host may spawn worker processes), so run settings travel as
string values in an environment-like mapping. This module owns the key
names and converts between those strings and typed values.
"""

import json
from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping

from .profiles.schema import EmulateProfile

EMULATE_CONFIGS_KEY = "EMULATE_RUNNER_EMULATE_CONFIGS"
ENV_KEY = "EMULATE_RUNNER_ENV"
DEFAULT_TIMEOUT_KEY = "EMULATE_RUNNER_DEFAULT_TIMEOUT"
E2E_TESTS_KEY = "EMULATE_RUNNER_E2E_TESTS"
SPEC_TESTS_KEY = "EMULATE_RUNNER_SPEC_TESTS"
SCREENSHOT_KEY = "EMULATE_RUNNER_SCREENSHOT"
EMULATE_KEY = "EMULATE_RUNNER_EMULATE"

CHANNEL_KEYS = (
    EMULATE_CONFIGS_KEY,
    ENV_KEY,
    DEFAULT_TIMEOUT_KEY,
    E2E_TESTS_KEY,
    SPEC_TESTS_KEY,
    SCREENSHOT_KEY,
    EMULATE_KEY,
)

BASE_TIMEOUT_MS = 15000
CI_TIMEOUT_MS = 30000
DEVTOOLS_TIMEOUT_MS = 300000000


def _flag(value: bool) -> str:
    return "true" if value else "false"


@dataclass(frozen=True)
class RunModeFlags:
    """Which test categories run, and whether screenshots multiplex."""
    e2e: bool = False
    spec: bool = False
    screenshot: bool = False
    default_timeout_ms: int = BASE_TIMEOUT_MS

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "RunModeFlags":
        """Read flags from the channel. Only the exact string "true" is on."""
        timeout = env.get(DEFAULT_TIMEOUT_KEY)
        return cls(
            e2e=env.get(E2E_TESTS_KEY) == "true",
            spec=env.get(SPEC_TESTS_KEY) == "true",
            screenshot=env.get(SCREENSHOT_KEY) == "true",
            default_timeout_ms=int(timeout) if timeout else BASE_TIMEOUT_MS,
        )

    def to_env(self, env: MutableMapping[str, str]) -> None:
        env[E2E_TESTS_KEY] = _flag(self.e2e)
        env[SPEC_TESTS_KEY] = _flag(self.spec)
        env[SCREENSHOT_KEY] = _flag(self.screenshot)
        env[DEFAULT_TIMEOUT_KEY] = str(self.default_timeout_ms)


def default_timeout_ms(ci: bool = False, e2e: bool = False, devtools: bool = False) -> int:
    """Timeout for a single test.

    devtools wins over ci/e2e, which win over the baseline.
    """
    if devtools:
        return DEVTOOLS_TIMEOUT_MS
    if ci or e2e:
        return CI_TIMEOUT_MS
    return BASE_TIMEOUT_MS


def write_emulate_configs(
    env: MutableMapping[str, str], profiles: list[EmulateProfile]
) -> None:
    env[EMULATE_CONFIGS_KEY] = json.dumps([p.to_dict() for p in profiles])


def read_emulate_configs(env: Mapping[str, str]) -> list[EmulateProfile]:
    """Parse the selected profiles written by the session.

    Raises:
        KeyError: If the session never wrote the profile list.
        ValueError: If the stored value is not a JSON list of mappings.
    """
    data = json.loads(env[EMULATE_CONFIGS_KEY])
    if not isinstance(data, list):
        raise ValueError(f"{EMULATE_CONFIGS_KEY} must hold a JSON list")
    return [EmulateProfile.from_dict(item) for item in data]


def write_env_config(env: MutableMapping[str, str], config_env: Mapping[str, Any]) -> None:
    env[ENV_KEY] = json.dumps(dict(config_env))


def read_env_config(env: Mapping[str, str]) -> dict[str, Any]:
    raw = env.get(ENV_KEY)
    if not raw:
        return {}
    return json.loads(raw)


def snapshot(env: Mapping[str, str]) -> dict[str, str]:
    """Copy of the channel keys currently set, for handing to a child process."""
    return {k: env[k] for k in CHANNEL_KEYS if k in env}
