"""YAML configuration parser.

Example file::

    root_dir: .
    env:
      API_URL: http://localhost:3333
    testing:
      test_match: ["**/*.e2e.py", "**/*.spec.py"]
      emulate:
        - device: iPhone X
        - userAgent: Mozilla/5.0 (X11; Linux x86_64)
          viewport: {width: 1024, height: 768}
"""

import dataclasses
from pathlib import Path
from typing import Any, Union

import yaml

from ..profiles.schema import EmulateProfile
from .schema import ConfigError, ConfigFlags, RunnerConfig, TestingConfig


def load_config(file_path: Union[str, Path]) -> RunnerConfig:
    """Parse a YAML configuration file into a RunnerConfig.

    Args:
        file_path: Path to the YAML configuration file.

    Returns:
        Parsed RunnerConfig. A relative ``root_dir`` is resolved against the
        directory holding the file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ConfigError: If the YAML is malformed or has the wrong shape.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")

    if file_path.suffix not in (".yaml", ".yml"):
        raise ConfigError(f"Expected .yaml or .yml file, got: {file_path.suffix}")

    with open(file_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed YAML in {file_path}: {e}") from e

    if data is None:
        data = {}

    return parse_config_data(data, source=str(file_path), base_dir=file_path.parent)


def parse_config_data(
    data: dict,
    source: str = "<inline>",
    base_dir: Union[str, Path, None] = None,
) -> RunnerConfig:
    """Parse a configuration from an already loaded mapping.

    Raises:
        ConfigError: If fields have the wrong shape.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a YAML mapping, got {type(data).__name__}")

    base = Path(base_dir) if base_dir is not None else Path.cwd()
    root_dir = Path(data.get("root_dir", "."))
    if not root_dir.is_absolute():
        root_dir = base / root_dir

    env = data.get("env", {}) or {}
    if not isinstance(env, dict):
        raise ConfigError(f"'env' must be a mapping in {source}")

    return RunnerConfig(
        root_dir=root_dir,
        testing=_parse_testing(data.get("testing", {}) or {}, source),
        flags=_parse_flags(data.get("flags", {}) or {}, source),
        env=env,
    )


def _parse_testing(data: Any, source: str) -> TestingConfig:
    if not isinstance(data, dict):
        raise ConfigError(f"'testing' must be a mapping in {source}")

    emulate_data = data.get("emulate", []) or []
    if not isinstance(emulate_data, list):
        raise ConfigError(f"'testing.emulate' must be a list in {source}")

    profiles = []
    for i, item in enumerate(emulate_data):
        try:
            profiles.append(EmulateProfile.from_dict(item))
        except ValueError as e:
            raise ConfigError(f"testing.emulate[{i}]: {e} ({source})") from e

    testing = TestingConfig(emulate=profiles)

    if "test_match" in data:
        test_match = data["test_match"]
        if isinstance(test_match, str):
            test_match = [test_match]
        if not isinstance(test_match, list) or not all(isinstance(g, str) for g in test_match):
            raise ConfigError(f"'testing.test_match' must be a list of globs in {source}")
        testing.test_match = test_match

    return testing


def _parse_flags(data: Any, source: str) -> ConfigFlags:
    if not isinstance(data, dict):
        raise ConfigError(f"'flags' must be a mapping in {source}")

    values = {}
    for field_info in dataclasses.fields(ConfigFlags):
        if field_info.name not in data:
            continue
        value = data[field_info.name]
        if field_info.type is bool:
            if not isinstance(value, bool):
                raise ConfigError(
                    f"'flags.{field_info.name}' must be true or false, got {value!r} in {source}"
                )
        elif value is not None and not isinstance(value, str):
            raise ConfigError(
                f"'flags.{field_info.name}' must be a string, got {value!r} in {source}"
            )
        values[field_info.name] = value

    return ConfigFlags(**values)
