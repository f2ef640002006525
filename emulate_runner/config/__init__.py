"""Config module - YAML session configuration."""

from .schema import (
    ConfigError,
    ConfigFlags,
    RunnerConfig,
    TestingConfig,
    ValidationError,
    ValidationResult,
)
from .parser import load_config, parse_config_data
from .validator import validate_config

__all__ = [
    "ConfigError",
    "ConfigFlags",
    "RunnerConfig",
    "TestingConfig",
    "ValidationError",
    "ValidationResult",
    "load_config",
    "parse_config_data",
    "validate_config",
]
