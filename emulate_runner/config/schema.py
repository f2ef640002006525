"""Configuration data models for a test session."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..profiles.schema import EmulateProfile

DEFAULT_TEST_MATCH = [
    "**/*.spec.py",
    "**/*.e2e.py",
    "**/test_*.py",
]


class ConfigError(ValueError):
    """Raised when a configuration file cannot be turned into a RunnerConfig."""


@dataclass
class ConfigFlags:
    """Run flags, usually coming from the command line."""
    ci: bool = False
    e2e: bool = False
    spec: bool = False
    screenshot: bool = False
    devtools: bool = False
    emulate: Optional[str] = None
    bail: bool = False
    pattern: Optional[str] = None
    verbose: bool = False


@dataclass
class TestingConfig:
    """Testing section of the configuration."""
    __test__ = False

    emulate: list[EmulateProfile] = field(default_factory=list)
    test_match: list[str] = field(default_factory=lambda: list(DEFAULT_TEST_MATCH))


@dataclass
class RunnerConfig:
    """A complete session configuration."""
    root_dir: Path = field(default_factory=Path.cwd)
    testing: TestingConfig = field(default_factory=TestingConfig)
    flags: ConfigFlags = field(default_factory=ConfigFlags)
    env: dict[str, Any] = field(default_factory=dict)
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("emulate_runner"),
        repr=False,
    )


@dataclass
class ValidationError:
    """A single validation error."""
    path: str
    message: str
    severity: str = "error"  # "error" or "warning"


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def __str__(self) -> str:
        if self.valid:
            msg = "Valid"
            if self.warnings:
                msg += f" ({self.warning_count} warnings)"
            return msg
        return f"Invalid: {self.error_count} errors, {self.warning_count} warnings"
