"""Configuration validator.

Validates a parsed RunnerConfig against business rules.
"""

from .schema import RunnerConfig, ValidationError, ValidationResult


def validate_config(config: RunnerConfig) -> ValidationResult:
    """Validate a parsed RunnerConfig.

    Checks:
    - Emulate profiles (viewport sizes, duplicate devices)
    - Test match globs
    - Screenshot mode has something to emulate

    Args:
        config: Parsed RunnerConfig to validate.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[ValidationError] = []
    warnings: list[ValidationError] = []

    _validate_emulate(config, errors, warnings)

    if not config.testing.test_match:
        errors.append(ValidationError(
            path="testing.test_match",
            message="At least one test file glob is required.",
        ))

    if config.flags.screenshot and not config.flags.e2e:
        warnings.append(ValidationError(
            path="flags.screenshot",
            message="Screenshots only run together with e2e tests.",
            severity="warning",
        ))

    if config.flags.screenshot and not config.testing.emulate:
        warnings.append(ValidationError(
            path="testing.emulate",
            message="Screenshot mode without emulate profiles will not run any e2e tests.",
            severity="warning",
        ))

    if not config.root_dir.is_dir():
        errors.append(ValidationError(
            path="root_dir",
            message=f"Root directory does not exist: {config.root_dir}",
        ))

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def _validate_emulate(
    config: RunnerConfig,
    errors: list[ValidationError],
    warnings: list[ValidationError],
) -> None:
    """Validate emulate profiles."""
    seen_devices: set[str] = set()

    for i, profile in enumerate(config.testing.emulate):
        path = f"testing.emulate[{i}]"

        if profile.device is None and profile.user_agent is None and profile.viewport is None:
            warnings.append(ValidationError(
                path=path,
                message="Profile has no device, userAgent or viewport; the default emulation is used.",
                severity="warning",
            ))

        if profile.device:
            key = profile.device.lower()
            if key in seen_devices:
                warnings.append(ValidationError(
                    path=f"{path}.device",
                    message=f"Device '{profile.device}' is listed more than once.",
                    severity="warning",
                ))
            seen_devices.add(key)

        viewport = profile.viewport
        if viewport is None:
            continue

        for name in ("width", "height"):
            value = getattr(viewport, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(ValidationError(
                    path=f"{path}.viewport.{name}",
                    message=f"Viewport {name} must be a number, got {value!r}.",
                ))
            elif value <= 0:
                errors.append(ValidationError(
                    path=f"{path}.viewport.{name}",
                    message=f"Viewport {name} must be positive, got {value}.",
                ))
