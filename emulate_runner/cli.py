"""CLI entry point for emulate-runner.

    emulate-runner [config.yaml] [options]

Prints a flow-style JSON result on stdout; logs go to stderr.
"""

import asyncio
import dataclasses
import json
import logging
import os
import sys
import time
from pathlib import Path
from typing import Optional

import click

from .config.parser import load_config
from .config.schema import ConfigError, RunnerConfig
from .config.validator import validate_config
from .host.pytest_host import PytestHost
from .reporting.json_reporter import JsonReporter
from .session import run_session


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def apply_cli_flags(config: RunnerConfig, **cli_flags) -> RunnerConfig:
    """Overlay flags given on the command line onto the config's flags.

    Unset options (False/None) leave the configured value alone.
    """
    overrides = {k: v for k, v in cli_flags.items() if v}
    if overrides:
        config.flags = dataclasses.replace(config.flags, **overrides)
    return config


@click.command()
@click.argument("config_file", required=False, type=click.Path(path_type=Path))
@click.option("--e2e", is_flag=True, help="Run e2e tests.")
@click.option("--spec", is_flag=True, help="Run spec tests.")
@click.option("--screenshot", is_flag=True, help="Run e2e tests once per emulate profile.")
@click.option("--ci", is_flag=True, help="CI mode (longer default timeout).")
@click.option("--devtools", is_flag=True, help="Debugging mode (no effective timeout).")
@click.option("--emulate", type=str, default=None, help="Only emulate the matching device or user agent.")
@click.option("--bail", is_flag=True, help="Stop a test file at its first failure.")
@click.option("--pattern", type=str, default=None, help="Only run tests matching this pytest -k expression.")
@click.option("--save-report", is_flag=True, help="Save the JSON report to a file.")
@click.option("--report-dir", type=click.Path(path_type=Path), default=None, help="Directory for saved reports.")
@click.option("--pretty", is_flag=True, help="Pretty print output.")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output.")
def main(
    config_file: Optional[Path],
    e2e: bool,
    spec: bool,
    screenshot: bool,
    ci: bool,
    devtools: bool,
    emulate: Optional[str],
    bail: bool,
    pattern: Optional[str],
    save_report: bool,
    report_dir: Optional[Path],
    pretty: bool,
    verbose: bool,
):
    """Run spec and e2e tests, multiplexing e2e runs over emulate profiles."""
    setup_logging(verbose)

    try:
        config = load_config(config_file) if config_file else RunnerConfig()
    except (FileNotFoundError, ConfigError) as e:
        output_error(f"Failed to load config: {e}")
        sys.exit(1)

    apply_cli_flags(
        config,
        e2e=e2e, spec=spec, screenshot=screenshot, ci=ci, devtools=devtools,
        emulate=emulate, bail=bail, pattern=pattern, verbose=verbose,
    )

    validation = validate_config(config)
    config.logger.debug("config: %s", validation)
    for warning in validation.warnings:
        config.logger.warning("%s: %s", warning.path, warning.message)
    if not validation.valid:
        errors_str = "; ".join(f"{e.path}: {e.message}" for e in validation.errors)
        output_error(
            f"Invalid config: {errors_str}",
            errors=validation.error_count,
            warnings=validation.warning_count,
        )
        sys.exit(1)

    start_time = time.time()
    host = PytestHost(env=os.environ, test_match=config.testing.test_match)

    try:
        success = asyncio.run(run_session(config, os.environ, host))
    except KeyboardInterrupt:
        duration_ms = int((time.time() - start_time) * 1000)
        output_error("Test run interrupted by user", duration_ms=duration_ms)
        sys.exit(130)

    reporter = JsonReporter()
    report = host.last_result.report if host.last_result else None

    report_path = None
    if save_report and report:
        target = (report_dir or Path(".")) / "emulate_runner_report.json"
        report_path = str(reporter.save(report, target))
        config.logger.info("Report saved: %s", report_path)

    flow_output = reporter.generate_flow_output(success, report, report_path)
    print(json.dumps(flow_output, indent=2 if pretty else None, ensure_ascii=False))

    if not success:
        sys.exit(1)


def output_error(message: str, **extra):
    """Output error in flow JSON format."""
    output = {
        "success": False,
        "command": "test",
        "data": extra or None,
        "message": message,
    }
    print(json.dumps(output, ensure_ascii=False))


if __name__ == "__main__":
    main()
