"""Session entry point.

Writes run settings to the out-of-band channel, hands control to the host
and reports whether everything passed.
"""

from typing import MutableMapping

from .channel import (
    RunModeFlags,
    default_timeout_ms,
    write_emulate_configs,
    write_env_config,
)
from .config.schema import ConfigFlags, RunnerConfig
from .host.base import Host
from .profiles.selector import select_profiles


def run_mode_flags(flags: ConfigFlags) -> RunModeFlags:
    """Derive the run mode from command line flags.

    Asking for neither category runs both. Screenshots only multiplex when
    e2e tests are on.
    """
    e2e, spec = flags.e2e, flags.spec
    if not e2e and not spec:
        e2e = spec = True

    return RunModeFlags(
        e2e=e2e,
        spec=spec,
        screenshot=bool(flags.e2e and flags.screenshot),
        default_timeout_ms=default_timeout_ms(
            ci=flags.ci, e2e=flags.e2e, devtools=flags.devtools
        ),
    )


async def run_session(
    config: RunnerConfig,
    env: MutableMapping[str, str],
    host: Host,
) -> bool:
    """Run a whole test session through ``host``.

    Never raises: any error is logged on ``config.logger`` and turns into a
    failed session.

    Args:
        config: Session configuration.
        env: Out-of-band channel the host's test code reads from.
        host: Test execution host.

    Returns:
        True if every executed test passed.
    """
    success = False

    try:
        # Selected profiles are read back by the orchestrator in the host
        profiles = select_profiles(config.testing.emulate, config.flags.emulate)
        write_emulate_configs(env, profiles)
        write_env_config(env, config.env)

        flags = run_mode_flags(config.flags)
        flags.to_env(env)
        config.logger.debug("default timeout: %s", flags.default_timeout_ms)

        argv = host.build_argv(config)
        projects = host.project_list(config, argv)

        cli_results = await host.run_cli(argv, projects)
        success = bool(cli_results.results.success)

    except Exception as e:
        config.logger.error(e)
        config.logger.error("run_session: %s", e)

    return success
