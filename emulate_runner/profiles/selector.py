"""Emulation profile selection."""

from typing import Any, Sequence

from .schema import EmulateProfile


def select_profiles(
    all_profiles: Sequence[EmulateProfile],
    emulate_filter: Any = None,
) -> list[EmulateProfile]:
    """Pick the profiles to exercise for this run.

    A profile is kept when its device name equals the filter, or its user
    agent contains the filter, both compared case-insensitively. Either
    match is enough. Order of ``all_profiles`` is preserved.

    Args:
        all_profiles: Every configured profile.
        emulate_filter: Device name or user agent fragment. Anything that is
            not a string means "no filter".

    Returns:
        The selected profiles. May be empty.
    """
    profiles = list(all_profiles)

    if not isinstance(emulate_filter, str):
        return profiles

    wanted = emulate_filter.lower()

    def matches(profile: EmulateProfile) -> bool:
        if isinstance(profile.device, str) and profile.device.lower() == wanted:
            return True
        if isinstance(profile.user_agent, str) and wanted in profile.user_agent.lower():
            return True
        return False

    return [p for p in profiles if matches(p)]
