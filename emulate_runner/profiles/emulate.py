"""Per-profile emulation data.

Before each profile iteration the orchestrator resolves the profile into a
complete emulation record and publishes it, so browser setup code running
deep inside the host can pick up the current device.
"""

import json
import logging
from typing import Any, Mapping, MutableMapping, Optional

from ..channel import EMULATE_KEY
from .schema import EmulateProfile

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "default"
DEFAULT_VIEWPORT = {
    "width": 800,
    "height": 600,
    "deviceScaleFactor": 1,
    "isMobile": False,
    "hasTouch": False,
    "isLandscape": False,
}


def resolve_emulate_data(profile: EmulateProfile) -> dict[str, Any]:
    """Merge a profile over the default screenshot emulation.

    Extra profile parameters (locale, timezone, ...) are carried through
    as they are.

    Raises:
        ValueError: If the profile's viewport width or height is not a number.
    """
    data: dict[str, Any] = dict(profile.extra)
    data["userAgent"] = DEFAULT_USER_AGENT
    data["viewport"] = dict(DEFAULT_VIEWPORT)

    if isinstance(profile.device, str):
        data["device"] = profile.device

    if profile.viewport is not None:
        viewport = profile.viewport
        for name in ("width", "height"):
            value = getattr(viewport, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"emulate viewport {name} must be a number, got {value!r}")
        data["viewport"] = viewport.to_dict()

    if isinstance(profile.user_agent, str):
        data["userAgent"] = profile.user_agent

    return data


def set_screenshot_emulate_data(
    profile: EmulateProfile, env: MutableMapping[str, str]
) -> dict[str, Any]:
    """Publish the resolved emulation data for ``profile`` to the channel."""
    data = resolve_emulate_data(profile)
    env[EMULATE_KEY] = json.dumps(data)
    logger.debug("emulate: %s", profile.label)
    return data


def read_emulate_data(env: Mapping[str, str]) -> Optional[dict[str, Any]]:
    raw = env.get(EMULATE_KEY)
    if not raw:
        return None
    return json.loads(raw)
