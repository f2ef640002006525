"""Emulation profile data models.

Profiles are configured once in the build configuration and travel through
the out-of-band channel as JSON, so each model converts to and from the
camelCase dictionaries written there.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Viewport:
    """Browser viewport for an emulated device."""
    width: int
    height: int
    device_scale_factor: float = 1
    is_mobile: bool = False
    has_touch: bool = False
    is_landscape: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Viewport":
        return cls(
            width=data.get("width"),
            height=data.get("height"),
            device_scale_factor=data.get("deviceScaleFactor", 1),
            is_mobile=bool(data.get("isMobile", False)),
            has_touch=bool(data.get("hasTouch", False)),
            is_landscape=bool(data.get("isLandscape", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "deviceScaleFactor": self.device_scale_factor,
            "isMobile": self.is_mobile,
            "hasTouch": self.has_touch,
            "isLandscape": self.is_landscape,
        }


PROFILE_KEYS = {"device", "userAgent", "viewport"}


@dataclass(frozen=True)
class EmulateProfile:
    """A device/browser emulation target.

    Only ``device`` and ``user_agent`` take part in profile selection;
    everything else is carried through untouched for the emulation setup.
    """
    device: Optional[str] = None
    user_agent: Optional[str] = None
    viewport: Optional[Viewport] = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def label(self) -> str:
        """Human readable name used in logs and reports."""
        if self.device:
            return self.device
        if self.user_agent:
            return self.user_agent
        if self.viewport:
            return f"{self.viewport.width}x{self.viewport.height}"
        return "default"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EmulateProfile":
        if not isinstance(data, dict):
            raise ValueError(f"Emulate profile must be a mapping, got {type(data).__name__}")

        viewport_data = data.get("viewport")
        if viewport_data is not None and not isinstance(viewport_data, dict):
            raise ValueError("'viewport' must be a mapping")

        return cls(
            device=data.get("device"),
            user_agent=data.get("userAgent"),
            viewport=Viewport.from_dict(viewport_data) if viewport_data else None,
            extra={k: v for k, v in data.items() if k not in PROFILE_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert profile to dictionary for serialization."""
        data: dict[str, Any] = dict(self.extra)
        if self.device is not None:
            data["device"] = self.device
        if self.user_agent is not None:
            data["userAgent"] = self.user_agent
        if self.viewport is not None:
            data["viewport"] = self.viewport.to_dict()
        return data
