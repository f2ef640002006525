"""Profiles module - emulation targets and their selection."""

from .schema import EmulateProfile, Viewport
from .selector import select_profiles

__all__ = [
    "EmulateProfile",
    "Viewport",
    "select_profiles",
]
