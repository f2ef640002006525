"""Spec/e2e test file classification."""

import os
from typing import Union

from ..channel import RunModeFlags

PathLike = Union[str, os.PathLike]


def _normalize(test_path: PathLike) -> str:
    return os.fspath(test_path).lower().replace("\\", "/")


def is_e2e_path(test_path: PathLike) -> bool:
    """Whether a test file follows the e2e naming convention.

    ``button.e2e.py`` and ``e2e.test.py`` are e2e files; everything else is
    a spec file. Matching ignores case and path separator style.
    """
    normalized = _normalize(test_path)
    return ".e2e." in normalized or "/e2e." in normalized


def include_test_file(test_path: PathLike, flags: RunModeFlags) -> bool:
    """Whether a test file should run under the active run mode."""
    if is_e2e_path(test_path):
        return flags.e2e
    return flags.spec
