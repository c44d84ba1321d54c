"""Operating system detection.

Only the distinctions the scanner cares about are modelled: whether the
platform has POSIX executable bits (hook detection) and where per-user
configuration lives.
"""

from __future__ import annotations

import sys as _sys
from enum import Enum, auto
from functools import lru_cache

__all__ = ["Platform", "detect_platform", "is_windows"]


class Platform(Enum):
    """Operating system platform."""

    LINUX = auto()
    MACOS = auto()
    WINDOWS = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def has_exec_bit(self) -> bool:
        """True where file permissions carry an executable flag."""
        return self != Platform.WINDOWS


@lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """Detect the current operating system (cached)."""
    # sys.platform is a constant; platform.system() can stall on Windows.
    system = _sys.platform.lower()
    if system.startswith("linux"):
        return Platform.LINUX
    if system.startswith("darwin"):
        return Platform.MACOS
    if system.startswith(("win32", "cygwin", "msys")):
        return Platform.WINDOWS
    return Platform.UNKNOWN


def is_windows() -> bool:
    return detect_platform() == Platform.WINDOWS
