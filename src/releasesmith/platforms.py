"""
Target platform, architecture and runtime identifier handling.
"""

from __future__ import annotations

import platform as host_info
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from releasesmith.exceptions import InvalidTargetError


class Platform(Enum):
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    ANDROID = "android"
    IOS = "ios"

    @property
    def os_name(self) -> str:
        """Operating-system tag used in runtime identifiers."""
        return _OS_NAMES[self]


class Architecture(Enum):
    X64 = "x64"
    ARM64 = "arm64"


_OS_NAMES = {
    Platform.WINDOWS: "win",
    Platform.MACOS: "osx",
    Platform.LINUX: "linux",
    Platform.ANDROID: "android",
    Platform.IOS: "ios",
}

_PLATFORM_ALIASES = {
    "windows": Platform.WINDOWS,
    "win": Platform.WINDOWS,
    "macos": Platform.MACOS,
    "osx": Platform.MACOS,
    "mac": Platform.MACOS,
    "darwin": Platform.MACOS,
    "linux": Platform.LINUX,
    "android": Platform.ANDROID,
    "ios": Platform.IOS,
}

_ARCH_ALIASES = {
    "x64": Architecture.X64,
    "x86_64": Architecture.X64,
    "amd64": Architecture.X64,
    "arm64": Architecture.ARM64,
    "aarch64": Architecture.ARM64,
}

# Mobile targets only ship a single architecture
_FIXED_ARCHITECTURE = {
    Platform.ANDROID: Architecture.ARM64,
    Platform.IOS: Architecture.ARM64,
}


def parse_platform(value: str) -> Platform:
    """
    Parse a platform name case-insensitively, accepting common aliases.

    Raises:
        InvalidTargetError: If the name is not a known platform.
    """
    key = (value or "").strip().lower()
    try:
        return _PLATFORM_ALIASES[key]
    except KeyError:
        raise InvalidTargetError(f"Unknown target platform: {value}") from None


def parse_architecture(value: str) -> Architecture:
    """
    Parse an architecture name case-insensitively.

    Raises:
        InvalidTargetError: If the name is not x64 or arm64 (or an alias).
    """
    key = (value or "").strip().lower()
    try:
        return _ARCH_ALIASES[key]
    except KeyError:
        raise InvalidTargetError(f"Invalid Architecture: {value}") from None


def host_platform() -> Platform:
    """Return the desktop platform the tool is currently running on."""
    system = host_info.system().lower()
    if system == "windows":
        return Platform.WINDOWS
    if system == "darwin":
        return Platform.MACOS
    return Platform.LINUX


@dataclass(frozen=True)
class PlatformTarget:
    """A platform plus architecture, e.g. linux + arm64."""

    platform: Platform
    architecture: Architecture = Architecture.X64

    def __post_init__(self) -> None:
        fixed = _FIXED_ARCHITECTURE.get(self.platform)
        if fixed is not None and self.architecture is not fixed:
            raise InvalidTargetError(
                f"{self.platform.value} only supports {fixed.value}",
                details=f"got {self.architecture.value}",
            )

    @classmethod
    def create(
        cls, platform: Platform, architecture: Optional[Architecture] = None
    ) -> "PlatformTarget":
        """Build a target, filling in the only architecture mobile platforms allow."""
        if architecture is None:
            architecture = _FIXED_ARCHITECTURE.get(platform, Architecture.X64)
        return cls(platform, architecture)

    @property
    def runtime_identifier(self) -> str:
        return f"{self.platform.os_name}-{self.architecture.value}"

    def __str__(self) -> str:
        return self.runtime_identifier
