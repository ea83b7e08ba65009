"""Host platform and architecture detection.

The host is detected once per run and passed down as a `PlatformInfo` value;
checkers match on `Platform` instead of re-probing the OS themselves.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import sys as _sys
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache

__all__ = [
    "Platform",
    "Arch",
    "OsVersion",
    "PlatformInfo",
    "detect",
    "detect_arch",
    "detect_os_version",
    "detect_platform",
]


class Platform(Enum):
    """Operating system platform."""

    LINUX = auto()
    MACOS = auto()
    WINDOWS = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self == Platform.WINDOWS else ""

    def exe_name(self, name: str) -> str:
        """Get executable name with platform-appropriate suffix.

        Example: exe_name("java") -> "java.exe" on Windows, "java" elsewhere.
        """
        return f"{name}{self.exe_suffix}"


class Arch(Enum):
    """CPU architecture."""

    X64 = auto()
    ARM64 = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class OsVersion:
    """Kernel/OS version triple (Windows reports major.minor.build)."""

    major: int
    minor: int
    build: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.build}"


@dataclass(frozen=True, slots=True)
class PlatformInfo:
    """Complete host information.

    Use `detect()` to get the cached instance for the running host; tests
    build their own to simulate other hosts.
    """

    platform: Platform
    arch: Arch
    os_version: OsVersion | None = None

    @property
    def is_windows(self) -> bool:
        return self.platform == Platform.WINDOWS

    @property
    def is_macos(self) -> bool:
        return self.platform == Platform.MACOS

    @property
    def is_linux(self) -> bool:
        return self.platform == Platform.LINUX

    def __str__(self) -> str:
        return f"{self.platform}-{self.arch}"


@lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """Detect the current operating system (cached)."""
    # NOTE: avoid platform.system() on Windows, it may query WMI and hang.
    system = _sys.platform.lower()
    if system.startswith("linux"):
        return Platform.LINUX
    if system.startswith("darwin"):
        return Platform.MACOS
    if system.startswith(("win32", "cygwin", "msys")):
        return Platform.WINDOWS
    return Platform.UNKNOWN


@lru_cache(maxsize=1)
def detect_arch() -> Arch:
    """Detect the current CPU architecture (cached)."""
    if detect_platform() == Platform.WINDOWS:
        machine = (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        ).lower()
    else:
        machine = _platform.machine().lower()
    if machine in ("x86_64", "amd64"):
        return Arch.X64
    if machine in ("aarch64", "arm64"):
        return Arch.ARM64
    return Arch.UNKNOWN


@lru_cache(maxsize=1)
def detect_os_version() -> OsVersion | None:
    """Windows version triple, None on other hosts."""
    getwindowsversion = getattr(_sys, "getwindowsversion", None)
    if getwindowsversion is None:
        return None
    v = getwindowsversion()
    return OsVersion(major=v.major, minor=v.minor, build=v.build)


@lru_cache(maxsize=1)
def detect() -> PlatformInfo:
    """Detect complete host information (cached)."""
    return PlatformInfo(
        platform=detect_platform(),
        arch=detect_arch(),
        os_version=detect_os_version(),
    )
