"""Common utilities for checkers.

This module provides shared functionality used by all checkers:
- CommandRunner protocol for probe abstraction
- TargetPlatform and the host applicability rules
- Version parsing helpers
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from maui.platform.detection import Platform
from maui.platform.process import ProbeResult, probe

__all__ = [
    "CommandRunner",
    "DefaultCommandRunner",
    "TargetPlatform",
    "applicable_targets",
    "first_line",
    "parse_major",
    "same_version",
    "DEPENDENCIES_URL",
]

DEPENDENCIES_URL = "https://learn.microsoft.com/dotnet/android/getting-started/installation/dependencies"


class CommandRunner(Protocol):
    """Protocol for running probes.

    This abstraction allows replacing external tools with canned output in tests.
    """

    def run(
        self,
        executable: str | Path,
        args: Sequence[str] | str | None = None,
        *,
        cwd: Path | None = None,
    ) -> ProbeResult:
        """Run a probe and return its result.

        Raises:
            OSError: The executable could not be started.
        """
        ...


@dataclass(frozen=True, slots=True)
class DefaultCommandRunner:
    """Command runner backed by `maui.platform.process.probe`."""

    timeout: float | None = None

    def run(
        self,
        executable: str | Path,
        args: Sequence[str] | str | None = None,
        *,
        cwd: Path | None = None,
    ) -> ProbeResult:
        return probe(executable, args, cwd, timeout=self.timeout)


class TargetPlatform(Enum):
    """A MAUI target platform a run can be narrowed to."""

    ANDROID = "android"
    IOS = "ios"
    MACCATALYST = "maccatalyst"
    WINDOWS = "windows"

    def __str__(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, value: str | None) -> TargetPlatform | None:
        """Parse a `--platform` value; None or blank means every platform.

        Raises:
            ValueError: Unknown platform name.
        """
        if value is None or not value.strip():
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            names = ", ".join(t.value for t in cls)
            raise ValueError(f"unknown platform {value!r} (expected one of: {names})") from None


_DISPLAY_NAMES = {
    TargetPlatform.ANDROID: "Android",
    TargetPlatform.IOS: "iOS",
    TargetPlatform.MACCATALYST: "Mac Catalyst",
    TargetPlatform.WINDOWS: "Windows",
}


def _host_targets(host: Platform) -> tuple[TargetPlatform, ...]:
    match host:
        case Platform.MACOS:
            return (TargetPlatform.ANDROID, TargetPlatform.IOS, TargetPlatform.MACCATALYST)
        case Platform.WINDOWS:
            return (TargetPlatform.ANDROID, TargetPlatform.WINDOWS)
        case Platform.LINUX | Platform.UNKNOWN:
            return (TargetPlatform.ANDROID,)


def applicable_targets(
    host: Platform, only: TargetPlatform | None = None
) -> tuple[TargetPlatform, ...]:
    """Targets buildable on `host`, narrowed to `only` when given.

    Order is fixed: Android, iOS, Mac Catalyst, Windows.
    """
    targets = _host_targets(host)
    if only is None:
        return targets
    return tuple(t for t in targets if t == only)


def first_line(text: str) -> str:
    """Extract first non-empty line from text."""
    for line in text.strip().splitlines():
        stripped = line.strip()
        if stripped:
            return stripped
    return ""


_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


def parse_major(version: str | None) -> int | None:
    """Major component of a dotted version (`"9.0.100"` -> 9)."""
    if not version:
        return None
    match = _LEADING_INT_RE.match(version)
    if not match:
        return None
    return int(match.group(1))


def _version_parts(version: str) -> tuple[int, ...] | None:
    parts: list[int] = []
    for piece in version.strip().split("."):
        if not piece.isdigit():
            return None
        parts.append(int(piece))
    while len(parts) > 1 and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def same_version(a: str, b: str) -> bool:
    """Compare dotted versions numerically, so `15.0` equals `15.0.0`.

    Non-numeric versions fall back to exact string comparison.
    """
    pa, pb = _version_parts(a), _version_parts(b)
    if pa is None or pb is None:
        return a.strip() == b.strip()
    return pa == pb
