"""Windows version checker.

WinUI 3 needs Windows 10 1809 (build 17763) or later.
"""

from __future__ import annotations

from dataclasses import dataclass

from maui.platform.detection import PlatformInfo
from maui.services.checkers.base import CheckResult

NAME = "Windows SDK"
MIN_MAJOR = 10
MIN_BUILD = 17763


@dataclass(frozen=True, slots=True)
class WindowsChecker:
    host: PlatformInfo

    def check(self, verbose: bool = False) -> CheckResult:
        if not self.host.is_windows:
            return CheckResult.not_applicable(NAME)

        version = self.host.os_version
        if version is None:
            return CheckResult.warning(
                NAME,
                "Could not determine Windows version",
                f"Windows 10 build {MIN_BUILD} (1809) or later is required for WinUI 3",
            )

        details = {"OSVersion": str(version)} if verbose else None
        label = f"Windows {version.major}.0 Build {version.build}"

        if version.major >= MIN_MAJOR and version.build >= MIN_BUILD:
            return CheckResult.success(NAME, label, details)
        if version.major >= MIN_MAJOR:
            return CheckResult.warning(
                NAME,
                f"{label}. Build {MIN_BUILD}+ recommended.",
                "Update Windows 10 to version 1809 or later",
                details,
            )
        return CheckResult.error(
            NAME,
            f"{label}. Windows 10 1809+ required.",
            "Upgrade to Windows 10 version 1809 or later, or Windows 11",
            details,
        )
