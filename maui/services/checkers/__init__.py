"""Checker modules for environment validation.

Each checker is responsible for a specific component:
- DotNetChecker: active .NET SDK
- WorkloadChecker: MAUI workloads per target platform
- AndroidChecker: Java JDK and Android SDK
- XcodeChecker: Xcode (macOS)
- WindowsChecker: Windows version (WinUI 3)
"""

from maui.services.checkers.android import AndroidChecker
from maui.services.checkers.apple import XcodeChecker
from maui.services.checkers.base import CheckResult, CheckStatus
from maui.services.checkers.common import (
    CommandRunner,
    DefaultCommandRunner,
    TargetPlatform,
    applicable_targets,
)
from maui.services.checkers.dotnet import DotNetChecker
from maui.services.checkers.windows import WindowsChecker
from maui.services.checkers.workloads import WorkloadChecker

__all__ = [
    # Result types
    "CheckResult",
    "CheckStatus",
    # Probing
    "CommandRunner",
    "DefaultCommandRunner",
    # Targets
    "TargetPlatform",
    "applicable_targets",
    # Checkers
    "DotNetChecker",
    "WorkloadChecker",
    "AndroidChecker",
    "XcodeChecker",
    "WindowsChecker",
]
