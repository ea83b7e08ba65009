"""Xcode checker (macOS only)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from maui.manifest.loader import DEFAULT_MANIFEST
from maui.manifest.model import Manifest, XcodeRequirement
from maui.platform.detection import Platform
from maui.services.checkers.base import CheckResult
from maui.services.checkers.common import (
    CommandRunner,
    DefaultCommandRunner,
    first_line,
    parse_major,
    same_version,
)

NAME = "Xcode"
DEFAULT_MIN_MAJOR = 15
INSTALL_HINT = (
    "Install Xcode from the App Store and run: sudo xcode-select --switch /Applications/Xcode.app"
)

_XCODE_VERSION_RE = re.compile(r"Xcode\s+([\d.]+)")


def parse_xcode_version(output: str) -> str | None:
    """`Xcode 15.4` (first line of `xcodebuild -version`) -> `"15.4"`."""
    match = _XCODE_VERSION_RE.search(first_line(output))
    return match.group(1).rstrip(".") if match else None


@dataclass(frozen=True, slots=True)
class XcodeChecker:
    """Check the selected Xcode against the manifest's minimum and exact pin.

    Attributes:
        platform: Host platform; anything but macOS is not applicable
        manifest: Requirements manifest
        runner: Command runner for `xcode-select` and `xcodebuild`
    """

    platform: Platform
    manifest: Manifest = DEFAULT_MANIFEST
    runner: CommandRunner = field(default_factory=DefaultCommandRunner)

    def _requirement(self) -> XcodeRequirement:
        check = self.manifest.check
        if check is not None and check.xcode is not None:
            return check.xcode
        return XcodeRequirement()

    def check(self, verbose: bool = False) -> CheckResult:
        if self.platform != Platform.MACOS:
            return CheckResult.not_applicable(NAME)

        try:
            selected = self.runner.run("xcode-select", ["-p"])
        except OSError as e:
            return CheckResult.error(NAME, "Could not verify Xcode installation", f"Error: {e}")

        path = selected.stdout.strip()
        if not selected.ok or not path:
            return CheckResult.error(NAME, "Not found", INSTALL_HINT)

        try:
            build = self.runner.run("xcodebuild", ["-version"])
        except OSError:
            return CheckResult.success(NAME, f"Found at {path}")

        version = parse_xcode_version(build.stdout) if build.ok else None
        major = parse_major(version)
        if version is None or major is None:
            return CheckResult.success(NAME, f"Found at {path}")

        requirement = self._requirement()
        min_major = parse_major(requirement.minimum_version) or DEFAULT_MIN_MAJOR
        min_name = requirement.minimum_version_name or f"{min_major}.0"
        details = {"Path": path, "Version": version, "MinimumVersion": min_name} if verbose else None

        if major < min_major:
            return CheckResult.error(
                NAME,
                f"Version {version} detected. Xcode {min_name}+ required.",
                f"Update Xcode to version {min_name} or later from the App Store",
                details,
            )

        exact = requirement.exact_version_name or requirement.exact_version
        if exact and not same_version(version, exact):
            return CheckResult.warning(
                NAME,
                f"Version {version} detected. Xcode {exact} recommended.",
                f"Install Xcode {exact} and select it with: sudo xcode-select --switch <path>",
                details,
            )

        return CheckResult.success(NAME, f"Version {version} at {path}", details)
