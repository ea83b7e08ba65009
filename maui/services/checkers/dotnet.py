""".NET SDK checker.

Runs `dotnet --version` and requires SDK 8 or later. In verbose mode the
record also carries fields from `dotnet --info` and the number of installed
SDKs from `dotnet --list-sdks`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from maui.platform.process import ProbeResult
from maui.services.checkers.base import CheckResult
from maui.services.checkers.common import CommandRunner, DefaultCommandRunner, parse_major

logger = logging.getLogger(__name__)

NAME = ".NET SDK"
MIN_SDK_MAJOR = 8
INSTALL_HINT = "Install .NET 8 or later from https://dot.net"

# `dotnet --info` line prefix -> detail key. The first "Version:" wins.
_INFO_FIELDS = (
    ("Version", "RuntimeVersion"),
    ("Commit", "Commit"),
    ("RID", "RID"),
    ("Base Path", "BasePath"),
)
_INFO_RE = {label: re.compile(rf"{re.escape(label)}:\s*(.+)", re.IGNORECASE) for label, _ in _INFO_FIELDS}


def parse_dotnet_info(output: str) -> dict[str, str]:
    """Extract runtime version, commit, RID and base path from `dotnet --info`."""
    info: dict[str, str] = {}
    for raw in output.splitlines():
        line = raw.strip()
        if not line:
            continue
        for label, key in _INFO_FIELDS:
            if f"{label.lower()}:" not in line.lower():
                continue
            match = _INFO_RE[label].search(line)
            if match and key not in info:
                info[key] = match.group(1).strip()
            # Only the first matching label counts for a line.
            break
    return info


@dataclass(frozen=True, slots=True)
class DotNetChecker:
    """Check the active .NET SDK.

    Attributes:
        runner: Command runner for the `dotnet` probes
    """

    runner: CommandRunner = field(default_factory=DefaultCommandRunner)

    def check(self, verbose: bool = False) -> CheckResult:
        try:
            result = self.runner.run("dotnet", ["--version"])
        except OSError as e:
            return CheckResult.error(NAME, "Not found", f"{INSTALL_HINT}. Error: {e}")

        version = result.stdout.strip()
        major = parse_major(version) if result.ok else None
        if major is None:
            return CheckResult.error(
                NAME, "Not found or version could not be determined", INSTALL_HINT
            )

        details = self._details(version) if verbose else None

        if major >= MIN_SDK_MAJOR:
            message = f"Version {version}"
            if details and "RuntimeVersion" in details:
                message = f"Version {version} (Runtime: {details['RuntimeVersion']})"
            return CheckResult.success(NAME, message, details)

        return CheckResult.warning(
            NAME,
            f"Version {version} detected. .NET 8 or later recommended.",
            "Install .NET 8 or .NET 9 SDK from https://dot.net",
            details,
        )

    def _details(self, version: str) -> dict[str, str]:
        details = {"Version": version}

        info = self._probe("--info")
        if info is not None and info.ok and info.stdout.strip():
            details.update(parse_dotnet_info(info.stdout))

        sdks = self._probe("--list-sdks")
        if sdks is not None and sdks.ok:
            count = sum(1 for line in sdks.stdout.splitlines() if line.strip())
            details["InstalledSDKs"] = str(count)

        return details

    def _probe(self, flag: str) -> ProbeResult | None:
        try:
            return self.runner.run("dotnet", [flag])
        except OSError as e:
            logger.debug("dotnet %s failed: %s", flag, e)
            return None
