from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from maui.core.errors import ErrorCode
from maui.manifest.model import Manifest
from maui.platform.detection import PlatformInfo
from maui.services.checkers import (
    AndroidChecker,
    CheckResult,
    CheckStatus,
    CommandRunner,
    DefaultCommandRunner,
    DotNetChecker,
    TargetPlatform,
    WindowsChecker,
    WorkloadChecker,
    XcodeChecker,
    applicable_targets,
)
from maui.services.checkers import android, apple, dotnet, windows, workloads
from maui.services.workload_deps import WorkloadDependencyReader

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CheckReport:
    results: list[CheckResult]

    def has_errors(self) -> bool:
        return any(r.is_error for r in self.results)

    def needs_attention(self) -> list[CheckResult]:
        return [r for r in self.results if r.status in (CheckStatus.ERROR, CheckStatus.WARNING)]

    def count(self, status: CheckStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def exit_code(self) -> ErrorCode:
        return ErrorCode.GENERAL_ERROR if self.has_errors() else ErrorCode.OK


def _guard(name: str, check: Callable[[], list[CheckResult]]) -> list[CheckResult]:
    try:
        return check()
    except Exception as e:  # noqa: BLE001
        logger.debug("check %r raised", name, exc_info=True)
        return [CheckResult.error(name, "Check failed unexpectedly", f"Error: {e}")]


class CheckService:
    """Reconcile the host against a manifest.

    Runs every check applicable to the host (optionally narrowed to one target
    platform) and returns one record per component, in a fixed order.
    """

    def __init__(
        self,
        host: PlatformInfo,
        manifest: Manifest,
        *,
        runner: CommandRunner | None = None,
        environ: Mapping[str, str] | None = None,
        deps: WorkloadDependencyReader | None = None,
    ) -> None:
        self._host = host
        self._manifest = manifest
        self._runner = runner or DefaultCommandRunner()
        self._environ = dict(os.environ) if environ is None else environ
        self._deps = deps

    def check_all(
        self,
        platform_filter: TargetPlatform | str | None = None,
        verbose: bool = False,
    ) -> list[CheckResult]:
        """Run the checks and return their records.

        An unknown `platform_filter` string matches no target; the .NET SDK
        and base workload records are still returned.
        """
        targets = self._targets(platform_filter)
        logger.debug("host %s, checking targets: %s", self._host, ", ".join(map(str, targets)) or "none")

        android_checker = AndroidChecker(
            platform=self._host.platform,
            manifest=self._manifest,
            environ=self._environ,
            runner=self._runner,
        )
        workload_checker = WorkloadChecker(runner=self._runner, deps=self._deps if verbose else None)

        results: list[CheckResult] = []
        results += _guard(dotnet.NAME, lambda: [DotNetChecker(runner=self._runner).check(verbose)])
        results += _guard(workloads.GROUP_NAME, lambda: workload_checker.check(targets, verbose))

        if TargetPlatform.ANDROID in targets:
            results += _guard(android.JDK_NAME, lambda: [android_checker.check_jdk(verbose)])
            results += _guard(android.SDK_NAME, lambda: [android_checker.check_android_sdk(verbose)])

        if TargetPlatform.IOS in targets or TargetPlatform.MACCATALYST in targets:
            xcode = XcodeChecker(platform=self._host.platform, manifest=self._manifest, runner=self._runner)
            results += _guard(apple.NAME, lambda: [xcode.check(verbose)])

        if TargetPlatform.WINDOWS in targets:
            results += _guard(windows.NAME, lambda: [WindowsChecker(self._host).check(verbose)])

        return results

    def _targets(self, platform_filter: TargetPlatform | str | None) -> tuple[TargetPlatform, ...]:
        if isinstance(platform_filter, str):
            try:
                platform_filter = TargetPlatform.parse(platform_filter)
            except ValueError as e:
                logger.debug("%s; no target platform checks", e)
                return ()
        return applicable_targets(self._host.platform, platform_filter)

    def run(
        self,
        platform_filter: TargetPlatform | str | None = None,
        verbose: bool = False,
    ) -> CheckReport:
        return CheckReport(results=self.check_all(platform_filter, verbose))
