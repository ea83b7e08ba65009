"""Tests for CheckService and CheckReport."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

import pytest

from maui.core.errors import ErrorCode
from maui.manifest.model import Manifest
from maui.platform.detection import Arch, OsVersion, Platform, PlatformInfo
from maui.platform.process import ProbeResult, split_args
from maui.services.check import CheckReport, CheckService
from maui.services.checkers.base import CheckResult, CheckStatus
from maui.services.checkers.common import TargetPlatform
from maui.services.workload_deps import WorkloadDependencyReader

LINUX = PlatformInfo(Platform.LINUX, Arch.X64, OsVersion(6, 8, 0))
MACOS = PlatformInfo(Platform.MACOS, Arch.ARM64, OsVersion(14, 5, 0))
WINDOWS = PlatformInfo(Platform.WINDOWS, Arch.X64, OsVersion(10, 0, 22631))


class MockCommandRunner:
    """Mock command runner returning canned probe results."""

    def __init__(self, responses: dict[tuple[str, ...], tuple[int, str, str]] | None = None):
        self.responses = responses or {}
        self.calls: list[tuple[str, ...]] = []

    def run(
        self,
        executable: str | Path,
        args: Sequence[str] | str | None = None,
        *,
        cwd: Path | None = None,
    ) -> ProbeResult:
        cmd = (str(executable), *split_args(args))
        self.calls.append(cmd)
        if cmd in self.responses:
            rc, stdout, stderr = self.responses[cmd]
            return ProbeResult(cmd, rc, stdout, stderr)
        raise FileNotFoundError(f"Command not found: {cmd[0]}")


class ExplodingRunner:
    """Runner whose probes fail with something other than OSError."""

    def run(
        self,
        executable: str | Path,
        args: Sequence[str] | str | None = None,
        *,
        cwd: Path | None = None,
    ) -> ProbeResult:
        raise RuntimeError("probe exploded")


def _workloads_json(*ids: str) -> str:
    return json.dumps({"installed": [{"id": i, "version": "9.0.100"} for i in ids]})


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("USERPROFILE", str(tmp_path / "home"))


@pytest.fixture
def healthy_linux(tmp_path: Path) -> tuple[MockCommandRunner, dict[str, str]]:
    jdk = tmp_path / "jdk"
    (jdk / "bin").mkdir(parents=True)
    java = jdk / "bin" / "java"
    java.write_text("mock")

    sdk = tmp_path / "sdk"
    for d in ("platform-tools", "build-tools/35.0.0", "platforms/android-35"):
        (sdk / d).mkdir(parents=True)

    runner = MockCommandRunner(
        {
            ("dotnet", "--version"): (0, "9.0.100\n", ""),
            ("dotnet", "--info"): (0, "", ""),
            ("dotnet", "--list-sdks"): (0, "9.0.100 [/usr/share/dotnet/sdk]\n", ""),
            ("dotnet", "workload", "list", "--format", "json"): (0, _workloads_json("maui", "android"), ""),
            (str(java), "-version"): (0, "", 'openjdk version "17.0.12" 2024-07-16\n'),
        }
    )
    environ = {"JAVA_HOME": str(jdk), "ANDROID_HOME": str(sdk), "HOME": str(tmp_path)}
    return runner, environ


def _names(results: list[CheckResult]) -> list[str]:
    return [r.name for r in results]


class TestCheckService:
    def test_healthy_linux(self, healthy_linux: tuple[MockCommandRunner, dict[str, str]]) -> None:
        runner, environ = healthy_linux
        service = CheckService(LINUX, Manifest(), runner=runner, environ=environ)

        results = service.check_all()

        assert _names(results) == [".NET SDK", "MAUI Workload (Android)", "Java JDK", "Android SDK"]
        assert all(r.status == CheckStatus.OK for r in results)

    def test_verbose_has_same_records(self, healthy_linux: tuple[MockCommandRunner, dict[str, str]]) -> None:
        runner, environ = healthy_linux
        service = CheckService(LINUX, Manifest(), runner=runner, environ=environ)

        plain = service.check_all(verbose=False)
        verbose = service.check_all(verbose=True)

        assert _names(plain) == _names(verbose)
        assert all(r.details is None for r in plain)
        assert any(r.details for r in verbose)

    def test_nothing_installed_macos_order(self) -> None:
        service = CheckService(MACOS, Manifest(), runner=MockCommandRunner(), environ={})

        results = service.check_all()

        assert _names(results) == [
            ".NET SDK",
            "MAUI Workloads",
            "Java JDK",
            "Android SDK",
            "Xcode",
        ]
        assert all(r.status == CheckStatus.ERROR for r in results)

    def test_windows_order(self) -> None:
        runner = MockCommandRunner(
            {
                ("dotnet", "--version"): (0, "9.0.100\n", ""),
                ("dotnet", "workload", "list", "--format", "json"): (
                    0,
                    _workloads_json("maui", "maui-android", "maui-windows"),
                    "",
                ),
            }
        )
        service = CheckService(WINDOWS, Manifest(), runner=runner, environ={})

        names = _names(service.check_all())

        assert names == [
            ".NET SDK",
            "MAUI Workload (Android)",
            "MAUI Workload (Windows)",
            "Java JDK",
            "Android SDK",
            "Windows SDK",
        ]

    @pytest.mark.parametrize("host", [LINUX, MACOS, WINDOWS])
    @pytest.mark.parametrize("only", [None, *TargetPlatform])
    def test_every_filter_yields_records(self, host: PlatformInfo, only: TargetPlatform | None) -> None:
        service = CheckService(host, Manifest(), runner=MockCommandRunner(), environ={})

        results = service.check_all(only)

        assert results
        assert results[0].name == ".NET SDK"
        for r in results:
            if r.status in (CheckStatus.ERROR, CheckStatus.WARNING):
                assert r.recommendation

    def test_filter_limits_targets(self) -> None:
        service = CheckService(MACOS, Manifest(), runner=MockCommandRunner(), environ={})

        names = _names(service.check_all("ios"))

        assert "Xcode" in names
        assert "Java JDK" not in names
        assert "Android SDK" not in names

    def test_filter_for_other_host(self) -> None:
        service = CheckService(LINUX, Manifest(), runner=MockCommandRunner(), environ={})

        names = _names(service.check_all(TargetPlatform.WINDOWS))

        assert names == [".NET SDK", "MAUI Workloads"]

    def test_unknown_filter_still_checks_sdk(self) -> None:
        runner = MockCommandRunner({("dotnet", "--version"): (0, "9.0.100\n", "")})
        service = CheckService(LINUX, Manifest(), runner=runner, environ={})

        results = service.check_all("tizen")

        assert _names(results) == [".NET SDK", "MAUI Workloads"]
        assert results[0].status == CheckStatus.OK

    def test_verbose_detail_failures_keep_records(
        self, healthy_linux: tuple[MockCommandRunner, dict[str, str]], tmp_path: Path
    ) -> None:
        runner, environ = healthy_linux
        del runner.responses[("dotnet", "--info")]
        del runner.responses[("dotnet", "--list-sdks")]
        deps_dir = tmp_path / "dotnet" / "sdk-manifests" / "9.0.100" / "microsoft.net.sdk.android" / "35.0.7"
        deps_dir.mkdir(parents=True)
        (deps_dir / "WorkloadDependencies.json").write_text(
            '{"x": {"workload": {"version": ' + "1" * 5000 + "}}}", encoding="utf-8"
        )
        environ = {**environ, "DOTNET_ROOT": str(tmp_path / "dotnet")}
        deps = WorkloadDependencyReader(runner=runner, environ=environ, host=LINUX)
        service = CheckService(LINUX, Manifest(), runner=runner, environ=environ, deps=deps)

        plain = service.check_all(verbose=False)
        verbose = service.check_all(verbose=True)

        assert [(r.name, r.status) for r in verbose] == [(r.name, r.status) for r in plain]
        assert all(r.status == CheckStatus.OK for r in verbose)

    def test_unexpected_exception_becomes_error_record(self) -> None:
        service = CheckService(LINUX, Manifest(), runner=ExplodingRunner(), environ={})

        results = service.check_all()

        dotnet = results[0]
        assert dotnet.name == ".NET SDK"
        assert dotnet.status == CheckStatus.ERROR
        assert dotnet.message == "Check failed unexpectedly"
        assert dotnet.recommendation == "Error: probe exploded"
        assert _names(results)[1] == "MAUI Workloads"


class TestCheckReport:
    def test_clean(self) -> None:
        report = CheckReport([CheckResult.success("a", "fine"), CheckResult.not_applicable("b")])
        assert not report.has_errors()
        assert report.needs_attention() == []
        assert report.exit_code == ErrorCode.OK

    def test_warnings_do_not_fail(self) -> None:
        report = CheckReport([CheckResult.warning("a", "old", "upgrade")])
        assert report.exit_code == ErrorCode.OK
        assert report.count(CheckStatus.WARNING) == 1
        assert len(report.needs_attention()) == 1

    def test_errors_fail(self) -> None:
        report = CheckReport(
            [
                CheckResult.success("a", "fine"),
                CheckResult.error("b", "missing", "install it"),
                CheckResult.warning("c", "old", "upgrade"),
            ]
        )
        assert report.has_errors()
        assert report.exit_code == ErrorCode.GENERAL_ERROR
        assert [r.name for r in report.needs_attention()] == ["b", "c"]

    def test_run_wraps_records(self) -> None:
        service = CheckService(LINUX, Manifest(), runner=MockCommandRunner(), environ={})
        report = service.run()
        assert report.has_errors()
        assert int(report.exit_code) == 1
