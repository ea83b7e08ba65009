from __future__ import annotations

from pathlib import Path

import pytest
import typer

from maui.cli.context import CLIContext
from maui.core.config import Config
from maui.core.errors import ErrorCode
from maui.manifest.model import Manifest
from maui.output.console import MockConsole, Style
from maui.platform.detection import Arch, Platform, PlatformInfo
from maui.services.check import CheckReport
from maui.services.checkers import CheckResult


def _ctx() -> CLIContext:
    return CLIContext(
        platform=PlatformInfo(Platform.LINUX, Arch.X64),
        config=Config(),
        console=MockConsole(),
    )


def _patch(
    monkeypatch: pytest.MonkeyPatch,
    ctx: CLIContext,
    report: CheckReport,
) -> dict[str, object]:
    import maui.cli.commands.check as check_cmd

    seen: dict[str, object] = {}

    class FakeCheckService:
        def __init__(self, host: PlatformInfo, manifest: Manifest, **_: object) -> None:
            seen["host"] = host

        def run(self, platform_filter: object = None, verbose: bool = False) -> CheckReport:
            seen["filter"] = platform_filter
            seen["verbose"] = verbose
            return report

    monkeypatch.setattr(check_cmd, "build_context", lambda: ctx)
    monkeypatch.setattr(check_cmd, "setup_logging", lambda *a, **k: None)
    monkeypatch.setattr(check_cmd, "_load_manifest", lambda c, source: Manifest())
    monkeypatch.setattr(check_cmd, "CheckService", FakeCheckService)
    return seen


def _console(ctx: CLIContext) -> MockConsole:
    assert isinstance(ctx.console, MockConsole)
    return ctx.console


def test_check_exits_on_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    import maui.cli.commands.check as check_cmd

    ctx = _ctx()
    _patch(
        monkeypatch,
        ctx,
        CheckReport(
            [
                CheckResult.success(".NET SDK", "Version 9.0.100"),
                CheckResult.error("Java JDK", "JAVA_HOME not set or directory not found", "Install JDK 17"),
            ]
        ),
    )

    with pytest.raises(typer.Exit) as exc:
        check_cmd.check(verbose=False, platform=None, manifest=None)

    assert exc.value.exit_code == int(ErrorCode.GENERAL_ERROR)
    console = _console(ctx)
    assert console.find("Java JDK: Install JDK 17")
    assert console.find("1 error(s), 0 warning(s)")[0].style == Style.ERROR


def test_check_warnings_do_not_fail(monkeypatch: pytest.MonkeyPatch) -> None:
    import maui.cli.commands.check as check_cmd

    ctx = _ctx()
    _patch(monkeypatch, ctx, CheckReport([CheckResult.warning("Android SDK", "old", "Install API 35")]))

    check_cmd.check(verbose=False, platform=None, manifest=None)

    console = _console(ctx)
    assert console.find("Recommendations")
    assert console.find("warning: 1 warning(s)")


def test_check_clean(monkeypatch: pytest.MonkeyPatch) -> None:
    import maui.cli.commands.check as check_cmd

    ctx = _ctx()
    seen = _patch(
        monkeypatch,
        ctx,
        CheckReport([CheckResult.success(".NET SDK", "Version 9.0.100"), CheckResult.not_applicable("Xcode")]),
    )

    check_cmd.check(verbose=False, platform="Android", manifest=None)

    console = _console(ctx)
    assert console.find(".NET SDK | ok | Version 9.0.100")[0].style == Style.SUCCESS
    assert console.find("Xcode | not applicable")[0].style == Style.DIM
    assert not console.find("Recommendations")
    assert console.find("environment looks good")
    assert str(seen["filter"]) == "android"
    assert seen["verbose"] is False


def test_check_verbose_prints_details(monkeypatch: pytest.MonkeyPatch) -> None:
    import maui.cli.commands.check as check_cmd

    ctx = _ctx()
    seen = _patch(
        monkeypatch,
        ctx,
        CheckReport([CheckResult.success("Android SDK", "Found at /sdk", {"Path": "/sdk", "Platforms": "35"})]),
    )

    check_cmd.check(verbose=True, platform=None, manifest=None)

    console = _console(ctx)
    assert console.find("Details")
    assert console.find("Platforms: 35")[0].style == Style.DIM
    assert seen["verbose"] is True


def test_check_unknown_platform(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    import maui.cli.commands.check as check_cmd

    ctx = _ctx()
    seen = _patch(monkeypatch, ctx, CheckReport([]))

    with pytest.raises(typer.Exit) as exc:
        check_cmd.check(verbose=False, platform="tizen", manifest=None)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert "unknown platform" in capsys.readouterr().err
    assert "filter" not in seen


def test_load_manifest_from_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    import maui.cli.commands.check as check_cmd

    manifest_file = tmp_path / "manifest.json"
    manifest_file.write_text('{"check": {"variables": {"TARGET_ANDROID_API": "36"}}}', encoding="utf-8")

    ctx = _ctx()
    manifest = check_cmd._load_manifest(ctx, str(manifest_file))  # pyright: ignore[reportPrivateUsage]

    assert manifest.variable("TARGET_ANDROID_API") == "36"
