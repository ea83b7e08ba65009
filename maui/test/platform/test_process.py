"""Tests for maui.platform.process module."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Any

import pytest

from maui.platform import process
from maui.platform.process import ProbeResult, probe, split_args


class TestProbeResult:
    def test_ok(self) -> None:
        assert ProbeResult(("dotnet", "--version"), 0, "9.0.100\n", "").ok is True
        assert ProbeResult(("dotnet", "--version"), 1, "", "boom").ok is False

    def test_output_joins_streams(self) -> None:
        assert ProbeResult(("java",), 0, "out", "err").output == "outerr"

    def test_str_short_command(self) -> None:
        result = ProbeResult(("xcode-select", "-p"), 2, "", "")
        assert str(result) == "xcode-select -p (exit 2)"

    def test_str_long_command_truncated(self) -> None:
        result = ProbeResult(("dotnet", "workload", "list", "--format", "json"), 0, "", "")
        assert str(result) == "dotnet workload list ... (exit 0)"

    def test_frozen(self) -> None:
        result = ProbeResult(("cmd",), 0, "", "")
        with pytest.raises(AttributeError):
            result.exit_code = 1  # type: ignore[misc]


class TestSplitArgs:
    def test_none(self) -> None:
        assert split_args(None) == []

    def test_string(self) -> None:
        assert split_args("workload list --format json") == ["workload", "list", "--format", "json"]

    def test_sequence(self) -> None:
        assert split_args(("-version",)) == ["-version"]


class FakeRun:
    """Stand-in for subprocess.run that records its arguments."""

    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.calls: list[tuple[list[str], dict[str, Any]]] = []

    def __call__(self, cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append((cmd, kwargs))
        return subprocess.CompletedProcess(cmd, self.returncode, self.stdout, self.stderr)


class TestProbe:
    def test_captures_both_streams(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = FakeRun(0, "9.0.100\n", "")
        monkeypatch.setattr(process.subprocess, "run", fake)

        result = probe("dotnet", ["--version"])

        assert result.ok
        assert result.command == ("dotnet", "--version")
        assert result.stdout == "9.0.100\n"
        cmd, kwargs = fake.calls[0]
        assert cmd == ["dotnet", "--version"]
        assert kwargs["capture_output"] is True
        assert kwargs["text"] is True
        assert kwargs["check"] is False
        assert kwargs["timeout"] is None
        assert kwargs["encoding"] == "utf-8"
        assert kwargs["errors"] == "replace"

    def test_nonzero_exit_is_reported_not_raised(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(process.subprocess, "run", FakeRun(3, "", "no sdk"))

        result = probe("dotnet", "--info")

        assert result.exit_code == 3
        assert result.stderr == "no sdk"

    def test_passes_cwd_and_timeout(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        fake = FakeRun()
        monkeypatch.setattr(process.subprocess, "run", fake)

        probe(tmp_path / "java", ["-version"], tmp_path, timeout=5)

        cmd, kwargs = fake.calls[0]
        assert cmd[0] == str(tmp_path / "java")
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["timeout"] == 5

    def test_timeout_returns_minus_one(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def timeout(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
            raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

        monkeypatch.setattr(process.subprocess, "run", timeout)

        result = probe("xcodebuild", ["-version"], timeout=1)

        assert result.exit_code == -1
        assert "timed out" in result.stderr

    def test_missing_executable_raises(self) -> None:
        with pytest.raises(OSError):
            probe("definitely-not-a-real-tool-7f3a9", ["--version"])

    def test_undecodable_output_is_replaced(self) -> None:
        script = "import sys; sys.stdout.buffer.write(b'9.0.100 \\xff\\n'); sys.stderr.buffer.write(b'\\xfe')"

        result = probe(sys.executable, ["-c", script])

        assert result.ok
        assert result.stdout == "9.0.100 \ufffd\n"
        assert result.stderr == "\ufffd"
