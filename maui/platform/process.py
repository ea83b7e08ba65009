"""External probe execution.

A probe is one non-interactive command run to observe installed tool state
(`dotnet --version`, `xcode-select -p`, ...). Both streams are captured in
full and a non-zero exit is reported, never raised.

Usage:
    result = probe("dotnet", ["--version"])
    if result.ok:
        print(result.stdout.strip())
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

__all__ = ["ProbeResult", "probe"]

logger = logging.getLogger(__name__)

TIMEOUT_EXIT_CODE = -1


@dataclass(frozen=True, slots=True)
class ProbeResult:
    """Outcome of a finished probe.

    Attributes:
        command: The command that was executed.
        exit_code: The exit code of the process (-1 on timeout).
        stdout: Standard output (may be empty).
        stderr: Standard error (may be empty).
    """

    command: tuple[str, ...]
    exit_code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Both streams, stdout first."""
        return self.stdout + self.stderr

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} (exit {self.exit_code})"


def split_args(args: Sequence[str] | str | None) -> list[str]:
    """Accept `"workload list --format json"` as well as a list of arguments."""
    if args is None:
        return []
    if isinstance(args, str):
        return shlex.split(args)
    return list(args)


def probe(
    executable: str | Path,
    args: Sequence[str] | str | None = None,
    cwd: Path | None = None,
    *,
    timeout: float | None = None,
) -> ProbeResult:
    """Run a probe and capture its output.

    Args:
        executable: Program name (looked up on PATH) or path.
        args: Arguments, as a list or a single shell-like string.
        cwd: Working directory (current directory if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        ProbeResult with the exit code and both streams.

    Raises:
        OSError: The executable does not exist or cannot be started.
    """
    cmd = [str(executable), *split_args(args)]
    logger.debug("probe: %s", " ".join(cmd))
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        logger.debug("probe timed out after %ss: %s", timeout, cmd[0])
        stdout = e.stdout if isinstance(e.stdout, str) else ""
        return ProbeResult(
            command=tuple(cmd),
            exit_code=TIMEOUT_EXIT_CODE,
            stdout=stdout,
            stderr=f"Command timed out after {timeout}s",
        )

    result = ProbeResult(
        command=tuple(cmd),
        exit_code=proc.returncode,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
    )
    logger.debug("probe finished: %s", result)
    return result
