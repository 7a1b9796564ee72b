"""Subprocess runners for git commands."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ExecResult:
    """Result envelope for subprocess execution."""

    argv: tuple[str, ...]
    cwd: Path
    returncode: int
    stdout: str
    stderr: str


class ExecError(RuntimeError):
    """Raised when a command returns non-zero in check mode."""

    def __init__(self, result: ExecResult):
        rendered = " ".join(result.argv)
        detail = (result.stderr or result.stdout).strip()
        super().__init__(f"command failed ({result.returncode}): {rendered}\n{detail}")
        self.result = result


class ExecTimeout(RuntimeError):
    """Raised when a command does not finish within its timeout."""

    def __init__(self, argv: list[str], timeout: float):
        super().__init__(f"command timed out after {timeout:g}s: {' '.join(argv)}")
        self.argv = tuple(argv)
        self.timeout = timeout


def run_command(
    argv: list[str],
    *,
    cwd: Path,
    check: bool = True,
    timeout: float | None = None,
) -> ExecResult:
    """Run command and return structured result."""
    try:
        completed = subprocess.run(
            argv,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise ExecTimeout(argv, timeout or 0.0) from exc
    result = ExecResult(
        argv=tuple(argv),
        cwd=cwd.resolve(),
        returncode=completed.returncode,
        stdout=completed.stdout,
        stderr=completed.stderr,
    )
    if check and result.returncode != 0:
        raise ExecError(result)
    return result


def run_git(
    args: list[str],
    *,
    repo_root: Path,
    check: bool = True,
    timeout: float | None = None,
) -> ExecResult:
    """Run git command rooted at repo."""
    return run_command(["git", *args], cwd=repo_root, check=check, timeout=timeout)
