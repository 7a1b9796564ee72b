"""Pytest configuration and fixtures for dotsync tests."""
import subprocess
from pathlib import Path

import pytest


def pytest_sessionfinish(session, exitstatus):
    """Fail the run if --cov was requested but no coverage data was written."""
    cov_enabled = any("--cov" in str(arg) for arg in session.config.args)
    if not cov_enabled:
        return

    if not list(Path.cwd().glob(".coverage*")):
        pytest.exit(
            "Coverage was enabled but no data was collected. "
            "Check that tests import from 'dotsync' (the package) not 'src/dotsync'.",
            returncode=1,
        )


def git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


@pytest.fixture
def origin(tmp_path: Path) -> Path:
    remote = tmp_path / "origin.git"
    subprocess.run(
        ["git", "init", "--bare", "--initial-branch=main", str(remote)],
        check=True,
        capture_output=True,
    )
    return remote


@pytest.fixture
def repo(tmp_path: Path, origin: Path) -> Path:
    """A dotfiles checkout on main, tracking a bare ``origin``."""
    checkout = tmp_path / "dotfiles"
    checkout.mkdir()
    git(checkout, "init")
    git(checkout, "config", "user.email", "test@example.com")
    git(checkout, "config", "user.name", "Test User")
    git(checkout, "config", "commit.gpgsign", "false")
    (checkout / "README.md").write_text("# dotfiles\n", encoding="utf-8")
    git(checkout, "add", "README.md")
    git(checkout, "commit", "-m", "initial")
    git(checkout, "branch", "-M", "main")
    git(checkout, "remote", "add", "origin", str(origin))
    git(checkout, "push", "-u", "origin", "main")
    return checkout


@pytest.fixture
def write(repo: Path):
    """Write a file relative to the repo, creating parent directories."""

    def _write(relative: str, content: str) -> Path:
        target = repo / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    return _write
