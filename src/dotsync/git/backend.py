"""Git collaborator used by the sync orchestrator."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from dotsync.config import DEFAULT_GIT_TIMEOUT, DEFAULT_PUSH_TIMEOUT
from dotsync.git.exec import ExecError, ExecResult, run_git
from dotsync.git.status import FileChange, parse_porcelain_z


class GitBackend(Protocol):
    """Operations the orchestrator needs from version control."""

    def resolve_root(self, path: Path) -> Path: ...

    def list_changes(self, repo_root: Path, pathspec: str = ".") -> list[FileChange]: ...

    def stage(self, repo_root: Path, pathspec: str = ".") -> None: ...

    def commit(self, repo_root: Path, message: str, pathspec: str = ".") -> str: ...

    def push(self, repo_root: Path, remote: str, branch: str) -> ExecResult: ...

    def current_branch(self, repo_root: Path) -> str | None: ...

    def remote_ref(self, repo_root: Path, remote: str, branch: str) -> str | None: ...


class SubprocessGit:
    """``GitBackend`` backed by the ``git`` binary."""

    def __init__(
        self,
        *,
        git_timeout: float = DEFAULT_GIT_TIMEOUT,
        push_timeout: float = DEFAULT_PUSH_TIMEOUT,
    ) -> None:
        self.git_timeout = git_timeout
        self.push_timeout = push_timeout

    def _git(self, args: list[str], repo_root: Path, *, check: bool = True) -> ExecResult:
        return run_git(args, repo_root=repo_root, check=check, timeout=self.git_timeout)

    def resolve_root(self, path: Path) -> Path:
        """Resolve the repository top level containing ``path``.

        Raises:
            ExecError: If ``path`` is not inside a git work tree
        """
        out = self._git(["rev-parse", "--show-toplevel"], path.resolve())
        root = out.stdout.strip()
        if not root:
            raise ExecError(out)
        return Path(root).resolve()

    def list_changes(self, repo_root: Path, pathspec: str = ".") -> list[FileChange]:
        out = self._git(
            ["status", "--porcelain=v1", "-z", "--untracked-files=all", "--", pathspec],
            repo_root,
        )
        return parse_porcelain_z(out.stdout)

    def stage(self, repo_root: Path, pathspec: str = ".") -> None:
        self._git(["add", "--all", "--", pathspec], repo_root)

    def commit(self, repo_root: Path, message: str, pathspec: str = ".") -> str:
        """Commit changes under ``pathspec`` and return the new HEAD sha.

        Entries staged outside ``pathspec`` stay staged and are left out of
        the commit.
        """
        self._git(["commit", "--quiet", "-m", message, "--", pathspec], repo_root)
        return self._git(["rev-parse", "HEAD"], repo_root).stdout.strip()

    def push(self, repo_root: Path, remote: str, branch: str) -> ExecResult:
        return run_git(
            ["push", remote, f"HEAD:refs/heads/{branch}"],
            repo_root=repo_root,
            timeout=self.push_timeout,
        )

    def current_branch(self, repo_root: Path) -> str | None:
        """Return the checked-out branch, or ``None`` when HEAD is detached."""
        out = self._git(["symbolic-ref", "--short", "--quiet", "HEAD"], repo_root, check=False)
        if out.returncode != 0:
            return None
        return out.stdout.strip() or None

    def remote_ref(self, repo_root: Path, remote: str, branch: str) -> str | None:
        """Return the sha of ``<remote>/<branch>`` if the tracking ref exists."""
        out = self._git(["rev-parse", "--verify", "--quiet", f"refs/remotes/{remote}/{branch}"], repo_root, check=False)
        if out.returncode != 0:
            return None
        return out.stdout.strip() or None
