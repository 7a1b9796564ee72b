"""Git plumbing for dotsync."""

from dotsync.git.backend import GitBackend, SubprocessGit
from dotsync.git.exec import ExecError, ExecResult, ExecTimeout, run_git
from dotsync.git.status import ChangeKind, FileChange, parse_porcelain_z

__all__ = [
    "ChangeKind",
    "ExecError",
    "ExecResult",
    "ExecTimeout",
    "FileChange",
    "GitBackend",
    "SubprocessGit",
    "parse_porcelain_z",
    "run_git",
]
