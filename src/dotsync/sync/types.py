"""Sync domain types."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from dotsync.git.status import FileChange
from dotsync.scanner.types import ScanResult


@dataclass(frozen=True)
class ChangeSet:
    """Snapshot of pending changes relative to the last commit."""

    repo_root: Path
    changes: tuple[FileChange, ...] = ()
    pathspec: str = "."

    def __iter__(self) -> Iterator[FileChange]:
        return iter(self.changes)

    def __len__(self) -> int:
        return len(self.changes)

    def __bool__(self) -> bool:
        return bool(self.changes)

    @property
    def paths(self) -> list[str]:
        return [change.path for change in self.changes]


@dataclass(frozen=True)
class CommitDescriptor:
    """Parts of a generated commit message."""

    verb: str
    subject: str
    context: str | None = None

    def render(self) -> str:
        message = f"{self.verb} {self.subject}"
        if self.context:
            message = f"{message} ({self.context})"
        return message


@dataclass(frozen=True)
class SyncResult:
    """Outcome of one sync invocation."""

    committed: bool
    pushed: bool
    commit_message: str | None = None
    changes: ChangeSet | None = None
    scan_results: tuple[ScanResult, ...] = field(default_factory=tuple)
    commit_sha: str | None = None
    remote_ref: str | None = None
    remote_sha: str | None = None
    dry_run: bool = False

    @property
    def blocked_results(self) -> tuple[ScanResult, ...]:
        return tuple(result for result in self.scan_results if result.blocked)

    @property
    def warning_results(self) -> tuple[ScanResult, ...]:
        return tuple(result for result in self.scan_results if result.warnings)
