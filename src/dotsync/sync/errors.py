"""Sync failure taxonomy.

Every failure halts the pipeline at the step that raised it. Nothing is
rolled back; a commit made before a push failure stays in place.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from dotsync.scanner.types import ScanResult
    from dotsync.sync.types import SyncResult

REASON_NOT_A_REPOSITORY = "NOT_A_REPOSITORY"
REASON_SENSITIVE_CONTENT = "SENSITIVE_CONTENT_BLOCKED"
REASON_STAGE_FAILED = "STAGE_FAILED"
REASON_COMMIT_FAILED = "COMMIT_FAILED"
REASON_PUSH_REJECTED = "PUSH_REJECTED"
REASON_NETWORK_TIMEOUT = "NETWORK_TIMEOUT"
REASON_CANCELLED = "CANCELLED"


class SyncError(RuntimeError):
    """Base class for sync failures."""

    reason_code: str = "SYNC_FAILED"
    retryable: bool = False


class NotARepository(SyncError):
    reason_code = REASON_NOT_A_REPOSITORY

    def __init__(self, path: Path, detail: str = "") -> None:
        message = f"not a git repository: {path}"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)
        self.path = path


class SensitiveContentBlocked(SyncError):
    """Block-severity findings in one or more changed files."""

    reason_code = REASON_SENSITIVE_CONTENT

    def __init__(self, results: tuple[ScanResult, ...]) -> None:
        self.results = tuple(result for result in results if result.blocked)
        self.files = [result.path for result in self.results]
        categories: list[str] = []
        for result in self.results:
            for finding in result.blocking:
                if finding.category not in categories:
                    categories.append(finding.category)
        self.categories = categories
        super().__init__(
            f"sensitive content in {len(self.files)} file(s): {', '.join(self.files)} "
            f"[{', '.join(self.categories)}]"
        )


class StageFailed(SyncError):
    reason_code = REASON_STAGE_FAILED


class CommitFailed(SyncError):
    reason_code = REASON_COMMIT_FAILED


class PushRejected(SyncError):
    """Remote refused the push.

    Non-fast-forward rejections are retryable: fetch, rebase, and re-run.
    """

    reason_code = REASON_PUSH_REJECTED

    def __init__(self, reason: str, *, retryable: bool = False, result: SyncResult | None = None) -> None:
        super().__init__(f"push rejected: {reason}")
        self.reason = reason
        self.retryable = retryable
        self.result = result


class NetworkTimeout(SyncError):
    reason_code = REASON_NETWORK_TIMEOUT
    retryable = True

    def __init__(self, message: str, *, result: SyncResult | None = None) -> None:
        super().__init__(message)
        self.result = result


class SyncCancelled(SyncError):
    """Caller cancelled the sync. Any commit already made is kept."""

    reason_code = REASON_CANCELLED

    def __init__(self, step: str, *, result: SyncResult | None = None) -> None:
        super().__init__(f"sync cancelled before {step}")
        self.step = step
        self.result = result
