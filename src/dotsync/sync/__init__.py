"""Guarded commit-and-push of pending changes."""

from dotsync.sync.errors import (
    CommitFailed,
    NetworkTimeout,
    NotARepository,
    PushRejected,
    SensitiveContentBlocked,
    StageFailed,
    SyncCancelled,
    SyncError,
)
from dotsync.sync.message import build_commit_message, describe_changes
from dotsync.sync.orchestrator import preview, sync
from dotsync.sync.types import ChangeSet, CommitDescriptor, SyncResult

__all__ = [
    "ChangeSet",
    "CommitDescriptor",
    "CommitFailed",
    "NetworkTimeout",
    "NotARepository",
    "PushRejected",
    "SensitiveContentBlocked",
    "StageFailed",
    "SyncCancelled",
    "SyncError",
    "SyncResult",
    "build_commit_message",
    "describe_changes",
    "preview",
    "sync",
]
