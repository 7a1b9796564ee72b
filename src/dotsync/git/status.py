"""Parse ``git status --porcelain=v1 -z`` output into file changes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ChangeKind(str, Enum):
    """Working-tree change classification."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    UNTRACKED = "untracked"

    @property
    def is_addition(self) -> bool:
        return self in (ChangeKind.ADDED, ChangeKind.UNTRACKED)


@dataclass(frozen=True)
class FileChange:
    """One changed path, repository-relative in POSIX form."""

    path: str
    kind: ChangeKind
    original_path: str | None = None

    @property
    def exists(self) -> bool:
        """Whether the path is expected on disk after the change."""
        return self.kind is not ChangeKind.DELETED


def classify_status(code: str) -> ChangeKind:
    """Map a two-letter porcelain XY code to a ``ChangeKind``."""
    if code == "??":
        return ChangeKind.UNTRACKED
    if "D" in code:
        return ChangeKind.DELETED
    if "R" in code:
        return ChangeKind.RENAMED
    if "A" in code or "C" in code:
        return ChangeKind.ADDED
    return ChangeKind.MODIFIED


def parse_porcelain_z(output: str) -> list[FileChange]:
    """Parse NUL-separated porcelain v1 status output.

    Rename and copy entries are followed by an extra field holding the
    source path.
    """
    changes: list[FileChange] = []
    fields = output.split("\0")
    index = 0
    while index < len(fields):
        entry = fields[index]
        index += 1
        if len(entry) < 4:
            continue
        code, path = entry[:2], entry[3:]
        original: str | None = None
        if code[0] in "RC" or code[1] in "RC":
            original = fields[index] if index < len(fields) else None
            index += 1
        kind = classify_status(code)
        changes.append(
            FileChange(
                path=path,
                kind=kind,
                original_path=original if kind is ChangeKind.RENAMED else None,
            )
        )
    return changes
