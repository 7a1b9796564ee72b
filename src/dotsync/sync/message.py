"""Commit message heuristics.

Changed paths are grouped into categories by directory name. The first
category in ``MESSAGE_CATEGORIES`` with any changed file becomes the subject
of the message; everything else is summarized as a count.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import PurePosixPath

from dotsync.git.status import ChangeKind, FileChange
from dotsync.sync.types import CommitDescriptor

MAX_NAMED_ITEMS = 3
OTHER_CATEGORY = "other"


@dataclass(frozen=True)
class MessageCategory:
    """A path category with its display noun and optional fixed verb."""

    name: str
    noun: str
    directory: str | None = None
    filename: str | None = None
    verb: str | None = None

    def matches(self, path: str) -> bool:
        parts = PurePosixPath(path).parts
        if self.filename is not None and parts and parts[-1] == self.filename:
            return True
        return self.directory is not None and self.directory in parts[:-1]


# Precedence order.
MESSAGE_CATEGORIES: tuple[MessageCategory, ...] = (
    MessageCategory(name="commands", noun="commands", directory="commands"),
    MessageCategory(name="claude-md", noun="CLAUDE.md", filename="CLAUDE.md"),
    MessageCategory(name="skills", noun="skills", directory="skills"),
    MessageCategory(name="scripts", noun="scripts", directory="scripts", verb="Enhance"),
    MessageCategory(name="agents", noun="agents", directory="agents"),
)


def categorize(path: str) -> str:
    """Return the name of the first category matching ``path``."""
    for category in MESSAGE_CATEGORIES:
        if category.matches(path):
            return category.name
    return OTHER_CATEGORY


def _item_name(path: str, directory: str | None) -> str:
    parts = PurePosixPath(path).parts
    if directory is not None and directory in parts[:-1]:
        index = len(parts) - 1 - parts[::-1].index(directory)
        rest = parts[index + 1 :]
        if len(rest) > 1:
            return rest[0]
    return PurePosixPath(path).stem or PurePosixPath(path).name


def _verb_for(changes: list[FileChange]) -> str:
    if all(change.kind.is_addition for change in changes):
        return "Add"
    if all(change.kind is ChangeKind.DELETED for change in changes):
        return "Clean up"
    return "Update"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def describe_changes(changes: Iterable[FileChange]) -> CommitDescriptor:
    """Build a commit descriptor for a non-empty set of changes.

    Raises:
        ValueError: If ``changes`` is empty
    """
    ordered = sorted(changes, key=lambda change: change.path)
    if not ordered:
        raise ValueError("cannot describe an empty change set")

    grouped: dict[str, list[FileChange]] = {}
    for change in ordered:
        grouped.setdefault(categorize(change.path), []).append(change)

    primary = next((c for c in MESSAGE_CATEGORIES if c.name in grouped), None)
    if primary is None:
        selected = grouped[OTHER_CATEGORY]
        verb = _verb_for(selected)
        if len(selected) == 1:
            subject = PurePosixPath(selected[0].path).name
        else:
            subject = f"dotfiles ({len(selected)} files)"
    else:
        selected = grouped[primary.name]
        verb = primary.verb or _verb_for(selected)
        if primary.filename is not None:
            subject = primary.noun if len(selected) == 1 else f"{primary.noun} ({len(selected)} files)"
        else:
            names = sorted({_item_name(change.path, primary.directory) for change in selected})
            if len(names) <= MAX_NAMED_ITEMS:
                subject = f"{primary.noun}: {', '.join(names)}"
            else:
                subject = f"{len(names)} {primary.noun}"

    remaining = len(ordered) - len(selected)
    context = f"+{_plural(remaining, 'other file')}" if remaining else None
    return CommitDescriptor(verb=verb, subject=subject, context=context)


def build_commit_message(changes: Iterable[FileChange]) -> str:
    """Return a short imperative commit message for ``changes``."""
    return describe_changes(changes).render()
