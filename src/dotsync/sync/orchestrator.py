"""Preview and sync pending changes to the configured remote."""

from __future__ import annotations

import threading
from pathlib import Path

from dotsync.config import SyncConfig, resolve_config
from dotsync.git.backend import GitBackend, SubprocessGit
from dotsync.git.exec import ExecError, ExecTimeout
from dotsync.log import get_logger
from dotsync.scanner.engine import scan_content, scan_file
from dotsync.scanner.loader import effective_rules
from dotsync.scanner.types import DetectionRule, ScanResult
from dotsync.sync.errors import (
    CommitFailed,
    NetworkTimeout,
    NotARepository,
    PushRejected,
    SensitiveContentBlocked,
    StageFailed,
    SyncCancelled,
)
from dotsync.sync.message import build_commit_message
from dotsync.sync.types import ChangeSet, SyncResult

logger = get_logger(__name__)

NON_FAST_FORWARD_MARKERS = ("non-fast-forward", "fetch first")


def _prepare(
    working_directory: Path,
    config: SyncConfig | None,
    git: GitBackend | None,
) -> tuple[Path, SyncConfig, GitBackend]:
    probe = git or SubprocessGit()
    try:
        repo_root = probe.resolve_root(Path(working_directory))
    except (ExecError, ExecTimeout, OSError) as exc:
        raise NotARepository(Path(working_directory), str(exc)) from exc

    if config is None:
        config = resolve_config(repo_root)
    if git is None:
        git = SubprocessGit(git_timeout=config.git_timeout, push_timeout=config.push_timeout)
    return repo_root, config, git


def _pathspec(repo_root: Path, working_directory: Path, only: str | Path | None) -> str:
    """Translate ``only`` into a repository-relative pathspec."""
    if only is None:
        return "."
    target = Path(only)
    if not target.is_absolute():
        target = Path(working_directory).resolve() / target
    try:
        relative = target.resolve().relative_to(repo_root)
    except ValueError as exc:
        raise ValueError(f"--only path {only} is outside the repository {repo_root}") from exc
    return relative.as_posix() or "."


def _compute_changes(repo_root: Path, git: GitBackend, pathspec: str) -> ChangeSet:
    try:
        changes = git.list_changes(repo_root, pathspec)
    except (ExecError, ExecTimeout) as exc:
        raise NotARepository(repo_root, str(exc)) from exc
    return ChangeSet(repo_root=repo_root, changes=tuple(changes), pathspec=pathspec)


def preview(
    working_directory: Path,
    *,
    config: SyncConfig | None = None,
    only: str | Path | None = None,
    git: GitBackend | None = None,
) -> ChangeSet:
    """List pending changes without touching the repository."""
    repo_root, _config, backend = _prepare(working_directory, config, git)
    return _compute_changes(repo_root, backend, _pathspec(repo_root, working_directory, only))


def scan_changes(
    changeset: ChangeSet,
    rules: tuple[DetectionRule, ...],
) -> tuple[ScanResult, ...]:
    """Scan every changed file that still exists on disk."""
    results: list[ScanResult] = []
    for change in changeset:
        if not change.exists:
            continue
        full_path = changeset.repo_root / change.path
        if not full_path.is_file():
            logger.debug("skipping non-regular path %s", change.path)
            continue
        try:
            results.append(scan_file(full_path, rules, display_path=change.path))
        except OSError as exc:
            logger.warning("cannot read %s (%s); applying filename rules only", change.path, exc)
            results.append(scan_content("", change.path, rules))
    return tuple(results)


def with_trailer(message: str, trailer: str) -> str:
    """Append the provenance trailer unless it is empty or already present."""
    body = message.rstrip()
    if not trailer or trailer in body:
        return body
    return f"{body}\n\n{trailer}"


def _check_cancel(cancel: threading.Event | None, step: str, result: SyncResult | None = None) -> None:
    if cancel is not None and cancel.is_set():
        raise SyncCancelled(step, result=result)


def _push(
    git: GitBackend,
    repo_root: Path,
    config: SyncConfig,
    branch: str,
    committed: SyncResult,
) -> None:
    try:
        git.push(repo_root, config.remote, branch)
    except ExecTimeout as exc:
        raise NetworkTimeout(f"push to {config.remote} timed out: {exc}", result=committed) from exc
    except ExecError as exc:
        detail = f"{exc.result.stdout}\n{exc.result.stderr}"
        if any(marker in detail for marker in NON_FAST_FORWARD_MARKERS):
            raise PushRejected(
                f"{config.remote}/{branch} has commits not present locally (non-fast-forward); "
                "fetch and rebase, then retry",
                retryable=True,
                result=committed,
            ) from exc
        lines = [line for line in exc.result.stderr.strip().splitlines() if line.strip()]
        reason = lines[-1] if lines else f"git push exited {exc.result.returncode}"
        raise PushRejected(reason, retryable=False, result=committed) from exc


def sync(
    working_directory: Path,
    message: str | None = None,
    *,
    force: bool = False,
    dry_run: bool = False,
    only: str | Path | None = None,
    config: SyncConfig | None = None,
    git: GitBackend | None = None,
    cancel: threading.Event | None = None,
) -> SyncResult:
    """Scan, stage, commit and push pending changes.

    Args:
        working_directory: Any path inside the repository
        message: Commit message; generated from the change set when omitted
        force: Commit even when block-severity findings exist
        dry_run: Stop after scanning and return the would-be message
        only: Restrict the sync to this subdirectory
        config: Explicit configuration (defaults to the repo's .dotsync.yaml)
        git: Git collaborator (defaults to the subprocess backend)
        cancel: Checked before staging, committing and pushing

    Returns:
        SyncResult describing what happened

    Raises:
        SyncError: One subclass per failed step
    """
    repo_root, config, git = _prepare(working_directory, config, git)
    rules = effective_rules(config)
    pathspec = _pathspec(repo_root, working_directory, only)

    changeset = _compute_changes(repo_root, git, pathspec)
    if not changeset:
        logger.info("no pending changes under %s (%s)", repo_root, pathspec)
        return SyncResult(committed=False, pushed=False, changes=changeset, dry_run=dry_run)

    scan_results = scan_changes(changeset, rules)
    blocked = tuple(result for result in scan_results if result.blocked)
    if blocked:
        if not force:
            raise SensitiveContentBlocked(blocked)
        logger.warning("forcing sync past %d blocked file(s): %s", len(blocked), [r.path for r in blocked])

    supplied = message.strip() if message else ""
    resolved = supplied or build_commit_message(changeset)
    full_message = with_trailer(resolved, config.trailer)

    if dry_run:
        return SyncResult(
            committed=False,
            pushed=False,
            commit_message=full_message,
            changes=changeset,
            scan_results=scan_results,
            dry_run=True,
        )

    try:
        branch = config.branch or git.current_branch(repo_root)
    except ExecTimeout as exc:
        raise PushRejected(f"could not determine the current branch: {exc}") from exc
    if not branch:
        raise PushRejected("HEAD is detached; set `branch` in .dotsync.yaml or check out a branch")

    _check_cancel(cancel, "staging")
    try:
        git.stage(repo_root, pathspec)
    except (ExecError, ExecTimeout) as exc:
        raise StageFailed(f"failed to stage changes: {exc}") from exc

    _check_cancel(cancel, "commit")
    try:
        commit_sha = git.commit(repo_root, full_message, pathspec)
    except (ExecError, ExecTimeout) as exc:
        raise CommitFailed(f"failed to commit: {exc}") from exc
    logger.info("committed %s on %s", commit_sha, branch)

    committed = SyncResult(
        committed=True,
        pushed=False,
        commit_message=full_message,
        changes=changeset,
        scan_results=scan_results,
        commit_sha=commit_sha,
    )
    _check_cancel(cancel, "push", committed)
    _push(git, repo_root, config, branch, committed)

    try:
        remote_sha = git.remote_ref(repo_root, config.remote, branch)
    except ExecTimeout as exc:
        logger.warning("pushed, but reading %s/%s timed out: %s", config.remote, branch, exc)
        remote_sha = None
    logger.info("pushed %s to %s/%s", commit_sha, config.remote, branch)
    return SyncResult(
        committed=True,
        pushed=True,
        commit_message=full_message,
        changes=changeset,
        scan_results=scan_results,
        commit_sha=commit_sha,
        remote_ref=f"{config.remote}/{branch}",
        remote_sha=remote_sha,
    )
