"""dotsync CLI - scan files for secrets and sync a dotfiles repository."""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path

import click
import typer

from dotsync import __version__
from dotsync.config import ConfigError, SyncConfig, discover_config, load_config, resolve_config
from dotsync.git.backend import SubprocessGit
from dotsync.git.exec import ExecError, ExecTimeout
from dotsync.log import setup_logging
from dotsync.scanner.engine import scan_file
from dotsync.scanner.loader import effective_rules
from dotsync.sync.errors import PushRejected, SensitiveContentBlocked, SyncError
from dotsync.sync.orchestrator import preview, sync
from dotsync.sync.types import SyncResult
from dotsync.ui import Spinner, changes_table, console, err_console, findings_table, rules_table

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_UNREADABLE = 2

FAILURE_LABELS = {
    "NOT_A_REPOSITORY": "Not a repository",
    "SENSITIVE_CONTENT_BLOCKED": "Sensitive content blocked",
    "STAGE_FAILED": "Stage failed",
    "COMMIT_FAILED": "Commit failed",
    "PUSH_REJECTED": "Push rejected",
    "NETWORK_TIMEOUT": "Network timeout",
    "CANCELLED": "Cancelled",
}

cli = typer.Typer(
    name="dotsync",
    help="dotsync - secret-aware commit and push for dotfiles repositories",
    no_args_is_help=True,
    add_help_option=False,
)


def _help_option_callback(value: bool) -> None:
    """Handle eager -h/--help on the top-level group."""
    if value:
        ctx = click.get_current_context()
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    help: bool = typer.Option(
        False,
        "--help",
        "-h",
        help="Show this message and exit.",
        is_eager=True,
        callback=_help_option_callback,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging on stderr.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show dotsync version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    _ = (help, version)
    setup_logging("DEBUG" if verbose else "WARNING")


def _load_repo_config(repo: Path, config_path: Path | None, remote: str | None) -> SyncConfig | None:
    """Return an explicit config, with ``--remote`` applied, or None to use the repo default."""
    if config_path is None and remote is None:
        return None
    if config_path is not None:
        config = load_config(config_path)
    else:
        config = resolve_config(_repo_root_or_none(repo))
    if remote is not None:
        config = dataclasses.replace(config, remote=remote)
    return config


def _repo_root_or_none(repo: Path) -> Path | None:
    try:
        return SubprocessGit().resolve_root(repo)
    except (ExecError, ExecTimeout, OSError):
        return None


def _report_failure(exc: SyncError) -> None:
    label = FAILURE_LABELS.get(exc.reason_code, "Sync failed")
    typer.echo(f"✗ {label}: {exc}", err=True)

    if isinstance(exc, SensitiveContentBlocked):
        for result in exc.results:
            typer.echo(f"  {result.path}: {', '.join(result.categories)}", err=True)
        err_console.print(findings_table(exc.results, title="Blocking findings"))
        typer.echo("Redact the listed files and retry, or pass --force to override.", err=True)
    elif isinstance(exc, PushRejected) and exc.retryable:
        typer.echo("The local commit was kept. Fetch and rebase, then re-run `dotsync sync`.", err=True)

    partial: SyncResult | None = getattr(exc, "result", None)
    if partial is not None and partial.committed:
        typer.echo(f"Local commit kept: {partial.commit_sha}", err=True)


@cli.command()
def scan(
    path: Path = typer.Argument(..., help="File to scan."),
    as_json: bool = typer.Option(False, "--json", help="Print findings as JSON."),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: nearest .dotsync.yaml).",
    ),
) -> None:
    """Scan one file for secrets.

    Exit 1 when a blocking rule matches, 2 when the file or config cannot be read.
    """
    try:
        config = load_config(config_path) if config_path else discover_config(path.parent)
        rules = effective_rules(config)
    except ConfigError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(EXIT_UNREADABLE) from exc

    try:
        result = scan_file(path, rules)
    except OSError as exc:
        typer.echo(f"Error: cannot read {path}: {exc}", err=True)
        raise typer.Exit(EXIT_UNREADABLE) from exc

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2, sort_keys=True))
    else:
        if result.findings:
            console.print(findings_table([result]))
        status = "BLOCKED" if result.blocked else "clean"
        typer.echo(f"{result.path}: {status}")
        if result.categories:
            typer.echo(f"categories: {', '.join(result.categories)}")

    raise typer.Exit(EXIT_FAILED if result.blocked else EXIT_OK)


@cli.command("sync")
def sync_cmd(
    message: str | None = typer.Argument(None, help="Commit message (generated when omitted)."),
    force: bool = typer.Option(False, "--force", help="Commit even when blocking findings exist."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Scan and show the plan without committing."),
    only: Path | None = typer.Option(None, "--only", help="Restrict the sync to this subdirectory."),
    repo: Path = typer.Option(Path("."), "--repo", help="Repository path (defaults to current directory)."),
    remote: str | None = typer.Option(None, "--remote", help="Remote to push to (overrides config)."),
    config_path: Path | None = typer.Option(None, "--config", help="Config file (default: <repo>/.dotsync.yaml)."),
) -> None:
    """Scan, commit and push pending changes."""
    try:
        config = _load_repo_config(repo, config_path, remote)
        result = Spinner("Syncing").run(
            lambda: sync(repo, message, force=force, dry_run=dry_run, only=only, config=config)
        )
    except ConfigError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(EXIT_FAILED) from exc
    except SyncError as exc:
        _report_failure(exc)
        raise typer.Exit(EXIT_FAILED) from exc
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(EXIT_FAILED) from exc

    if result.blocked_results:
        typer.echo("! Forced past blocking findings:", err=True)
        for blocked in result.blocked_results:
            typer.echo(f"  {blocked.path}: {', '.join(blocked.categories)}", err=True)
    warned = [r for r in result.warning_results if not r.blocked]
    if warned:
        err_console.print(findings_table(warned, title="Review before sharing"))

    if result.changes is None or not result.changes:
        typer.echo("Nothing to sync: working tree clean.")
        return

    if result.dry_run:
        console.print(changes_table(result.changes))
        typer.echo("Dry run: nothing was staged, committed or pushed.")
        typer.echo("Commit message would be:")
        typer.echo(result.commit_message or "")
        return

    typer.echo("✓ Synced")
    typer.echo(f"message: {(result.commit_message or '').splitlines()[0]}")
    typer.echo(f"commit: {result.commit_sha}")
    typer.echo(f"remote: {result.remote_ref} {result.remote_sha or '(tracking ref not updated)'}")


@cli.command("preview")
def preview_cmd(
    repo: Path = typer.Option(Path("."), "--repo", help="Repository path (defaults to current directory)."),
    only: Path | None = typer.Option(None, "--only", help="Restrict to this subdirectory."),
) -> None:
    """List pending changes without modifying anything."""
    try:
        changeset = preview(repo, only=only)
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(EXIT_FAILED) from exc
    except SyncError as exc:
        _report_failure(exc)
        raise typer.Exit(EXIT_FAILED) from exc

    if not changeset:
        typer.echo("No pending changes.")
        return
    console.print(changes_table(changeset))


@cli.command("rules")
def rules_cmd(
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: nearest .dotsync.yaml).",
    ),
) -> None:
    """List the effective detection rules."""
    try:
        config = load_config(config_path) if config_path else discover_config(Path.cwd())
        rules = effective_rules(config)
    except ConfigError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(EXIT_FAILED) from exc
    console.print(rules_table(rules))
    typer.echo(f"{len(rules)} rule(s)")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
