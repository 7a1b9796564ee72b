from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeVar

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from dotsync.scanner.types import DetectionRule, ScanResult, Severity
from dotsync.sync.types import ChangeSet

_T = TypeVar("_T")

console = Console()
err_console = Console(stderr=True)

SEVERITY_STYLES = {
    Severity.BLOCK: "bold red",
    Severity.WARN: "yellow",
}

KIND_STYLES = {
    "added": "green",
    "untracked": "green",
    "modified": "cyan",
    "renamed": "cyan",
    "deleted": "red",
}


def findings_table(results: Iterable[ScanResult], title: str = "Findings") -> Table:
    table = Table(title=title, title_justify="left")
    table.add_column("File")
    table.add_column("Line", justify="right")
    table.add_column("Severity")
    table.add_column("Category")
    table.add_column("Match")
    for result in results:
        for finding in result.findings:
            table.add_row(
                result.path,
                "" if finding.line is None else str(finding.line),
                f"[{SEVERITY_STYLES[finding.severity]}]{finding.severity.value}[/]",
                finding.category,
                finding.redacted,
            )
    return table


def changes_table(changeset: ChangeSet) -> Table:
    table = Table(title=f"Pending changes in {changeset.repo_root}", title_justify="left")
    table.add_column("Status")
    table.add_column("Path")
    for change in changeset:
        path = change.path
        if change.original_path:
            path = f"{change.original_path} -> {change.path}"
        table.add_row(f"[{KIND_STYLES[change.kind.value]}]{change.kind.value}[/]", path)
    return table


def rules_table(rules: Iterable[DetectionRule]) -> Table:
    table = Table(title="Detection rules", title_justify="left")
    table.add_column("Id")
    table.add_column("Category")
    table.add_column("Severity")
    table.add_column("Target")
    table.add_column("Description")
    for rule in rules:
        table.add_row(
            rule.rule_id,
            rule.category,
            f"[{SEVERITY_STYLES[rule.severity]}]{rule.severity.value}[/]",
            rule.target.value,
            rule.description,
        )
    return table


@dataclass(frozen=True)
class Spinner:
    """Transient spinner around a blocking call; plain call when not a terminal."""

    message: str

    def run(self, fn: Callable[[], _T]) -> _T:
        if not err_console.is_terminal:
            return fn()

        with Progress(
            SpinnerColumn(style="cyan"),
            TextColumn("[bold]{task.description}[/bold]"),
            transient=True,
            console=err_console,
        ) as prog:
            task_id = prog.add_task(self.message, total=None)
            try:
                return fn()
            finally:
                prog.update(task_id, completed=1)
