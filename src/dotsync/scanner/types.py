"""Scanner domain types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    """How a rule match affects a sync."""

    BLOCK = "block"
    WARN = "warn"


class RuleTarget(str, Enum):
    """What a rule pattern is matched against."""

    CONTENT = "content"
    PATH = "path"


@dataclass(frozen=True)
class DetectionRule:
    """One table-driven detection rule."""

    rule_id: str
    category: str
    pattern: str
    severity: Severity = Severity.BLOCK
    target: RuleTarget = RuleTarget.CONTENT
    ignore_case: bool = False
    description: str = ""


@dataclass(frozen=True)
class Finding:
    """A single match of a rule."""

    rule_id: str
    category: str
    severity: Severity
    match: str
    line: int | None = None

    @property
    def redacted(self) -> str:
        """Match text with everything past the first four characters masked."""
        if self.line is None:
            return self.match
        visible = self.match[:4]
        return f"{visible}{'*' * min(max(len(self.match) - 4, 0), 12)}"

    def to_dict(self) -> dict[str, object]:
        return {
            "rule_id": self.rule_id,
            "category": self.category,
            "severity": self.severity.value,
            "match": self.redacted,
            "line": self.line,
        }


@dataclass(frozen=True)
class ScanResult:
    """Findings for one scanned file."""

    path: str
    findings: tuple[Finding, ...] = field(default_factory=tuple)

    @property
    def blocked(self) -> bool:
        return any(f.severity is Severity.BLOCK for f in self.findings)

    @property
    def blocking(self) -> tuple[Finding, ...]:
        return tuple(f for f in self.findings if f.severity is Severity.BLOCK)

    @property
    def warnings(self) -> tuple[Finding, ...]:
        return tuple(f for f in self.findings if f.severity is Severity.WARN)

    @property
    def categories(self) -> list[str]:
        """Matched categories in first-seen order."""
        seen: list[str] = []
        for finding in self.findings:
            if finding.category not in seen:
                seen.append(finding.category)
        return seen

    def to_dict(self) -> dict[str, object]:
        return {
            "path": self.path,
            "blocked": self.blocked,
            "categories": self.categories,
            "findings": [f.to_dict() for f in self.findings],
        }
