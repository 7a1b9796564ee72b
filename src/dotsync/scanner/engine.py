"""Rule evaluation against file content and file names."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path, PurePath

from dotsync.log import get_logger
from dotsync.scanner.rules import DEFAULT_RULES
from dotsync.scanner.types import DetectionRule, Finding, RuleTarget, ScanResult

logger = get_logger(__name__)

MAX_MATCHES_PER_RULE = 5
BINARY_SNIFF_BYTES = 8192


@lru_cache(maxsize=32)
def compile_rules(rules: tuple[DetectionRule, ...]) -> tuple[tuple[DetectionRule, re.Pattern[str]], ...]:
    """Compile a rule table once per process."""
    compiled = []
    for rule in rules:
        flags = re.IGNORECASE if rule.ignore_case else 0
        compiled.append((rule, re.compile(rule.pattern, flags)))
    return tuple(compiled)


def _line_of(content: str, offset: int) -> int:
    return content.count("\n", 0, offset) + 1


def scan_content(
    content: str | None,
    path: str | PurePath,
    rules: tuple[DetectionRule, ...] = DEFAULT_RULES,
) -> ScanResult:
    """Scan text content and its file name against a rule table.

    Never raises for malformed input: ``None`` or empty content simply
    yields no content findings. Path rules still apply.
    """
    text = content or ""
    path_str = str(path)
    basename = PurePath(path_str).name
    findings: list[Finding] = []

    for rule, regex in compile_rules(rules):
        if rule.target is RuleTarget.PATH:
            match = regex.search(basename)
            if match:
                findings.append(
                    Finding(
                        rule_id=rule.rule_id,
                        category=rule.category,
                        severity=rule.severity,
                        match=basename,
                    )
                )
            continue

        if not text:
            continue
        for count, match in enumerate(regex.finditer(text)):
            if count >= MAX_MATCHES_PER_RULE:
                break
            findings.append(
                Finding(
                    rule_id=rule.rule_id,
                    category=rule.category,
                    severity=rule.severity,
                    match=match.group(0),
                    line=_line_of(text, match.start()),
                )
            )

    return ScanResult(path=path_str, findings=tuple(findings))


def read_text_for_scan(path: Path) -> str:
    """Read a file as text for scanning; binary files read as empty.

    Raises:
        OSError: If the file cannot be read
    """
    data = path.read_bytes()
    if b"\x00" in data[:BINARY_SNIFF_BYTES]:
        logger.debug("treating %s as binary; content rules skipped", path)
        return ""
    return data.decode("utf-8", errors="replace")


def scan_file(
    path: Path,
    rules: tuple[DetectionRule, ...] = DEFAULT_RULES,
    *,
    display_path: str | None = None,
) -> ScanResult:
    """Read ``path`` and scan it.

    Args:
        path: File to read
        rules: Rule table to evaluate
        display_path: Path recorded in the result (defaults to ``path``)

    Raises:
        OSError: If the file cannot be read
    """
    content = read_text_for_scan(path)
    result = scan_content(content, display_path or str(path), rules)
    if result.findings:
        logger.debug("%s: %d finding(s) %s", result.path, len(result.findings), result.categories)
    return result
