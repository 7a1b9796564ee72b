"""Sensitive-content scanner."""

from dotsync.scanner.engine import scan_content, scan_file
from dotsync.scanner.rules import DEFAULT_RULES
from dotsync.scanner.types import DetectionRule, Finding, RuleTarget, ScanResult, Severity

__all__ = [
    "DEFAULT_RULES",
    "DetectionRule",
    "Finding",
    "RuleTarget",
    "ScanResult",
    "Severity",
    "scan_content",
    "scan_file",
]
