"""Build the effective rule table from configuration."""

from __future__ import annotations

import re
from typing import Any

from dotsync.config import ConfigError, SyncConfig
from dotsync.scanner.rules import DEFAULT_RULES
from dotsync.scanner.types import DetectionRule, RuleTarget, Severity


def rule_from_mapping(entry: dict[str, Any], index: int) -> DetectionRule:
    """Convert a config rule mapping into a ``DetectionRule``."""
    field_prefix = f"rules[{index}]"
    try:
        rule = DetectionRule(
            rule_id=str(entry["id"]).strip(),
            category=str(entry.get("category", entry["id"])).strip(),
            pattern=str(entry["pattern"]),
            severity=Severity(str(entry.get("severity", "block")).lower()),
            target=RuleTarget(str(entry.get("target", "content")).lower()),
            ignore_case=bool(entry.get("ignore_case", False)),
            description=str(entry.get("description", "")),
        )
    except KeyError as exc:
        raise ConfigError(f"{field_prefix} missing required key {exc}") from exc
    except ValueError as exc:
        raise ConfigError(f"{field_prefix}: {exc}") from exc

    flags = re.IGNORECASE if rule.ignore_case else 0
    try:
        re.compile(rule.pattern, flags)
    except re.error as exc:
        raise ConfigError(f"{field_prefix}.pattern is not a valid regular expression: {exc}") from exc
    return rule


def effective_rules(config: SyncConfig | None = None) -> tuple[DetectionRule, ...]:
    """Return built-in rules minus disabled ones, followed by configured extras."""
    if config is None:
        return DEFAULT_RULES

    known_ids = {rule.rule_id for rule in DEFAULT_RULES}
    extras = tuple(rule_from_mapping(entry, index) for index, entry in enumerate(config.rules))

    seen: set[str] = set()
    for rule in extras:
        if rule.rule_id in known_ids or rule.rule_id in seen:
            raise ConfigError(f"duplicate rule id `{rule.rule_id}`")
        seen.add(rule.rule_id)

    unknown = sorted(set(config.disabled_rules) - known_ids - seen)
    if unknown:
        raise ConfigError(f"disabled_rules references unknown rule id(s): {', '.join(unknown)}")

    disabled = set(config.disabled_rules)
    return tuple(rule for rule in DEFAULT_RULES + extras if rule.rule_id not in disabled)
