"""Sync configuration loaded from ``.dotsync.yaml``.

All knobs are explicit; nothing is read from environment variables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from dotsync.schemas import validate_data

CONFIG_FILENAME = ".dotsync.yaml"
DEFAULT_REMOTE = "origin"
DEFAULT_GIT_TIMEOUT = 30.0
DEFAULT_PUSH_TIMEOUT = 120.0
DEFAULT_TRAILER = "Co-Authored-By: dotsync <dotsync@users.noreply.github.com>"


class ConfigError(ValueError):
    """Configuration file could not be parsed or failed validation."""


@dataclass(frozen=True)
class SyncConfig:
    """Normalized dotsync configuration."""

    remote: str = DEFAULT_REMOTE
    branch: str | None = None
    git_timeout: float = DEFAULT_GIT_TIMEOUT
    push_timeout: float = DEFAULT_PUSH_TIMEOUT
    trailer: str = DEFAULT_TRAILER
    disabled_rules: tuple[str, ...] = ()
    rules: tuple[dict[str, Any], ...] = ()
    path: Path | None = field(default=None, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path | None = None) -> SyncConfig:
        """Validate a raw mapping and build a config from it."""
        errors = validate_data(data, "config")
        if errors:
            where = f" in {path}" if path else ""
            raise ConfigError(
                f"Invalid configuration{where}:\n" + "\n".join(f"  - {msg}" for msg in errors)
            )
        return cls(
            remote=data.get("remote", DEFAULT_REMOTE),
            branch=data.get("branch"),
            git_timeout=float(data.get("git_timeout", DEFAULT_GIT_TIMEOUT)),
            push_timeout=float(data.get("push_timeout", DEFAULT_PUSH_TIMEOUT)),
            trailer=data.get("trailer", DEFAULT_TRAILER),
            disabled_rules=tuple(data.get("disabled_rules", ())),
            rules=tuple(data.get("rules", ())),
            path=path,
        )


def load_config(path: Path) -> SyncConfig:
    """Load and validate a YAML config file.

    Raises:
        ConfigError: If the file is unreadable, malformed, or invalid
    """
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read config at {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML config at {path}: {exc}") from exc

    if raw is None:
        return SyncConfig(path=path)
    if not isinstance(raw, dict):
        raise ConfigError(f"Config at {path} must be a mapping at top level")
    return SyncConfig.from_dict(raw, path=path)


def discover_config(start: Path) -> SyncConfig:
    """Load the nearest ``.dotsync.yaml`` at or above ``start``, else defaults."""
    probe = start.resolve()
    if probe.is_file():
        probe = probe.parent
    for directory in (probe, *probe.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return load_config(candidate)
    return SyncConfig()


def resolve_config(repo_root: Path | None, explicit: Path | None = None) -> SyncConfig:
    """Return the explicit config, the repository's ``.dotsync.yaml``, or defaults."""
    if explicit is not None:
        return load_config(explicit)
    if repo_root is not None:
        candidate = repo_root / CONFIG_FILENAME
        if candidate.is_file():
            return load_config(candidate)
    return SyncConfig()
