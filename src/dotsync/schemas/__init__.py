"""Packaged JSON schemas and validation."""

import json
from functools import lru_cache
from importlib.resources import files
from typing import Any

from jsonschema.validators import Draft202012Validator


@lru_cache(maxsize=None)
def get_schema(schema_name: str) -> dict[str, Any]:
    """Load ``<schema_name>.schema.json`` from package data.

    Raises:
        KeyError: If no such schema is packaged
    """
    resource = files("dotsync.schemas") / f"{schema_name}.schema.json"
    if not resource.is_file():
        raise KeyError(f"schema not found: {schema_name}")
    return json.loads(resource.read_text(encoding="utf-8"))


def validate_data(data: Any, schema_name: str) -> list[str]:
    """Validate data against a packaged schema.

    Returns:
        Error messages, empty when valid
    """
    validator = Draft202012Validator(get_schema(schema_name))
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    return [
        f"{'.'.join(str(p) for p in e.path)}: {e.message}" if e.path else e.message
        for e in errors
    ]
