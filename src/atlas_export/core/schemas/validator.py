"""
Schema Validation Utilities

Validates template documents (the JSON stored by the template store)
before they are turned into Template objects.

Only structure is enforced here: ids, element types and percentage
ranges. Element ``content`` is deliberately loose because malformed
content falls back to per-type defaults at parse time.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_template(data: Any) -> None:
    """
    Validate a template document against the template schema.

    Args:
        data: Decoded JSON template document

    Raises:
        ValidationError: If data is invalid. ``path`` points at the first
            offending field (e.g. "elements.2.width").
    """
    if not isinstance(data, dict):
        raise ValidationError(
            f"Template must be an object, got {type(data).__name__}",
        )

    schema = _load_schema("template")
    validator = jsonschema.Draft7Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if errors:
        first = errors[0]
        raise ValidationError(
            f"Schema validation failed: {first.message}",
            path=".".join(str(p) for p in first.absolute_path),
            errors=[e.message for e in errors],
        )
