"""
Serialization Utilities

Provides to/from JSON utilities for template documents as stored by
the template store (camelCase keys), plus the read-only store helpers
used to pick the templates offered for a given map.

- `template_from_dict` / `template_to_dict` convert single documents
- `load_templates` reads a JSON list of documents from disk
- `available_templates` filters to enabled templates configured for a map
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Sequence

from ..models.template import (
    Element,
    ElementType,
    Template,
    content_from_dict,
    content_to_dict,
)
from ..schemas.validator import ValidationError, validate_template

logger = logging.getLogger(__name__)


class TemplateError(ValidationError):
    """Template document cannot be turned into a Template."""
    pass


# ─────────────────────────────────────────────────────────────────────────────
# Template Serialization
# ─────────────────────────────────────────────────────────────────────────────

def template_from_dict(data: dict[str, Any], *, validate: bool = True) -> Template:
    """
    Deserialize a Template from a template document.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate against the schema first

    Returns:
        Template instance

    Raises:
        TemplateError: If the document is invalid
    """
    if validate:
        try:
            validate_template(data)
        except ValidationError as e:
            raise TemplateError(str(e), path=e.path, errors=e.errors) from e

    try:
        elements = tuple(_element_from_dict(el) for el in data.get("elements", []))
        return Template(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            page_size=data.get("pageSize", "letter-landscape"),
            custom_width=data.get("customWidth"),
            custom_height=data.get("customHeight"),
            background_color=data.get("backgroundColor") or "#ffffff",
            elements=elements,
            enabled=data.get("enabled") is not False,
        )
    except (KeyError, ValueError, TypeError) as e:
        raise TemplateError(f"Invalid template {data.get('id')!r}: {e}") from e


def _element_from_dict(data: dict[str, Any]) -> Element:
    """Deserialize an Element from a dictionary."""
    element_type = ElementType(data["type"])
    return Element(
        id=str(data["id"]),
        type=element_type,
        x=float(data["x"]),
        y=float(data["y"]),
        width=float(data["width"]),
        height=float(data["height"]),
        visible=data.get("visible") is not False,
        locked=bool(data.get("locked", False)),
        content=content_from_dict(element_type, data.get("content")),
    )


def template_to_dict(template: Template) -> dict[str, Any]:
    """
    Serialize a Template to a template document.

    The output passes schema validation and round-trips through
    template_from_dict.
    """
    d: dict[str, Any] = {
        "id": template.id,
        "name": template.name,
        "pageSize": template.page_size,
        "backgroundColor": template.background_color,
        "enabled": template.enabled,
        "elements": [
            {
                "id": el.id,
                "type": el.type.value,
                "x": el.x,
                "y": el.y,
                "width": el.width,
                "height": el.height,
                "visible": el.visible,
                "locked": el.locked,
                "content": content_to_dict(el.content),
            }
            for el in template.elements
        ],
    }
    if template.custom_width is not None:
        d["customWidth"] = template.custom_width
    if template.custom_height is not None:
        d["customHeight"] = template.custom_height
    return d


# ─────────────────────────────────────────────────────────────────────────────
# Template Store (read-only)
# ─────────────────────────────────────────────────────────────────────────────

def load_templates(path: Path) -> list[Template]:
    """
    Load templates from a JSON file.

    Accepts either a list of template documents or an object with an
    ``exportTemplates`` list (the organisation config shape).

    Raises:
        TemplateError: If the file is not valid JSON or a document is invalid
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise TemplateError(f"Template file is not valid JSON: {path}: {e}") from e

    if isinstance(payload, dict):
        payload = payload.get("exportTemplates", [])
    if not isinstance(payload, list):
        raise TemplateError(f"Expected a list of templates in {path}")

    templates = [template_from_dict(doc) for doc in payload]
    logger.debug(f"Loaded {len(templates)} templates from {path}")
    return templates


def available_templates(
    templates: Sequence[Template],
    enabled_ids: Iterable[str],
) -> list[Template]:
    """
    Templates offered for a map: enabled and configured for it.

    Store order is preserved.

    Example:
        >>> [t.id for t in available_templates(all_templates, ["b", "a"])]
        ['a', 'b']
    """
    wanted = set(enabled_ids)
    return [t for t in templates if t.enabled and t.id in wanted]
