"""
Core utilities: units, colours and template documents.
"""

from .units import (
    EXPORT_DPI,
    FEET_TO_METERS,
    NICE_SCALE_NUMBERS,
    css_px_to_device,
    feet_to_meters,
    meters_to_feet,
    nice_scale_number,
    pct_to_px,
    physical_size_px,
    px_to_pt,
)
from .colors import parse_color, to_hex
from .serialization import (
    TemplateError,
    available_templates,
    load_templates,
    template_from_dict,
    template_to_dict,
)

__all__ = [
    "EXPORT_DPI",
    "FEET_TO_METERS",
    "NICE_SCALE_NUMBERS",
    "css_px_to_device",
    "feet_to_meters",
    "meters_to_feet",
    "nice_scale_number",
    "pct_to_px",
    "physical_size_px",
    "px_to_pt",
    "parse_color",
    "to_hex",
    "TemplateError",
    "available_templates",
    "load_templates",
    "template_from_dict",
    "template_to_dict",
]
