"""
Module: core.models.template

Purpose:
    Provides the Template and Element dataclasses - the reusable,
    percentage-based page layout describing which decorations to draw
    and where. Element content is a closed set of per-type variants.

Key Classes:
    - ElementType: Closed set of element kinds
    - Element: One positioned page element
    - Template: Page size + ordered element list
    - TextContent, LegendContent, ScaleBarContent, ImageContent,
      MapContent, NorthArrowContent: Per-type content variants

Key Functions:
    - page_dimensions(): Resolve a page size name to inches
    - page_size_label(): Human label for a template's page size
    - content_from_dict(): Parse a content payload with per-type defaults

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - atlas_export.core.utils.serialization
    - atlas_export.layout.compositor
    - atlas_export.controller
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple, Union


class ElementType(str, Enum):
    """Kind of template element."""
    MAP = "map"
    TITLE = "title"
    TEXT = "text"
    LEGEND = "legend"
    SCALEBAR = "scalebar"
    NORTH_ARROW = "northArrow"
    IMAGE = "image"
    LOGO = "logo"

    def __str__(self) -> str:
        return self.value


# Page sizes in inches: name -> (width, height, label)
PAGE_SIZES: dict[str, tuple[float, float, str]] = {
    "letter-landscape": (11, 8.5, "Letter Landscape"),
    "letter-portrait": (8.5, 11, "Letter Portrait"),
    "legal-landscape": (14, 8.5, "Legal Landscape"),
    "legal-portrait": (8.5, 14, "Legal Portrait"),
    "tabloid-landscape": (17, 11, "Tabloid Landscape"),
    "tabloid-portrait": (11, 17, "Tabloid Portrait"),
    "a4-landscape": (11.69, 8.27, "A4 Landscape"),
    "a4-portrait": (8.27, 11.69, "A4 Portrait"),
    "a3-landscape": (16.54, 11.69, "A3 Landscape"),
    "a3-portrait": (11.69, 16.54, "A3 Portrait"),
}
CUSTOM_PAGE_SIZE = "custom"
DEFAULT_PAGE_WIDTH_IN = 11.0
DEFAULT_PAGE_HEIGHT_IN = 8.5

ALIGNMENTS = ("left", "center", "right")


# ─────────────────────────────────────────────────────────────────────────────
# Content variants
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class MapContent:
    """Map element has no configurable content."""


@dataclass(frozen=True, slots=True)
class NorthArrowContent:
    """North arrow is a fixed glyph."""


@dataclass(frozen=True, slots=True)
class TextContent:
    """
    Content for title and text elements.

    Attributes:
        text: Literal text (titles are overridden at export time)
        font_size: CSS pixels at 96 DPI
        font_weight: "normal" or "bold"
        color: Text colour
        align: "left", "center" or "right"
        background_color: Box fill, or None for transparent
    """
    text: str = ""
    font_size: float = 12
    font_weight: str = "normal"
    color: str = "#000000"
    align: str = "left"
    background_color: Optional[str] = None

    @property
    def is_bold(self) -> bool:
        return self.font_weight in ("bold", "bolder", "600", "700", "800", "900")


@dataclass(frozen=True, slots=True)
class LegendContent:
    title: str = "Legend"
    show_title: bool = True
    background_color: str = "#ffffff"


@dataclass(frozen=True, slots=True)
class ScaleBarContent:
    units: str = "feet"


@dataclass(frozen=True, slots=True)
class ImageContent:
    url: Optional[str] = None


ElementContent = Union[
    MapContent,
    NorthArrowContent,
    TextContent,
    LegendContent,
    ScaleBarContent,
    ImageContent,
]


# Per-type defaults for title vs text differ only in these fields
_TEXT_DEFAULTS = {
    ElementType.TITLE: {"font_size": 24, "font_weight": "bold", "align": "center"},
    ElementType.TEXT: {"font_size": 12, "font_weight": "normal", "align": "left"},
}


def _str(value: Any, default: Optional[str]) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return default


def _positive(value: Any, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value) if value > 0 else default


def content_from_dict(element_type: ElementType, data: Any) -> ElementContent:
    """
    Parse a content payload into the variant for ``element_type``.

    Missing or malformed fields fall back to the per-type defaults
    rather than failing.

    Args:
        element_type: Element kind the content belongs to
        data: Raw content mapping (may be None or a non-dict)

    Returns:
        Content variant instance

    Example:
        >>> content_from_dict(ElementType.TITLE, {"fontSize": "huge"}).font_size
        24
    """
    data = data if isinstance(data, dict) else {}

    if element_type in (ElementType.TITLE, ElementType.TEXT):
        defaults = _TEXT_DEFAULTS[element_type]
        align = data.get("align")
        return TextContent(
            text=data.get("text") if isinstance(data.get("text"), str) else "",
            font_size=_positive(data.get("fontSize"), defaults["font_size"]),
            font_weight=str(data.get("fontWeight") or defaults["font_weight"]),
            color=_str(data.get("color"), "#000000"),
            align=align if align in ALIGNMENTS else defaults["align"],
            background_color=_str(data.get("backgroundColor"), None),
        )
    if element_type == ElementType.LEGEND:
        return LegendContent(
            title=_str(data.get("title"), "Legend"),
            show_title=data.get("showTitle") is not False,
            background_color=_str(data.get("backgroundColor"), "#ffffff"),
        )
    if element_type == ElementType.SCALEBAR:
        return ScaleBarContent(units=_str(data.get("units"), "feet"))
    if element_type in (ElementType.IMAGE, ElementType.LOGO):
        return ImageContent(url=_str(data.get("url"), None))
    if element_type == ElementType.NORTH_ARROW:
        return NorthArrowContent()
    return MapContent()


def content_to_dict(content: ElementContent) -> dict:
    """Serialize a content variant back to its camelCase payload."""
    if isinstance(content, TextContent):
        d = {
            "text": content.text,
            "fontSize": content.font_size,
            "fontWeight": content.font_weight,
            "color": content.color,
            "align": content.align,
        }
        if content.background_color:
            d["backgroundColor"] = content.background_color
        return d
    if isinstance(content, LegendContent):
        return {
            "title": content.title,
            "showTitle": content.show_title,
            "backgroundColor": content.background_color,
        }
    if isinstance(content, ScaleBarContent):
        return {"units": content.units}
    if isinstance(content, ImageContent):
        return {"url": content.url} if content.url else {}
    return {}


# ─────────────────────────────────────────────────────────────────────────────
# Element / Template
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class Element:
    """
    Template element positioned in page percentages (immutable).

    Percentages make the rectangle independent of page size, so one
    template renders correctly at any physical size or DPI.

    Attributes:
        id: Element identifier
        type: ElementType
        x, y, width, height: Rectangle as percentages of the page (0-100)
        visible: Hidden elements are skipped
        locked: Editor-only flag, carried through unchanged
        content: Type-specific content variant

    Example:
        >>> el = Element("map-1", ElementType.MAP, 10, 10, 80, 70)
        >>> el.content
        MapContent()
    """

    id: str
    type: ElementType
    x: float
    y: float
    width: float
    height: float
    visible: bool = True
    locked: bool = False
    content: Optional[ElementContent] = None

    def __post_init__(self) -> None:
        if self.content is None:
            object.__setattr__(self, "content", content_from_dict(self.type, None))
        for name in ("x", "y", "width", "height"):
            value = getattr(self, name)
            if value < 0 or value > 100:
                raise ValueError(f"{name} must be within 0-100: {value}")


@dataclass(frozen=True, slots=True)
class Template:
    """
    Export template (immutable).

    Attributes:
        id: Template identifier
        name: Display name
        page_size: Preset name (e.g. "letter-landscape") or "custom"
        custom_width, custom_height: Inches, used when page_size is "custom"
        background_color: Page fill colour
        elements: Ordered elements; later elements paint over earlier ones
        enabled: Disabled templates are hidden from the export panel

    Invariants:
        - Resolved page width and height are > 0
    """

    id: str
    name: str
    page_size: str = "letter-landscape"
    custom_width: Optional[float] = None
    custom_height: Optional[float] = None
    background_color: str = "#ffffff"
    elements: Tuple[Element, ...] = field(default_factory=tuple)
    enabled: bool = True

    def __post_init__(self) -> None:
        width, height = self.page_dimensions
        if width <= 0 or height <= 0:
            raise ValueError(f"Page dimensions must be positive: {width}x{height}")

    @property
    def page_dimensions(self) -> tuple[float, float]:
        """Page (width, height) in inches."""
        return page_dimensions(self.page_size, self.custom_width, self.custom_height)

    @property
    def map_element(self) -> Optional[Element]:
        """First visible map element, or None."""
        for element in self.elements:
            if element.type == ElementType.MAP and element.visible:
                return element
        return None

    @property
    def page_size_label(self) -> str:
        return page_size_label(self.page_size, self.custom_width, self.custom_height)


def page_dimensions(
    page_size: str,
    custom_width: Optional[float] = None,
    custom_height: Optional[float] = None,
) -> tuple[float, float]:
    """
    Resolve a page size name to (width, height) inches.

    Unknown names fall back to letter landscape.

    Example:
        >>> page_dimensions("a4-portrait")
        (8.27, 11.69)
        >>> page_dimensions("custom", 20)
        (20, 8.5)
    """
    if page_size == CUSTOM_PAGE_SIZE:
        return (
            custom_width if custom_width else DEFAULT_PAGE_WIDTH_IN,
            custom_height if custom_height else DEFAULT_PAGE_HEIGHT_IN,
        )
    preset = PAGE_SIZES.get(page_size)
    if preset is None:
        return (DEFAULT_PAGE_WIDTH_IN, DEFAULT_PAGE_HEIGHT_IN)
    return (preset[0], preset[1])


def page_size_label(
    page_size: str,
    custom_width: Optional[float] = None,
    custom_height: Optional[float] = None,
) -> str:
    if page_size == CUSTOM_PAGE_SIZE:
        width, height = page_dimensions(page_size, custom_width, custom_height)
        return f'Custom ({width:g}"x{height:g}")'
    preset = PAGE_SIZES.get(page_size)
    return preset[2] if preset else page_size
