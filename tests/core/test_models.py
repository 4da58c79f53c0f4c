"""
Unit Tests for Core Models

Tests for Template, Element, ExportGeometry, PixelRect and colour parsing.
"""

import pytest

from atlas_export.core.models import (
    Element,
    ElementType,
    ExportGeometry,
    ImageContent,
    MapContent,
    PixelRect,
    Template,
    format_scale,
    page_dimensions,
    page_size_label,
)
from atlas_export.core.utils.colors import parse_color, to_hex


class TestTemplate:
    """Tests for Template and Element."""

    def test_element_when_no_content_then_type_default(self):
        """Content defaults to the variant for the element type."""
        assert Element("m", ElementType.MAP, 0, 0, 50, 50).content == MapContent()
        assert Element("i", ElementType.LOGO, 0, 0, 10, 10).content == ImageContent()

    def test_element_when_out_of_range_then_raises_error(self):
        """Percentages outside 0-100 are rejected."""
        with pytest.raises(ValueError, match="width must be within 0-100"):
            Element("m", ElementType.MAP, 0, 0, 101, 50)

    def test_map_element_when_first_is_hidden_then_returns_visible_one(self):
        """Hidden map elements are ignored."""
        hidden = Element("hidden", ElementType.MAP, 0, 0, 50, 50, visible=False)
        shown = Element("shown", ElementType.MAP, 0, 0, 50, 50)
        template = Template("t", "T", elements=(hidden, shown))
        assert template.map_element is shown

    def test_map_element_when_none_then_returns_none(self):
        """Templates without a map report None."""
        template = Template("t", "T", elements=(Element("n", ElementType.NORTH_ARROW, 0, 0, 5, 5),))
        assert template.map_element is None

    def test_page_dimensions_when_custom_then_uses_custom_size(self):
        """Custom pages use the given inches, falling back per axis."""
        assert page_dimensions("custom", 24, 18) == (24, 18)
        assert page_dimensions("custom", 20) == (20, 8.5)

    def test_page_dimensions_when_unknown_preset_then_letter_landscape(self):
        """Unknown names fall back to 11 x 8.5."""
        assert page_dimensions("postcard") == (11, 8.5)

    def test_page_size_label_when_preset_then_display_name(self):
        assert page_size_label("tabloid-portrait") == "Tabloid Portrait"
        assert page_size_label("custom", 24, 18) == 'Custom (24"x18")'

    def test_template_when_negative_custom_size_then_raises_error(self):
        """Resolved page dimensions must be positive."""
        with pytest.raises(ValueError, match="Page dimensions must be positive"):
            Template("t", "T", page_size="custom", custom_width=-1, custom_height=5)


class TestExportGeometry:
    """Tests for ExportGeometry."""

    def test_init_when_inverted_x_then_raises_error(self):
        with pytest.raises(ValueError, match="xmax must be > xmin"):
            ExportGeometry(10, 0, 5, 10, scale=100)

    def test_init_when_zero_scale_then_raises_error(self):
        with pytest.raises(ValueError, match="scale must be positive"):
            ExportGeometry(0, 0, 10, 10, scale=0)

    def test_corners_when_valid_then_clockwise_from_top_left(self):
        """Corners are TL, TR, BR, BL in map coordinates."""
        geometry = ExportGeometry(0, 0, 100, 50, scale=100)
        assert geometry.corners == ((0, 50), (100, 50), (100, 0), (0, 0))

    def test_from_dict_when_camel_case_then_parses(self):
        """Resolver payloads use camelCase keys."""
        geometry = ExportGeometry.from_dict({
            "xmin": 1, "ymin": 2, "xmax": 3, "ymax": 4, "scale": 500,
            "widthInches": 8.8, "isAuto": True,
        })
        assert geometry.extent == (1, 2, 3, 4)
        assert geometry.width_inches == 8.8
        assert geometry.is_auto is True

    @pytest.mark.parametrize("scale,expected", [
        (None, "Auto"),
        (500, "1\" = 500'"),
        (2500, "1\" = 2.5k'"),
        (5000, "1\" = 5k'"),
    ])
    def test_format_scale_when_value_then_display_form(self, scale, expected):
        assert format_scale(scale) == expected


class TestPixelRect:
    """Tests for PixelRect."""

    def test_clamp_when_partly_outside_then_intersects(self):
        rect = PixelRect(-10, 90, 50, 20).clamp_to((100, 100))
        assert rect == PixelRect(0, 90, 40, 10)

    def test_clamp_when_fully_outside_then_empty(self):
        assert PixelRect(200, 200, 10, 10).clamp_to((100, 100)).is_empty


class TestColors:
    """Tests for colour parsing."""

    def test_parse_color_when_hex_then_rgba(self):
        assert parse_color("#ff0000") == (255, 0, 0, 255)

    def test_parse_color_when_invalid_then_default(self):
        assert parse_color("not-a-colour", "#ffffff") == (255, 255, 255, 255)
        assert parse_color(None) == (0, 0, 0, 255)

    def test_to_hex_when_float_alpha_then_dropped(self):
        assert to_hex((255, 128, 0, 0.5)) == "#ff8000"
