"""Tests for domain models."""

import xml.etree.ElementTree as ET

import pytest
from fontTools.misc.transform import Identity

from glyphflat.domain import (
    IDENTITY,
    Color,
    Fill,
    Fragment,
    Group,
    Image,
    PaintTransform,
    Path,
    PositionedGlyph,
    ShapeRendering,
    Stroke,
    TextRendering,
)
from glyphflat.domain.tree import is_non_zero_rect, union_rects

SQUARE = [
    ("moveTo", ((0, 0),)),
    ("lineTo", ((10, 0),)),
    ("lineTo", ((10, 10),)),
    ("lineTo", ((0, 10),)),
    ("closePath", ()),
]


class TestColor:
    """Tests for Color."""

    def test_from_hex(self):
        """Test parsing #RRGGBB."""
        assert Color.from_hex("#0a141e") == Color(10, 20, 30, 255)

    def test_from_hex_with_alpha(self):
        """Test parsing #RRGGBBAA."""
        color = Color.from_hex("0a141e80")
        assert color.alpha == 128
        assert color.opacity == pytest.approx(128 / 255)

    def test_to_rgb(self):
        """Test SVG color formatting."""
        assert Color(10, 20, 30).to_rgb() == "rgb(10, 20, 30)"


class TestPaintTransform:
    """Tests for PaintTransform."""

    def test_identity(self):
        """Test identity detection."""
        assert IDENTITY.is_identity()
        assert not PaintTransform(dx=1).is_identity()

    def test_map_point(self):
        """Test applying the affine map."""
        transform = PaintTransform(xx=2, xy=1, yx=0, yy=3, dx=1, dy=-1)
        assert transform.map_point(3, 4) == (11, 11)


class TestPath:
    """Tests for Path."""

    def test_new_without_move_to(self):
        """Test that a path with nothing to draw is not created."""
        assert Path.new([]) is None
        assert Path.new([("closePath", ())]) is None

    def test_bounding_box(self):
        """Test fill bounds follow the path transform."""
        path = Path.new(SQUARE, transform=Identity.translate(5, 5))
        assert path.bounding_box == (5, 5, 15, 15)

    def test_stroke_bounding_box(self):
        """Test stroke bounds grow by half the stroke width."""
        path = Path.new(SQUARE, stroke=Stroke(color=Color(0, 0, 0), width=2))
        assert path.stroke_bounding_box == (-1, -1, 11, 11)
        assert path.bounding_box == (0, 0, 10, 10)

    def test_defaults(self):
        """Test default paint attributes."""
        path = Path.new(SQUARE, fill=Fill(color=Color(0, 0, 0)))
        assert path.rendering_mode is ShapeRendering.GEOMETRIC_PRECISION
        assert path.visible
        assert path.stroke is None


class TestGroup:
    """Tests for Group bounding boxes."""

    def test_empty_group(self):
        """Test an empty group has no bounds."""
        group = Group()
        group.calculate_bounding_boxes()
        assert group.bounding_box is None
        assert not group.has_children()

    def test_nested_transforms(self):
        """Test bounds are mapped through every group transform."""
        inner = Group(transform=Identity.scale(2), children=[Path.new(SQUARE)])
        outer = Group(transform=Identity.translate(100, 0), children=[inner])
        outer.calculate_bounding_boxes()

        assert inner.bounding_box == (0, 0, 20, 20)
        assert outer.bounding_box == (100, 0, 120, 20)
        assert outer.stroke_bounding_box == (100, 0, 120, 20)

    def test_mixed_children(self):
        """Test images and fragments contribute to bounds."""
        fragment = Fragment(element=ET.Element("g"), bounds=(-5, -5, 0, 0))
        group = Group(children=[Image(data=b"", width=4, height=8), fragment])
        group.calculate_bounding_boxes()
        assert group.bounding_box == (-5, -5, 4, 8)


class TestRects:
    """Tests for rectangle helpers."""

    def test_union_skips_none(self):
        """Test that missing rectangles are ignored."""
        assert union_rects([None, (0, 0, 1, 1), None, (2, 2, 3, 3)]) == (0, 0, 3, 3)
        assert union_rects([None]) is None

    def test_is_non_zero_rect(self):
        """Test zero-area rectangles are rejected."""
        assert is_non_zero_rect((0, 0, 1, 1))
        assert not is_non_zero_rect((0, 0, 0, 1))
        assert not is_non_zero_rect(None)


class TestPositionedGlyph:
    """Tests for glyph placement transforms."""

    def test_scale(self):
        """Test the font unit to user unit scale."""
        glyph = PositionedGlyph(font_id=0, glyph_id=1, font_size=64, units_per_em=1024)
        assert glyph.scale == 0.0625

    def test_outline_transform_flips_y(self):
        """Test outlines are scaled, flipped and placed at the origin."""
        glyph = PositionedGlyph(
            font_id=0,
            glyph_id=1,
            font_size=100,
            units_per_em=1000,
            glyph_ts=Identity.translate(10, 20),
        )
        assert glyph.outline_transform().transformPoint((100, 200)) == pytest.approx((20, 0))
        assert glyph.colr_transform() == glyph.outline_transform()

    def test_svg_transform_keeps_y(self):
        """Test SVG documents are already y-down."""
        glyph = PositionedGlyph(font_id=0, glyph_id=1, font_size=100, units_per_em=1000)
        assert glyph.svg_transform().transformPoint((100, 200)) == pytest.approx((10, 20))

    def test_cbdt_transform(self):
        """Test CBDT bitmaps are placed by their bearings."""
        glyph = PositionedGlyph(font_id=0, glyph_id=1, font_size=50, units_per_em=1000)
        transform = glyph.cbdt_transform(x=2, y=-3, pixels_per_em=100, height=10)
        assert transform.transformPoint((0, 0)) == pytest.approx((1, -3.5))

    def test_sbix_transform_zero_bbox_shift(self):
        """Test sbix glyphs starting at y=0 get the fixed downward shift."""
        glyph = PositionedGlyph(font_id=0, glyph_id=1, font_size=100, units_per_em=1000)
        transform = glyph.sbix_transform(
            x=0, y=0, x_min=0, y_min=0, pixels_per_em=100, height=100
        )
        assert transform.transformPoint((0, 0)) == pytest.approx((0, 12.8 - 100))


class TestTextRendering:
    """Tests for TextRendering."""

    def test_optimize_speed_maps_to_crisp_edges(self):
        """Test the speed hint disables anti-aliasing."""
        assert TextRendering.OPTIMIZE_SPEED.to_shape_rendering() is ShapeRendering.CRISP_EDGES

    def test_other_hints_map_to_geometric_precision(self):
        """Test legibility and precision hints keep anti-aliasing."""
        for hint in (TextRendering.OPTIMIZE_LEGIBILITY, TextRendering.GEOMETRIC_PRECISION):
            assert hint.to_shape_rendering() is ShapeRendering.GEOMETRIC_PRECISION
