"""Glyph placement and the representations a glyph can resolve to.

This module defines the positioned glyph (a glyph id plus where it goes on
the page) and the four mutually exclusive artifacts a font can provide for
it: color layers, an embedded SVG fragment, a bitmap, or a plain outline.
"""

from dataclasses import dataclass

from fontTools.misc.transform import Identity, Transform

from glyphflat.domain.tree import Fragment, Segments

# Vertical shift (in ems) applied to sbix glyphs whose outline bbox starts at
# y=0. Apple Color Emoji sits slightly too high next to outline text otherwise.
SBIX_ZERO_BBOX_SHIFT = 0.128


@dataclass(frozen=True)
class PositionedGlyph:
    """A glyph placed in user space.

    Attributes:
        font_id: Font database id of the face
        glyph_id: Glyph index within the face
        font_size: Font size in user units
        units_per_em: Face units per em
        glyph_ts: Placement of the glyph origin (baseline, y down)
    """

    font_id: int
    glyph_id: int
    font_size: float
    units_per_em: int
    glyph_ts: Transform = Identity

    @property
    def scale(self) -> float:
        """User units per font unit."""
        return self.font_size / self.units_per_em

    def transform(self) -> Transform:
        """Placement scaled from font units to user units."""
        return self.glyph_ts.scale(self.scale, self.scale)

    def outline_transform(self) -> Transform:
        """Transform for y-up outlines and COLR paint output."""
        return self.transform().scale(1.0, -1.0)

    def colr_transform(self) -> Transform:
        """Transform for the color-layer subtree."""
        return self.outline_transform()

    def svg_transform(self) -> Transform:
        """Transform for SVG table documents, which are already y-down."""
        return self.transform()

    def cbdt_transform(self, x: float, y: float, pixels_per_em: float, height: float) -> Transform:
        """Transform for CBDT bitmaps anchored by their bearing offsets.

        Args:
            x: Horizontal bearing in pixels
            y: Offset of the bitmap's bottom edge above the baseline in pixels
            pixels_per_em: Strike size
            height: Bitmap height in pixels
        """
        pixel_scale = self.font_size / pixels_per_em
        return self.glyph_ts.scale(pixel_scale, pixel_scale).translate(x, -height - y)

    def sbix_transform(
        self,
        x: float,
        y: float,
        x_min: float,
        y_min: float,
        pixels_per_em: float,
        height: float,
    ) -> Transform:
        """Transform for sbix bitmaps anchored at the outline bounding box.

        Args:
            x: Origin offset x in pixels
            y: Origin offset y in pixels
            x_min: Outline bbox x_min in font units
            y_min: Outline bbox y_min in font units
            pixels_per_em: Strike size
            height: Bitmap height in pixels
        """
        bbox_x_shift = self.font_size * (-x_min / self.units_per_em)
        if abs(y_min) < 1e-6:
            bbox_y_shift = SBIX_ZERO_BBOX_SHIFT * self.font_size
        else:
            bbox_y_shift = self.font_size * (-y_min / self.units_per_em)

        pixel_scale = self.font_size / pixels_per_em
        return (
            self.glyph_ts.translate(bbox_x_shift, bbox_y_shift)
            .scale(pixel_scale, pixel_scale)
            .translate(x, -height - y)
        )


@dataclass(frozen=True)
class BitmapDescriptor:
    """A PNG glyph image taken from the largest bitmap strike.

    Attributes:
        data: PNG bytes
        width: Image width in pixels
        height: Image height in pixels
        x: Horizontal offset in pixels
        y: Vertical offset in pixels
        pixels_per_em: Strike size
        glyph_bbox: Outline bbox in font units (x_min, y_min, x_max, y_max)
        is_sbix: True for sbix anchoring, False for CBDT bearing anchoring
    """

    data: bytes
    width: int
    height: int
    x: float
    y: float
    pixels_per_em: float
    glyph_bbox: tuple[float, float, float, float] | None = None
    is_sbix: bool = False


@dataclass(frozen=True)
class ColorLayers:
    """Glyph painted from a COLR program."""

    fragment: Fragment


@dataclass(frozen=True)
class EmbeddedVector:
    """Glyph taken from an SVG table document."""

    fragment: Fragment


@dataclass(frozen=True)
class Raster:
    """Glyph taken from a bitmap strike."""

    bitmap: BitmapDescriptor


@dataclass(frozen=True)
class ScalableOutline:
    """Glyph drawn from its outline, in font units (y up)."""

    segments: Segments | None


GlyphArtifact = ColorLayers | EmbeddedVector | Raster | ScalableOutline
