"""Positioned text: spans of glyphs sharing paint attributes."""

from dataclasses import dataclass, field
from enum import Enum

from glyphflat.domain.glyph import PositionedGlyph
from glyphflat.domain.tree import Fill, PaintOrder, Path, ShapeRendering, Stroke


class TextRendering(str, Enum):
    """SVG text-rendering hint."""

    OPTIMIZE_SPEED = "optimizeSpeed"
    OPTIMIZE_LEGIBILITY = "optimizeLegibility"
    GEOMETRIC_PRECISION = "geometricPrecision"

    def to_shape_rendering(self) -> ShapeRendering:
        """Map the text hint to the shape hint used on emitted paths."""
        if self is TextRendering.OPTIMIZE_SPEED:
            return ShapeRendering.CRISP_EDGES
        return ShapeRendering.GEOMETRIC_PRECISION


@dataclass
class Span:
    """A run of positioned glyphs sharing paint attributes.

    Attributes:
        positioned_glyphs: Glyphs in painting order
        fill: Fill applied to outline glyphs
        stroke: Stroke applied to outline glyphs
        paint_order: Fill/stroke order for outline glyphs
        visible: False for visibility="hidden"
        overline: Decoration drawn before the glyphs
        underline: Decoration drawn before the glyphs
        line_through: Decoration drawn after the glyphs
    """

    positioned_glyphs: list[PositionedGlyph] = field(default_factory=list)
    fill: Fill | None = None
    stroke: Stroke | None = None
    paint_order: PaintOrder = PaintOrder.FILL_AND_STROKE
    visible: bool = True
    overline: Path | None = None
    underline: Path | None = None
    line_through: Path | None = None


@dataclass
class Text:
    """Laid-out text ready for flattening."""

    spans: list[Span] = field(default_factory=list)
    id: str = ""
    rendering_mode: TextRendering = TextRendering.OPTIMIZE_LEGIBILITY
