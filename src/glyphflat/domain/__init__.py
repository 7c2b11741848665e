"""Domain models for glyphflat.

This module contains the value types shared by the painter, the flattening
pipeline and the font I/O layer:

- Paint program types: Color, PaintTransform, brushes, color stops
- Glyph types: PositionedGlyph, BitmapDescriptor and the glyph artifacts
- Text types: Span, Text
- Document tree: Group, Path, Image, Fragment
"""

from glyphflat.domain.glyph import (
    BitmapDescriptor,
    ColorLayers,
    EmbeddedVector,
    GlyphArtifact,
    PositionedGlyph,
    Raster,
    ScalableOutline,
)
from glyphflat.domain.paint import (
    FOREGROUND_PALETTE_INDEX,
    IDENTITY,
    Brush,
    ClipBox,
    Color,
    ColorStop,
    CompositeMode,
    Extend,
    LinearGradientBrush,
    PaintTransform,
    RadialGradientBrush,
    SolidBrush,
    SweepGradientBrush,
)
from glyphflat.domain.text import Span, Text, TextRendering
from glyphflat.domain.tree import (
    Fill,
    Fragment,
    Group,
    Image,
    Node,
    PaintOrder,
    Path,
    Rect,
    ShapeRendering,
    Stroke,
)

__all__: list[str] = [
    # Paint program
    "FOREGROUND_PALETTE_INDEX",
    "IDENTITY",
    "Brush",
    "ClipBox",
    "Color",
    "ColorStop",
    "CompositeMode",
    "Extend",
    "LinearGradientBrush",
    "PaintTransform",
    "RadialGradientBrush",
    "SolidBrush",
    "SweepGradientBrush",
    # Glyphs
    "BitmapDescriptor",
    "ColorLayers",
    "EmbeddedVector",
    "GlyphArtifact",
    "PositionedGlyph",
    "Raster",
    "ScalableOutline",
    # Text
    "Span",
    "Text",
    "TextRendering",
    # Tree
    "Fill",
    "Fragment",
    "Group",
    "Image",
    "Node",
    "PaintOrder",
    "Path",
    "Rect",
    "ShapeRendering",
    "Stroke",
]
