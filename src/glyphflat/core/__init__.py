"""Core flattening algorithms for glyphflat.

This module contains the font-format independent parts of the pipeline:

- Pen output (SVG path data with bounds tracking)
- Paint transform algebra (composition, inversion, gradient space)
- Palette resolution for color glyph programs
- The color glyph painter (COLR paint operations to SVG markup)
- Glyph resolution and text flattening
- Minimal single-font text layout

Key classes:
- GlyphPainter: Paints color glyph operations into a MarkupWriter
- PaletteResolver: Resolves CPAL palette indices to colors
- PathBuffer: Accumulates SVG path data and its bounds

Key functions:
- flatten: Turn laid-out text into a single Group tree
- layout_text: Position a string's glyphs on one line
"""

from glyphflat.core.flatten import (
    flatten,
    push_outline_paths,
    resolve_glyph,
    resolve_rendering_mode,
)
from glyphflat.core.interfaces import FontTableSource, MarkupWriter
from glyphflat.core.layout import layout_text
from glyphflat.core.painter import ColorPainter, GlyphPainter, OutlineProvider
from glyphflat.core.palette import PaletteResolver, combine_alpha
from glyphflat.core.pen import PathBuffer, PathRecorder, format_number
from glyphflat.core.transforms import compose, gradient_space_delta, invert

__all__ = [
    # Painter classes
    "ColorPainter",
    # Interfaces
    "FontTableSource",
    "GlyphPainter",
    "MarkupWriter",
    "OutlineProvider",
    "PaletteResolver",
    # Pen classes
    "PathBuffer",
    "PathRecorder",
    # Functions
    "combine_alpha",
    "compose",
    "flatten",
    "format_number",
    "gradient_space_delta",
    "invert",
    "layout_text",
    "push_outline_paths",
    "resolve_glyph",
    "resolve_rendering_mode",
]
