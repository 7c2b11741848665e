"""Minimal text layout for a single font.

Characters map to glyphs through the font's best cmap and advance by their
hmtx widths. There is no shaping, kerning or bidi; this is enough to drive
the flattening pipeline from the command line.
"""

from fontTools.misc.transform import Identity
from fontTools.ttLib import TTFont

from glyphflat.domain.glyph import PositionedGlyph
from glyphflat.domain.text import Span, Text, TextRendering
from glyphflat.domain.tree import Fill, Path, Segments

NOTDEF = ".notdef"

# Fallback line thickness, in ems, when the font declares none
DEFAULT_LINE_THICKNESS = 0.05


def _rectangle(x: float, y: float, width: float, height: float) -> Segments:
    return [
        ("moveTo", ((x, y),)),
        ("lineTo", ((x + width, y),)),
        ("lineTo", ((x + width, y + height),)),
        ("lineTo", ((x, y + height),)),
        ("closePath", ()),
    ]


def _decoration(
    x: float, center_y: float, width: float, thickness: float, fill: Fill | None
) -> Path | None:
    if width <= 0 or thickness <= 0:
        return None
    return Path.new(_rectangle(x, center_y - thickness / 2, width, thickness), fill=fill)


def glyph_mapper(font: TTFont):
    """Build a character to glyph name mapping that falls back to .notdef."""
    cmap = font.getBestCmap() or {}
    glyph_order = font.getGlyphOrder()
    fallback = glyph_order[0] if glyph_order else NOTDEF

    def map_glyph(char: str) -> str:
        return cmap.get(ord(char), fallback)

    return map_glyph


def layout_text(
    font: TTFont,
    font_id: int,
    text: str,
    font_size: float,
    x: float = 0.0,
    baseline: float | None = None,
    fill: Fill | None = None,
    underline: bool = False,
    overline: bool = False,
    strikethrough: bool = False,
    text_id: str = "",
    rendering_mode: TextRendering = TextRendering.OPTIMIZE_LEGIBILITY,
) -> Text:
    """Lay out a string on one line.

    Args:
        font: Opened font
        font_id: Database id of the font
        text: String to lay out
        font_size: Font size in user units
        x: Pen start position
        baseline: Baseline y (y down); defaults to the font ascent
        fill: Fill for outline glyphs and decorations
        underline: Add an underline from the post table metrics
        overline: Add an overline at the ascent
        strikethrough: Add a line-through from the OS/2 metrics
        text_id: Id of the resulting group
        rendering_mode: Text rendering hint

    Returns:
        Text with a single span
    """
    upm = font["head"].unitsPerEm
    scale = font_size / upm
    hhea = font["hhea"]
    hmtx = font["hmtx"]

    if baseline is None:
        baseline = hhea.ascent * scale

    map_glyph = glyph_mapper(font)
    glyphs = []
    pen_x = x
    for char in text:
        glyph_name = map_glyph(char)
        glyphs.append(
            PositionedGlyph(
                font_id=font_id,
                glyph_id=font.getGlyphID(glyph_name),
                font_size=font_size,
                units_per_em=upm,
                glyph_ts=Identity.translate(pen_x, baseline),
            )
        )
        pen_x += hmtx[glyph_name][0] * scale

    width = pen_x - x
    span = Span(positioned_glyphs=glyphs, fill=fill)

    post = font["post"] if "post" in font else None
    thickness = DEFAULT_LINE_THICKNESS * font_size
    if post is not None and post.underlineThickness > 0:
        thickness = post.underlineThickness * scale

    if underline:
        position = post.underlinePosition if post is not None else -upm * 0.1
        span.underline = _decoration(x, baseline - position * scale, width, thickness, fill)

    if overline:
        span.overline = _decoration(x, baseline - hhea.ascent * scale, width, thickness, fill)

    if strikethrough:
        os2 = font["OS/2"] if "OS/2" in font else None
        if os2 is not None and os2.yStrikeoutSize > 0:
            position = os2.yStrikeoutPosition * scale
            strike_thickness = os2.yStrikeoutSize * scale
        else:
            position = hhea.ascent * scale / 3
            strike_thickness = thickness
        span.line_through = _decoration(x, baseline - position, width, strike_thickness, fill)

    return Text(spans=[span], id=text_id, rendering_mode=rendering_mode)
