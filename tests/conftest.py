"""Shared fixtures: small fonts built with fontTools at test time."""

from io import BytesIO

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import newTable
from fontTools.ttLib.tables import otTables as ot
from fontTools.ttLib.tables.BitmapGlyphMetrics import BigGlyphMetrics, SmallGlyphMetrics
from fontTools.ttLib.tables.C_B_D_T_ import cbdt_bitmap_classes
from fontTools.ttLib.tables.E_B_L_C_ import SbitLineMetrics, eblc_index_sub_table_1
from fontTools.ttLib.tables.E_B_L_C_ import Strike as BitmapStrike
from fontTools.ttLib.tables.sbixGlyph import Glyph as SbixGlyph
from fontTools.ttLib.tables.sbixStrike import Strike
from PIL import Image

from glyphflat.utils.logging import get_diagnostics

UPM = 1000
ASCENT = 800
DESCENT = -200
ADVANCE = 600

GLYPH_ORDER = [".notdef", "space", "A", "B", "square", "emoji", "emoji2"]
CMAP = {0x20: "space", 0x41: "A", 0x42: "B", 0x1F600: "emoji", 0x1F601: "emoji2"}

# Glyph ids, following GLYPH_ORDER
GID_A = 2
GID_B = 3
GID_SQUARE = 4
GID_EMOJI = 5
GID_EMOJI2 = 6

RED = (1.0, 0.0, 0.0, 1.0)
GREEN = (0.0, 1.0, 0.0, 1.0)
BLUE = (0.0, 0.0, 1.0, 1.0)

# CBDT bitmap metrics, in pixels
CBDT_SIZE = 16
CBDT_BEARING_X = 2
CBDT_BEARING_Y = 12

# Outline rectangles (xMin, yMin, xMax, yMax) by glyph name
RECTS = {
    ".notdef": (50, 0, 550, 700),
    "A": (100, 0, 500, 700),
    "B": (100, 0, 500, 700),
    "square": (0, 0, 1000, 1000),
    "emoji": (0, -100, 600, 700),
    "emoji2": (0, -100, 600, 700),
}


def _rect_glyph(x_min: int, y_min: int, x_max: int, y_max: int):
    pen = TTGlyphPen(None)
    pen.moveTo((x_min, y_min))
    pen.lineTo((x_min, y_max))
    pen.lineTo((x_max, y_max))
    pen.lineTo((x_max, y_min))
    pen.closePath()
    return pen.glyph()


def png_bytes(width: int = 8, height: int = 8) -> bytes:
    """Encode a solid red PNG."""
    buffer = BytesIO()
    Image.new("RGBA", (width, height), (255, 0, 0, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


def _line_metrics(size: int) -> SbitLineMetrics:
    metrics = SbitLineMetrics()
    metrics.ascender = size
    metrics.descender = -size // 4
    metrics.widthMax = size
    for name in (
        "caretSlopeNumerator",
        "caretSlopeDenominator",
        "caretOffset",
        "minOriginSB",
        "minAdvanceSB",
        "maxBeforeBL",
        "minAfterBL",
        "pad1",
        "pad2",
    ):
        setattr(metrics, name, 0)
    return metrics


def _glyph_metrics(image_format: int):
    if image_format == 17:
        metrics = SmallGlyphMetrics()
        metrics.BearingX = CBDT_BEARING_X
        metrics.BearingY = CBDT_BEARING_Y
        metrics.Advance = CBDT_SIZE
    else:
        metrics = BigGlyphMetrics()
        metrics.horiBearingX = CBDT_BEARING_X
        metrics.horiBearingY = CBDT_BEARING_Y
        metrics.horiAdvance = CBDT_SIZE
        metrics.vertBearingX = 0
        metrics.vertBearingY = 0
        metrics.vertAdvance = CBDT_SIZE
    metrics.width = metrics.height = CBDT_SIZE
    return metrics


def _setup_cbdt(font, glyphs: dict[str, tuple[int, bytes]], ppems: tuple[int, ...]) -> None:
    """Attach CBLC/CBDT tables with one format 1 index subtable per glyph."""
    cblc = newTable("CBLC")
    cblc.version = 3.0
    cblc.strikes = []
    cbdt = newTable("CBDT")
    cbdt.version = 3.0
    cbdt.strikeData = []

    names = sorted(glyphs, key=font.getGlyphID)
    for ppem in ppems:
        strike = BitmapStrike()
        size_table = strike.bitmapSizeTable
        size_table.colorRef = 0
        size_table.hori = _line_metrics(CBDT_SIZE)
        size_table.vert = _line_metrics(CBDT_SIZE)
        size_table.ppemX = size_table.ppemY = ppem
        size_table.bitDepth = 32
        size_table.flags = 1

        strike_data = {}
        for name in names:
            image_format, data = glyphs[name]
            # Built objects have no raw data to lazily decompile from.
            glyph = cbdt_bitmap_classes[image_format](None, None)
            del glyph.data
            glyph.imageData = data
            if image_format != 19:
                glyph.metrics = _glyph_metrics(image_format)
            strike_data[name] = glyph

            index = eblc_index_sub_table_1(None, None)
            index.indexFormat = 1
            index.imageFormat = image_format
            index.names = [name]
            strike.indexSubTables.append(index)

        cblc.strikes.append(strike)
        cbdt.strikeData.append(strike_data)

    font["CBLC"] = cblc
    font["CBDT"] = cbdt


def build_font(
    colr: dict | None = None,
    clip_boxes: dict | None = None,
    palettes: list | None = None,
    svg_documents: list[tuple[str, int, int]] | None = None,
    sbix_glyphs: dict[str, tuple[str, bytes]] | None = None,
    sbix_ppem: int = 160,
    cbdt_glyphs: dict[str, tuple[int, bytes]] | None = None,
    cbdt_ppems: tuple[int, ...] = (109,),
) -> bytes:
    """Build a TrueType font and return its bytes.

    Every non-space glyph is a rectangle. Optional color data is attached
    as COLR/CPAL, SVG, sbix or CBLC/CBDT tables.

    Args:
        colr: Color glyphs in fontTools.colorLib.builder.buildCOLR format
        clip_boxes: COLRv1 clip boxes by base glyph
        palettes: CPAL palettes as lists of RGBA float tuples
        svg_documents: (document, start glyph id, end glyph id) records
        sbix_glyphs: sbix (graphic type, image data) by glyph name
        sbix_ppem: Pixels per em of the sbix strike
        cbdt_glyphs: CBDT (image format, image data) by glyph name
        cbdt_ppems: Pixels per em of each CBLC strike, in table order
    """
    fb = FontBuilder(UPM, isTTF=True)
    fb.setupGlyphOrder(GLYPH_ORDER)
    fb.setupCharacterMap(CMAP)
    glyphs = {name: _rect_glyph(*rect) for name, rect in RECTS.items()}
    glyphs["space"] = TTGlyphPen(None).glyph()
    fb.setupGlyf(glyphs)
    # The left side bearing must equal xMin or glyph sets shift the outline.
    fb.setupHorizontalMetrics(
        {name: (ADVANCE, RECTS.get(name, (0,))[0]) for name in GLYPH_ORDER}
    )
    fb.setupHorizontalHeader(ascent=ASCENT, descent=DESCENT)
    fb.setupNameTable({"familyName": "Flat Test", "styleName": "Regular"})
    fb.setupOS2(
        sTypoAscender=ASCENT,
        sTypoDescender=DESCENT,
        usWinAscent=ASCENT,
        usWinDescent=-DESCENT,
        yStrikeoutSize=50,
        yStrikeoutPosition=300,
    )
    fb.setupPost(underlinePosition=-100, underlineThickness=50)

    if palettes is not None:
        fb.setupCPAL(palettes)
    if colr is not None:
        fb.setupCOLR(colr, clipBoxes=clip_boxes)

    if svg_documents is not None:
        svg = newTable("SVG ")
        svg.docList = list(svg_documents)
        fb.font["SVG "] = svg

    if sbix_glyphs is not None:
        strike = Strike(ppem=sbix_ppem)
        for name, (graphic_type, data) in sbix_glyphs.items():
            strike.glyphs[name] = SbixGlyph(
                glyphName=name, graphicType=graphic_type, imageData=data
            )
        sbix = newTable("sbix")
        sbix.strikes[sbix_ppem] = strike
        fb.font["sbix"] = sbix

    if cbdt_glyphs is not None:
        _setup_cbdt(fb.font, cbdt_glyphs, cbdt_ppems)

    buffer = BytesIO()
    fb.save(buffer)
    return buffer.getvalue()


def solid_glyph(glyph: str, palette_index: int, alpha: float = 1.0) -> dict:
    """COLRv1 PaintGlyph filled with a solid palette color."""
    return {
        "Format": ot.PaintFormat.PaintGlyph,
        "Paint": {
            "Format": ot.PaintFormat.PaintSolid,
            "PaletteIndex": palette_index,
            "Alpha": alpha,
        },
        "Glyph": glyph,
    }


def linear_gradient_glyph(glyph: str) -> dict:
    """COLRv1 PaintGlyph filled with a two-stop linear gradient."""
    return {
        "Format": ot.PaintFormat.PaintGlyph,
        "Paint": {
            "Format": ot.PaintFormat.PaintLinearGradient,
            "ColorLine": {
                "Extend": "repeat",
                "ColorStop": [
                    {"StopOffset": 0.0, "PaletteIndex": 0, "Alpha": 1.0},
                    {"StopOffset": 1.0, "PaletteIndex": 1, "Alpha": 0.5},
                ],
            },
            "x0": 0,
            "y0": 0,
            "x1": 600,
            "y1": 0,
            "x2": 0,
            "y2": 600,
        },
        "Glyph": glyph,
    }


@pytest.fixture(autouse=True)
def reset_diagnostics():
    """Give each test fresh diagnostic counters."""
    get_diagnostics().reset()
    yield
    get_diagnostics().reset()


@pytest.fixture
def outline_font_data() -> bytes:
    """Font with outlines only."""
    return build_font()


@pytest.fixture
def colr_v0_font_data() -> bytes:
    """Font whose emoji glyph has two COLRv0 layers."""
    return build_font(
        colr={"emoji": [("A", 0), ("B", 1)]},
        palettes=[[RED, GREEN, BLUE]],
    )


@pytest.fixture
def colr_v1_font_data() -> bytes:
    """Font whose emoji glyph is a clipped COLRv1 paint graph."""
    return build_font(
        colr={
            "emoji": {
                "Format": ot.PaintFormat.PaintColrLayers,
                "Layers": [
                    solid_glyph("square", 2),
                    {
                        "Format": ot.PaintFormat.PaintTranslate,
                        "Paint": linear_gradient_glyph("A"),
                        "dx": 100,
                        "dy": 0,
                    },
                ],
            },
        },
        clip_boxes={"emoji": (0, -100, 600, 700)},
        palettes=[[RED, GREEN, BLUE], [BLUE, GREEN, RED]],
    )


@pytest.fixture
def svg_font_data() -> bytes:
    """Font whose emoji glyph has an SVG table document."""
    document = (
        '<svg xmlns="http://www.w3.org/2000/svg">'
        f'<g id="glyph{GID_EMOJI}"><rect x="0" y="-700" width="600" height="800" fill="red"/></g>'
        "</svg>"
    )
    return build_font(svg_documents=[(document, GID_EMOJI, GID_EMOJI)])


@pytest.fixture
def sbix_font_data() -> bytes:
    """Font whose emoji glyph has a PNG sbix bitmap."""
    return build_font(sbix_glyphs={"emoji": ("png ", png_bytes(16, 16))})


@pytest.fixture
def cbdt_font_data() -> bytes:
    """Font whose emoji glyph has a format 17 CBDT bitmap."""
    return build_font(cbdt_glyphs={"emoji": (17, png_bytes(16, 16))})


@pytest.fixture
def make_font():
    """Factory building fonts with custom color tables."""
    return build_font


@pytest.fixture
def png_data() -> bytes:
    """A 16x16 PNG image."""
    return png_bytes(16, 16)
