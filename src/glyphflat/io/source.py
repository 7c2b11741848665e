"""Glyph representation lookups backed by fontTools tables.

FontTableSource is the narrow interface the flattening pipeline depends on.
FontToolsSource implements it for fonts registered in a FontDatabase:

- outline: glyf/CFF outlines via the glyph set
- raster: sbix or CBDT/CBLC PNG bitmaps from the largest strike
- embedded_vector: OpenType SVG table documents
- color_layers: COLR v0/v1 glyphs painted to SVG with the CPAL palette

Every lookup returns None when the font has no such data for the glyph.
"""

import copy
import xml.etree.ElementTree as ET
from io import BytesIO

import defusedxml.ElementTree as DefusedET
from defusedxml import DefusedXmlException
from fontTools.pens.basePen import AbstractPen
from fontTools.pens.boundsPen import BoundsPen
from fontTools.pens.recordingPen import DecomposingRecordingPen, replayRecording
from fontTools.ttLib import TTFont
from PIL import Image as PILImage

from glyphflat.config.settings import RenderConfig
from glyphflat.core.interfaces import FontTableSource
from glyphflat.core.painter import GlyphPainter, OutlineProvider
from glyphflat.core.palette import PaletteResolver
from glyphflat.domain.glyph import BitmapDescriptor
from glyphflat.domain.tree import Fragment, Segments
from glyphflat.exceptions import ColorGlyphError, UnsupportedBitmapError
from glyphflat.io.colr import ColrPaintDriver
from glyphflat.io.markup import ElementTreeWriter, svg_tag
from glyphflat.io.reader import FontDatabase
from glyphflat.utils.logging import get_diagnostics

SBIX_PNG = "png "
CBDT_PNG_FORMATS = (17, 18)


class GlyphSetOutlines(OutlineProvider):
    """OutlineProvider over a font's glyph set, decomposing components."""

    def __init__(self, font: TTFont) -> None:
        self._glyph_order = font.getGlyphOrder()
        self._glyph_set = font.getGlyphSet()

    def draw_outline(self, glyph_id: int, pen: AbstractPen) -> bool:
        if not 0 <= glyph_id < len(self._glyph_order):
            return False
        glyph_name = self._glyph_order[glyph_id]
        if glyph_name not in self._glyph_set:
            return False

        recording = DecomposingRecordingPen(self._glyph_set)
        self._glyph_set[glyph_name].draw(recording)
        if not recording.value:
            return False
        replayRecording(recording.value, pen)
        return True


class FontToolsSource(FontTableSource):
    """FontTableSource for fonts in a FontDatabase.

    Per-font helpers (paint driver, palette, parsed SVG documents) are built
    on first use and kept for the lifetime of the source.

    Example:
        source = FontToolsSource(db, RenderConfig(foreground_color="#333333"))
        fragment = source.color_layers(font_id, glyph_id)
    """

    def __init__(self, database: FontDatabase, render_config: RenderConfig | None = None) -> None:
        """Initialize the source.

        Args:
            database: Fonts to read from
            render_config: Palette and foreground color settings
        """
        self._database = database
        self._config = render_config or RenderConfig()
        self._drivers: dict[int, ColrPaintDriver] = {}
        self._palettes: dict[int, PaletteResolver] = {}
        self._outlines: dict[int, GlyphSetOutlines] = {}
        self._svg_documents: dict[tuple[int, int], ET.Element | None] = {}

    def _glyph(self, font_id: int, glyph_id: int) -> tuple[TTFont, str] | None:
        font = self._database.face(font_id)
        if font is None:
            return None
        glyph_order = font.getGlyphOrder()
        if not 0 <= glyph_id < len(glyph_order):
            return None
        return font, glyph_order[glyph_id]

    def color_glyphs(self, font_id: int) -> list[tuple[str, str]]:
        """List glyphs that resolve to something other than an outline.

        Each glyph is reported once, under the representation that wins
        during flattening (COLR, then SVG, then sbix or CBDT).

        Returns:
            (glyph name, table tag) pairs in glyph order
        """
        font = self._database.face(font_id)
        if font is None:
            return []

        kinds: dict[str, str] = {}
        glyph_order = font.getGlyphOrder()

        if "COLR" in font:
            for name in self._driver(font_id, font).color_glyph_names():
                kinds.setdefault(name, "COLR")

        if "SVG " in font:
            for _, start_glyph_id, end_glyph_id in font["SVG "].docList:
                for glyph_id in range(start_glyph_id, min(end_glyph_id, len(glyph_order) - 1) + 1):
                    kinds.setdefault(glyph_order[glyph_id], "SVG")

        if "sbix" in font:
            for strike in font["sbix"].strikes.values():
                for name, glyph in strike.glyphs.items():
                    if getattr(glyph, "imageData", None):
                        kinds.setdefault(name, "sbix")

        elif "CBDT" in font and "CBLC" in font:
            for strike in font["CBDT"].strikeData:
                for name in strike:
                    kinds.setdefault(name, "CBDT")

        position = {name: index for index, name in enumerate(glyph_order)}
        return sorted(kinds.items(), key=lambda item: position.get(item[0], len(position)))

    # Outlines

    def outline(self, font_id: int, glyph_id: int) -> Segments | None:
        found = self._glyph(font_id, glyph_id)
        if found is None:
            return None
        font, glyph_name = found

        glyph_set = font.getGlyphSet()
        if glyph_name not in glyph_set:
            return None
        pen = DecomposingRecordingPen(glyph_set)
        glyph_set[glyph_name].draw(pen)
        return pen.value or None

    # Bitmaps

    def raster(self, font_id: int, glyph_id: int) -> BitmapDescriptor | None:
        found = self._glyph(font_id, glyph_id)
        if found is None:
            return None
        font, glyph_name = found

        try:
            if "sbix" in font:
                return self._sbix_bitmap(font, glyph_name)
            if "CBDT" in font and "CBLC" in font:
                return self._cbdt_bitmap(font, glyph_name)
        except UnsupportedBitmapError as e:
            get_diagnostics().bitmap_unsupported(e.glyph_name, e.encoding)
        return None

    def _sbix_bitmap(self, font: TTFont, glyph_name: str) -> BitmapDescriptor | None:
        best = None
        for ppem, strike in font["sbix"].strikes.items():
            glyph = strike.glyphs.get(glyph_name)
            if glyph is None or not getattr(glyph, "imageData", None):
                continue
            if best is None or ppem > best[0]:
                best = (ppem, glyph)
        if best is None:
            return None

        ppem, glyph = best
        if glyph.graphicType != SBIX_PNG:
            raise UnsupportedBitmapError(glyph_name, (glyph.graphicType or "").strip())

        width, height = _png_size(glyph_name, glyph.imageData)
        return BitmapDescriptor(
            data=glyph.imageData,
            width=width,
            height=height,
            x=glyph.originOffsetX,
            y=glyph.originOffsetY,
            pixels_per_em=ppem,
            glyph_bbox=_outline_bounds(font, glyph_name),
            is_sbix=True,
        )

    def _cbdt_bitmap(self, font: TTFont, glyph_name: str) -> BitmapDescriptor | None:
        strikes = font["CBLC"].strikes
        strike_data = font["CBDT"].strikeData

        best = None
        for index, strike in enumerate(strikes):
            glyph = strike_data[index].get(glyph_name)
            if glyph is None:
                continue
            ppem = strike.bitmapSizeTable.ppemX
            if best is None or ppem > best[0]:
                best = (ppem, glyph)
        if best is None:
            return None

        ppem, glyph = best
        image_format = glyph.getFormat()
        if image_format not in CBDT_PNG_FORMATS:
            raise UnsupportedBitmapError(glyph_name, f"CBDT format {image_format}")

        metrics = glyph.metrics
        if image_format == 17:
            bearing_x, bearing_y = metrics.BearingX, metrics.BearingY
        else:
            bearing_x, bearing_y = metrics.horiBearingX, metrics.horiBearingY

        width, height = _png_size(glyph_name, glyph.imageData)
        return BitmapDescriptor(
            data=glyph.imageData,
            width=width,
            height=height,
            x=bearing_x,
            y=bearing_y - metrics.height,
            pixels_per_em=ppem,
            is_sbix=False,
        )

    # SVG documents

    def embedded_vector(self, font_id: int, glyph_id: int) -> Fragment | None:
        found = self._glyph(font_id, glyph_id)
        if found is None:
            return None
        font, _ = found
        if "SVG " not in font:
            return None

        for index, (data, start_glyph_id, end_glyph_id) in enumerate(font["SVG "].docList):
            if start_glyph_id <= glyph_id <= end_glyph_id:
                break
        else:
            return None

        root = self._svg_document(font_id, index, glyph_id, data)
        if root is None:
            return None

        fragment = ET.Element(svg_tag("g"))
        if start_glyph_id == end_glyph_id:
            for child in root:
                fragment.append(copy.deepcopy(child))
        else:
            node = _find_by_id(root, f"glyph{glyph_id}")
            if node is None:
                get_diagnostics().svg_node_missing(glyph_id)
                return None
            for defs in root.iter(svg_tag("defs")):
                fragment.append(copy.deepcopy(defs))
            fragment.append(copy.deepcopy(node))

        return Fragment(element=fragment, bounds=_advance_bounds(font, glyph_id))

    def _svg_document(
        self, font_id: int, index: int, glyph_id: int, data: str | bytes
    ) -> ET.Element | None:
        key = (font_id, index)
        if key not in self._svg_documents:
            try:
                root = DefusedET.fromstring(data)
            except (ET.ParseError, DefusedXmlException) as e:
                get_diagnostics().svg_unparsable(glyph_id, str(e))
                root = None
            self._svg_documents[key] = root
        return self._svg_documents[key]

    # Color layers

    def color_layers(self, font_id: int, glyph_id: int) -> Fragment | None:
        found = self._glyph(font_id, glyph_id)
        if found is None:
            return None
        font, glyph_name = found
        if "COLR" not in font:
            return None

        driver = self._driver(font_id, font)
        if not driver.has_color_glyph(glyph_name):
            return None

        writer = ElementTreeWriter()
        writer.start_element("g")
        painter = GlyphPainter(
            writer,
            self._outline_provider(font_id, font),
            self._palette(font_id, font),
        )
        try:
            driver.paint(glyph_name, painter)
        except ColorGlyphError as e:
            get_diagnostics().color_glyph_failed(e.glyph_name, e.reason)
            return None

        return Fragment(element=writer.end_document(), bounds=painter.bounds)

    def _driver(self, font_id: int, font: TTFont) -> ColrPaintDriver:
        if font_id not in self._drivers:
            self._drivers[font_id] = ColrPaintDriver(font)
        return self._drivers[font_id]

    def _palette(self, font_id: int, font: TTFont) -> PaletteResolver:
        if font_id not in self._palettes:
            self._palettes[font_id] = PaletteResolver.from_font(
                font, self._config.palette_index, self._config.foreground()
            )
        return self._palettes[font_id]

    def _outline_provider(self, font_id: int, font: TTFont) -> GlyphSetOutlines:
        if font_id not in self._outlines:
            self._outlines[font_id] = GlyphSetOutlines(font)
        return self._outlines[font_id]


def _png_size(glyph_name: str, data: bytes) -> tuple[int, int]:
    try:
        with PILImage.open(BytesIO(data)) as image:
            if image.format != "PNG":
                raise UnsupportedBitmapError(glyph_name, (image.format or "unknown").lower())
            return image.size
    except OSError as e:
        raise UnsupportedBitmapError(glyph_name, "unreadable png") from e


def _outline_bounds(font: TTFont, glyph_name: str) -> tuple[float, float, float, float] | None:
    glyph_set = font.getGlyphSet()
    if glyph_name not in glyph_set:
        return None
    pen = BoundsPen(glyph_set)
    glyph_set[glyph_name].draw(pen)
    return pen.bounds


def _advance_bounds(font: TTFont, glyph_id: int) -> tuple[float, float, float, float] | None:
    if "hmtx" not in font or "hhea" not in font:
        return None
    advance, _ = font["hmtx"][font.getGlyphName(glyph_id)]
    hhea = font["hhea"]
    if advance <= 0:
        return None
    return (0.0, float(-hhea.ascent), float(advance), float(-hhea.descent))


def _find_by_id(root: ET.Element, element_id: str) -> ET.Element | None:
    for element in root.iter():
        if element.get("id") == element_id:
            return element
    return None
