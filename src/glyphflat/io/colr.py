"""COLR paint graph driver.

ColrPaintDriver walks a font's COLR table (v0 layer records or the v1 paint
graph) and replays it as ColorPainter callbacks in painter's order. Variable
paints are read at their default values.
"""

from math import radians

from fontTools.misc.transform import Identity, Transform
from fontTools.ttLib import TTFont

from glyphflat.core.painter import ColorPainter
from glyphflat.core.transforms import from_fonttools
from glyphflat.domain.paint import (
    Brush,
    ClipBox,
    ColorStop,
    CompositeMode,
    Extend,
    LinearGradientBrush,
    RadialGradientBrush,
    SolidBrush,
    SweepGradientBrush,
)
from glyphflat.exceptions import ColorGlyphError

TRANSFORM_PAINTS = frozenset(
    {
        "PaintTransform",
        "PaintTranslate",
        "PaintScale",
        "PaintScaleAroundCenter",
        "PaintScaleUniform",
        "PaintScaleUniformAroundCenter",
        "PaintRotate",
        "PaintRotateAroundCenter",
        "PaintSkew",
        "PaintSkewAroundCenter",
    }
)

BRUSH_PAINTS = frozenset(
    {
        "PaintSolid",
        "PaintLinearGradient",
        "PaintRadialGradient",
        "PaintSweepGradient",
    }
)


def paint_format_name(paint) -> str:
    """Get a paint's format name with the variable marker removed."""
    return paint.getFormatName().replace("PaintVar", "Paint")


def paint_transform(paint) -> Transform:
    """Get the affine transform a transform paint applies to its child.

    Works for both static and variable formats, reading variable ones at
    their default values.
    """
    name = paint_format_name(paint)
    if name == "PaintTransform":
        t = paint.Transform
        return Transform(t.xx, t.yx, t.xy, t.yy, t.dx, t.dy)
    if name == "PaintTranslate":
        return Identity.translate(paint.dx, paint.dy)

    if name.endswith("AroundCenter"):
        center = (paint.centerX, paint.centerY)
        name = name[: -len("AroundCenter")]
    else:
        center = None

    if name == "PaintScale":
        transform = Identity.scale(paint.scaleX, paint.scaleY)
    elif name == "PaintScaleUniform":
        transform = Identity.scale(paint.scale)
    elif name == "PaintRotate":
        transform = Identity.rotate(radians(paint.angle))
    elif name == "PaintSkew":
        transform = Identity.skew(radians(-paint.xSkewAngle), radians(paint.ySkewAngle))
    else:
        raise ValueError(f"Not a transform paint: {paint.getFormatName()}")

    if center is None:
        return transform
    cx, cy = center
    return Identity.translate(cx, cy).transform(transform).translate(-cx, -cy)


def _extend(value: int) -> Extend:
    try:
        return Extend(value)
    except ValueError:
        return Extend.PAD


def _color_stops(color_line) -> tuple[ColorStop, ...]:
    return tuple(
        ColorStop(offset=stop.StopOffset, palette_index=stop.PaletteIndex, alpha=stop.Alpha)
        for stop in color_line.ColorStop
    )


def _linear_end_point(
    p0: tuple[float, float], p1: tuple[float, float], p2: tuple[float, float]
) -> tuple[float, float]:
    """Collapse a three-point COLR linear gradient to a two-point one.

    The end point is p0 plus the projection of p1 - p0 onto the normal of
    p2 - p0.
    """
    normal = (-(p2[1] - p0[1]), p2[0] - p0[0])
    length_sq = normal[0] ** 2 + normal[1] ** 2
    if length_sq == 0:
        return p1
    v = (p1[0] - p0[0], p1[1] - p0[1])
    factor = (v[0] * normal[0] + v[1] * normal[1]) / length_sq
    return (p0[0] + normal[0] * factor, p0[1] + normal[1] * factor)


def paint_brush(paint) -> Brush:
    """Build a Brush from a solid or gradient paint."""
    name = paint_format_name(paint)
    if name == "PaintSolid":
        return SolidBrush(palette_index=paint.PaletteIndex, alpha=paint.Alpha)

    stops = _color_stops(paint.ColorLine)
    extend = _extend(paint.ColorLine.Extend)
    if name == "PaintLinearGradient":
        p0 = (paint.x0, paint.y0)
        p1 = _linear_end_point(p0, (paint.x1, paint.y1), (paint.x2, paint.y2))
        return LinearGradientBrush(p0=p0, p1=p1, color_stops=stops, extend=extend)
    if name == "PaintRadialGradient":
        return RadialGradientBrush(
            c0=(paint.x0, paint.y0),
            r0=paint.r0,
            c1=(paint.x1, paint.y1),
            r1=paint.r1,
            color_stops=stops,
            extend=extend,
        )
    if name == "PaintSweepGradient":
        return SweepGradientBrush(
            c0=(paint.centerX, paint.centerY),
            start_angle=paint.startAngle,
            end_angle=paint.endAngle,
            color_stops=stops,
            extend=extend,
        )
    raise ValueError(f"Not a brush paint: {paint.getFormatName()}")


def _v0_layers(table) -> dict[str, list[tuple[str, int]]]:
    """Read v0 layer records that a v1 table carries alongside its paint graphs."""
    if not table.LayerRecordArray or not table.BaseGlyphRecordArray:
        return {}
    records = table.LayerRecordArray.LayerRecord
    layers = {}
    for base in table.BaseGlyphRecordArray.BaseGlyphRecord:
        first = base.FirstLayerIndex
        layers[base.BaseGlyph] = [
            (record.LayerGlyph, record.PaletteIndex)
            for record in records[first : first + base.NumLayers]
        ]
    return layers


class ColrPaintDriver:
    """Replays COLR glyphs as ColorPainter callbacks.

    Example:
        driver = ColrPaintDriver(font)
        if driver.has_color_glyph("smiley"):
            driver.paint("smiley", painter)
    """

    def __init__(self, font: TTFont) -> None:
        """Initialize the driver.

        Args:
            font: Font with a COLR table
        """
        self._font = font
        colr = font["COLR"]
        self.version: int = colr.version

        self._layers_v0: dict[str, list[tuple[str, int]]] = {}
        self._base_paints: dict[str, object] = {}
        self._clip_boxes: dict[str, ClipBox] = {}
        self._layer_list: list = []

        if self.version == 0:
            self._layers_v0 = {
                name: [(layer.name, layer.colorID) for layer in layers]
                for name, layers in colr.ColorLayers.items()
            }
        else:
            table = colr.table
            self._layers_v0 = _v0_layers(table)
            if table.BaseGlyphList is not None:
                for record in table.BaseGlyphList.BaseGlyphPaintRecord:
                    self._base_paints[record.BaseGlyph] = record.Paint
            if table.LayerList is not None:
                self._layer_list = table.LayerList.Paint
            if table.ClipList is not None:
                for glyph_name, clip in table.ClipList.clips.items():
                    self._clip_boxes[glyph_name] = ClipBox(
                        x_min=clip.xMin, y_min=clip.yMin, x_max=clip.xMax, y_max=clip.yMax
                    )

    def has_color_glyph(self, glyph_name: str) -> bool:
        """Check if a glyph has a COLR v1 paint or v0 layers."""
        return glyph_name in self._base_paints or glyph_name in self._layers_v0

    def color_glyph_names(self) -> list[str]:
        """List every glyph with a v1 paint or v0 layers."""
        names = list(self._base_paints)
        names.extend(name for name in self._layers_v0 if name not in self._base_paints)
        return names

    def clip_box(self, glyph_name: str) -> ClipBox | None:
        """Get the v1 clip box declared for a glyph."""
        return self._clip_boxes.get(glyph_name)

    def paint(self, glyph_name: str, painter: ColorPainter) -> bool:
        """Replay a color glyph into a painter.

        v1 paints take priority over v0 layers for the same glyph.

        Args:
            glyph_name: Base glyph to paint
            painter: Callback target

        Returns:
            False if the glyph has no color definition

        Raises:
            ColorGlyphError: If the paint graph is cyclic or malformed
        """
        if glyph_name in self._base_paints:
            self._paint_base_glyph(glyph_name, painter, visited=set())
            return True

        layers = self._layers_v0.get(glyph_name)
        if layers is None:
            return False
        for layer_glyph, palette_index in layers:
            painter.fill_glyph(self._glyph_id(glyph_name, layer_glyph), SolidBrush(palette_index))
        return True

    def _glyph_id(self, base_glyph: str, glyph_name: str) -> int:
        try:
            return self._font.getGlyphID(glyph_name)
        except KeyError as e:
            raise ColorGlyphError(base_glyph, f"unknown glyph '{glyph_name}'") from e

    def _paint_base_glyph(self, glyph_name: str, painter: ColorPainter, visited: set[str]) -> None:
        if glyph_name in visited:
            raise ColorGlyphError(glyph_name, "paint graph contains a cycle")
        paint = self._base_paints.get(glyph_name)
        if paint is None:
            raise ColorGlyphError(glyph_name, "no COLRv1 paint record")

        visited = visited | {glyph_name}
        clip_box = self._clip_boxes.get(glyph_name)
        if clip_box is not None:
            painter.push_clip_box(clip_box)
        self._paint(paint, glyph_name, painter, visited)
        if clip_box is not None:
            painter.pop_clip()

    def _paint(self, paint, base_glyph: str, painter: ColorPainter, visited: set[str]) -> None:
        try:
            name = paint_format_name(paint)
        except NotImplementedError as e:
            raise ColorGlyphError(base_glyph, str(e)) from e

        if name == "PaintColrLayers":
            first = paint.FirstLayerIndex
            for layer in self._layer_list[first : first + paint.NumLayers]:
                self._paint(layer, base_glyph, painter, visited)

        elif name == "PaintGlyph":
            glyph_id = self._glyph_id(base_glyph, paint.Glyph)
            child = paint.Paint
            if paint_format_name(child) in BRUSH_PAINTS:
                painter.fill_glyph(glyph_id, paint_brush(child))
            else:
                painter.push_clip_glyph(glyph_id)
                self._paint(child, base_glyph, painter, visited)
                painter.pop_clip()

        elif name in BRUSH_PAINTS:
            painter.fill(paint_brush(paint))

        elif name == "PaintColrGlyph":
            self._paint_base_glyph(paint.Glyph, painter, visited)

        elif name in TRANSFORM_PAINTS:
            painter.push_transform(from_fonttools(paint_transform(paint)))
            self._paint(paint.Paint, base_glyph, painter, visited)
            painter.pop_transform()

        elif name == "PaintComposite":
            try:
                mode = CompositeMode(paint.CompositeMode)
            except ValueError as e:
                reason = f"unknown composite mode {paint.CompositeMode}"
                raise ColorGlyphError(base_glyph, reason) from e
            painter.push_layer(CompositeMode.SRC_OVER)
            self._paint(paint.BackdropPaint, base_glyph, painter, visited)
            painter.push_layer(mode)
            self._paint(paint.SourcePaint, base_glyph, painter, visited)
            painter.pop_layer()
            painter.pop_layer()

        else:
            raise ColorGlyphError(base_glyph, f"unsupported paint format {name}")
