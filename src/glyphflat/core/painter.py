"""Paint command interpreter for color glyphs.

A color glyph is a stack-based paint program: transforms, clips and layers
are pushed and popped around fill operations. GlyphPainter consumes that
callback stream and re-emits it as nested SVG markup. Output order is
painter's order, so later fills draw over earlier ones.

Key components:
- ColorPainter: The callback protocol a paint driver calls into
- OutlineProvider: Source of unscaled glyph outlines for clip paths
- GlyphPainter: ColorPainter that writes SVG through a MarkupWriter
"""

from abc import ABC, abstractmethod

from fontTools.pens.basePen import AbstractPen

from glyphflat.core.interfaces import MarkupWriter
from glyphflat.core.palette import PaletteResolver
from glyphflat.core.pen import PathBuffer, PathRecorder
from glyphflat.core.transforms import (
    compose,
    gradient_space_delta,
    to_fonttools,
    to_svg_matrix,
)
from glyphflat.domain.paint import (
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
from glyphflat.domain.tree import Rect, transform_rect, union_rects
from glyphflat.utils.logging import get_diagnostics

BLEND_MODES: dict[CompositeMode, str] = {
    CompositeMode.SRC_OVER: "normal",
    CompositeMode.SCREEN: "screen",
    CompositeMode.OVERLAY: "overlay",
    CompositeMode.DARKEN: "darken",
    CompositeMode.LIGHTEN: "lighten",
    CompositeMode.COLOR_DODGE: "color-dodge",
    CompositeMode.COLOR_BURN: "color-burn",
    CompositeMode.HARD_LIGHT: "hard-light",
    CompositeMode.SOFT_LIGHT: "soft-light",
    CompositeMode.DIFFERENCE: "difference",
    CompositeMode.EXCLUSION: "exclusion",
    CompositeMode.MULTIPLY: "multiply",
    CompositeMode.HSL_HUE: "hue",
    CompositeMode.HSL_SATURATION: "saturation",
    CompositeMode.HSL_COLOR: "color",
    CompositeMode.HSL_LUMINOSITY: "luminosity",
}

SPREAD_METHODS: dict[Extend, str] = {
    Extend.PAD: "pad",
    Extend.REPEAT: "repeat",
    Extend.REFLECT: "reflect",
}


class ColorPainter(ABC):
    """Callbacks issued by a color glyph paint driver.

    Calls arrive in painter's order. Every push is normally followed by the
    matching pop, but implementations must tolerate extra pops.
    """

    @abstractmethod
    def push_transform(self, transform: PaintTransform) -> None:
        """Apply a transform to everything painted until pop_transform."""

    @abstractmethod
    def pop_transform(self) -> None:
        """Restore the transform active before the last push_transform."""

    @abstractmethod
    def push_clip_glyph(self, glyph_id: int) -> None:
        """Clip subsequent fills to a glyph outline."""

    @abstractmethod
    def push_clip_box(self, clip_box: ClipBox) -> None:
        """Clip subsequent fills to a rectangle."""

    @abstractmethod
    def pop_clip(self) -> None:
        """Close the most recent clip."""

    @abstractmethod
    def fill(self, brush: Brush) -> None:
        """Fill the current clip region with a brush."""

    @abstractmethod
    def push_layer(self, mode: CompositeMode) -> None:
        """Start a compositing layer blended with the given mode."""

    @abstractmethod
    def pop_layer(self) -> None:
        """Close the most recent compositing layer."""

    def fill_glyph(
        self,
        glyph_id: int,
        brush: Brush,
        brush_transform: PaintTransform | None = None,
    ) -> None:
        """Fill a glyph outline with a brush.

        Args:
            glyph_id: Glyph whose outline bounds the fill
            brush: Brush to fill with
            brush_transform: Transform applied to the brush only
        """
        self.push_clip_glyph(glyph_id)
        if brush_transform is not None:
            self.push_transform(brush_transform)
        self.fill(brush)
        if brush_transform is not None:
            self.pop_transform()
        self.pop_clip()


class OutlineProvider(ABC):
    """Source of glyph outlines in font units."""

    @abstractmethod
    def draw_outline(self, glyph_id: int, pen: AbstractPen) -> bool:
        """Draw a glyph's unscaled outline into a pen.

        Returns:
            False if the glyph has no outline
        """


class GlyphPainter(ColorPainter):
    """Translates paint callbacks into nested SVG markup.

    One painter translates one glyph: gradient and clip ids start at 1 and
    are only unique within that glyph. Clip groups and blend layers share a
    single scope stack; closing a scope when none is open does nothing.

    Example:
        writer = ElementTreeWriter()
        writer.start_element("g")
        painter = GlyphPainter(writer, outlines, palette)
        driver.paint("A", painter)
        root = writer.end_document()
    """

    def __init__(
        self,
        writer: MarkupWriter,
        outlines: OutlineProvider,
        palette: PaletteResolver,
    ) -> None:
        """Initialize the painter.

        Args:
            writer: Destination for emitted markup
            outlines: Source of clip glyph outlines
            palette: Resolver for palette indices
        """
        self.writer = writer
        self.outlines = outlines
        self.palette = palette
        self.path_buffer = PathBuffer()
        self.transform: PaintTransform = IDENTITY
        self.outline_transform: PaintTransform = IDENTITY
        self.transforms_stack: list[PaintTransform] = []
        self.gradient_index = 1
        self.clip_path_index = 1
        self._scopes: list[int] = []
        self._bounds: Rect | None = None

    @property
    def bounds(self) -> Rect | None:
        """Approximate extent of everything filled so far, in glyph units."""
        return self._bounds

    @property
    def scope_depth(self) -> int:
        """Number of open clip and layer groups."""
        return len(self._scopes)

    # Transforms

    def push_transform(self, transform: PaintTransform) -> None:
        self.transforms_stack.append(self.transform)
        self.transform = compose(self.transform, transform)

    def pop_transform(self) -> None:
        if self.transforms_stack:
            self.transform = self.transforms_stack.pop()

    # Scopes

    def _open_scope(self) -> None:
        self.writer.start_element("g")
        self._scopes.append(self.writer.depth)

    def _close_scope(self) -> None:
        if not self._scopes:
            return
        self._scopes.pop()
        self.writer.end_element()

    # Clips

    def push_clip_glyph(self, glyph_id: int) -> None:
        self.path_buffer.clear()
        pen = PathRecorder(self.path_buffer)
        if not self.outlines.draw_outline(glyph_id, pen) or self.path_buffer.is_empty():
            # Keep pop_clip paired; fills inside draw nothing.
            self.path_buffer.clear()
            self._open_scope()
            return
        pen.finish()

        self.outline_transform = self.transform
        self._clip_with_path(self.path_buffer.value, self.outline_transform)

    def push_clip_box(self, clip_box: ClipBox) -> None:
        x_min, y_min = clip_box.x_min, clip_box.y_min
        x_max, y_max = clip_box.x_max, clip_box.y_max
        buffer = PathBuffer()
        buffer.push("M", (x_min, y_min))
        buffer.push("L", (x_max, y_min))
        buffer.push("L", (x_max, y_max))
        buffer.push("L", (x_min, y_max))
        buffer.push("Z")
        buffer.finish()
        # Boxes are placed by the current transform, not the last clip outline's.
        self._clip_with_path(buffer.value, self.transform)

    def pop_clip(self) -> None:
        self._close_scope()

    def _clip_with_path(self, path_data: str, transform: PaintTransform) -> None:
        clip_id = f"cp{self.clip_path_index}"
        self.clip_path_index += 1

        self.writer.start_element("clipPath")
        self.writer.write_attribute("id", clip_id)
        self.writer.start_element("path")
        self._write_transform("transform", transform)
        self.writer.write_attribute("d", path_data)
        self.writer.end_element()
        self.writer.end_element()

        self._open_scope()
        self.writer.write_attribute("clip-path", f"url(#{clip_id})")

    # Layers

    def push_layer(self, mode: CompositeMode) -> None:
        blend_mode = BLEND_MODES.get(mode)
        if blend_mode is None:
            name = mode.name if isinstance(mode, CompositeMode) else str(mode)
            get_diagnostics().blend_mode_unsupported(name)
            blend_mode = "normal"

        self._open_scope()
        self.writer.write_attribute("style", f"mix-blend-mode: {blend_mode}; isolation: isolate")

    def pop_layer(self) -> None:
        self._close_scope()

    # Fills

    def fill(self, brush: Brush) -> None:
        if isinstance(brush, SweepGradientBrush):
            get_diagnostics().sweep_gradient_unsupported()
            return

        if self.path_buffer.is_empty():
            return

        if isinstance(brush, SolidBrush):
            color = self.palette.resolve(brush.palette_index, brush.alpha)
            if color is None:
                get_diagnostics().palette_unresolved(brush.palette_index)
                return
            self._paint_solid(color)
        elif isinstance(brush, LinearGradientBrush):
            self._paint_linear_gradient(brush)
        elif isinstance(brush, RadialGradientBrush):
            self._paint_radial_gradient(brush)

    def _paint_solid(self, color: Color) -> None:
        self.writer.start_element("path")
        self.writer.write_attribute("fill", color.to_rgb())
        self.writer.write_attribute("fill-opacity", color.opacity)
        self._write_outline_path()
        self.writer.end_element()

    def _paint_linear_gradient(self, brush: LinearGradientBrush) -> None:
        stops = self._resolve_stops(brush.color_stops)
        if stops is None:
            return

        gradient_id = f"lg{self.gradient_index}"
        self.gradient_index += 1

        self.writer.start_element("linearGradient")
        self.writer.write_attribute("id", gradient_id)
        self.writer.write_attribute("x1", brush.p0[0])
        self.writer.write_attribute("y1", brush.p0[1])
        self.writer.write_attribute("x2", brush.p1[0])
        self.writer.write_attribute("y2", brush.p1[1])
        self._write_gradient_common(brush.extend, stops)
        self.writer.end_element()

        self._write_gradient_path(gradient_id)

    def _paint_radial_gradient(self, brush: RadialGradientBrush) -> None:
        stops = self._resolve_stops(brush.color_stops)
        if stops is None:
            return

        gradient_id = f"rg{self.gradient_index}"
        self.gradient_index += 1

        self.writer.start_element("radialGradient")
        self.writer.write_attribute("id", gradient_id)
        self.writer.write_attribute("cx", brush.c1[0])
        self.writer.write_attribute("cy", brush.c1[1])
        self.writer.write_attribute("r", brush.r1)
        self.writer.write_attribute("fr", brush.r0)
        self.writer.write_attribute("fx", brush.c0[0])
        self.writer.write_attribute("fy", brush.c0[1])
        self._write_gradient_common(brush.extend, stops)
        self.writer.end_element()

        self._write_gradient_path(gradient_id)

    def _resolve_stops(
        self, color_stops: tuple[ColorStop, ...]
    ) -> list[tuple[float, Color]] | None:
        resolved = []
        for stop in color_stops:
            color = self.palette.resolve(stop.palette_index, stop.alpha)
            if color is None:
                get_diagnostics().palette_unresolved(stop.palette_index)
                return None
            resolved.append((stop.offset, color))
        return resolved

    def _write_gradient_common(self, extend: Extend, stops: list[tuple[float, Color]]) -> None:
        self.writer.write_attribute("gradientUnits", "userSpaceOnUse")
        spread_method = SPREAD_METHODS.get(extend)
        if spread_method is not None:
            self.writer.write_attribute("spreadMethod", spread_method)
        self._write_transform(
            "gradientTransform",
            gradient_space_delta(self.outline_transform, self.transform),
        )

        for offset, color in stops:
            self.writer.start_element("stop")
            self.writer.write_attribute("offset", offset)
            self.writer.write_attribute("stop-color", color.to_rgb())
            self.writer.write_attribute("stop-opacity", color.opacity)
            self.writer.end_element()

    def _write_gradient_path(self, gradient_id: str) -> None:
        self.writer.start_element("path")
        self.writer.write_attribute("fill", f"url(#{gradient_id})")
        self._write_outline_path()
        self.writer.end_element()

    def _write_outline_path(self) -> None:
        self._write_transform("transform", self.outline_transform)
        self.writer.write_attribute("d", self.path_buffer.value)

        if self.path_buffer.bounds is not None:
            bounds = transform_rect(to_fonttools(self.outline_transform), self.path_buffer.bounds)
            self._bounds = union_rects([self._bounds, bounds])

    def _write_transform(self, name: str, transform: PaintTransform) -> None:
        if transform.is_identity():
            return
        self.writer.write_attribute(name, to_svg_matrix(transform))
