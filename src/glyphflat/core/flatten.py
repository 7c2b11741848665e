"""Glyph resolution and text flattening.

Each positioned glyph resolves to exactly one representation, tried in
priority order: color layers, embedded SVG, bitmap, then outline. Runs of
consecutive outline glyphs are merged into a single path per run, so the
common all-outline span produces one path node.

Key components:
- resolve_glyph: Pick the representation of one glyph
- flatten: Turn a laid-out Text into a single Group tree
- push_outline_paths: Flush a span's outline batch into a Path node
- resolve_rendering_mode: Map the text rendering hint to a shape hint
"""

import logging
import time
from dataclasses import replace

from fontTools.misc.transform import Transform
from fontTools.pens.recordingPen import RecordingPen, replayRecording
from fontTools.pens.transformPen import TransformPen

from glyphflat.core.interfaces import FontTableSource
from glyphflat.domain.glyph import (
    BitmapDescriptor,
    ColorLayers,
    EmbeddedVector,
    GlyphArtifact,
    PositionedGlyph,
    Raster,
    ScalableOutline,
)
from glyphflat.domain.text import Span, Text
from glyphflat.domain.tree import (
    Group,
    Image,
    Node,
    Path,
    Rect,
    Segments,
    ShapeRendering,
    is_non_zero_rect,
)
from glyphflat.utils.logging import FlattenStats

logger = logging.getLogger(__name__)


def resolve_rendering_mode(text: Text) -> ShapeRendering:
    """Get the shape-rendering hint for paths generated from text."""
    return text.rendering_mode.to_shape_rendering()


def transform_segments(segments: Segments, transform: Transform) -> Segments:
    """Apply a transform to recorded pen segments."""
    recording = RecordingPen()
    replayRecording(segments, TransformPen(recording, transform))
    return recording.value


def push_outline_paths(
    span: Span,
    batch: Segments,
    children: list[Node],
    rendering_mode: ShapeRendering,
) -> bool:
    """Flush the span's outline batch into a single Path.

    The batch is cleared whether or not a path was produced.

    Args:
        span: Span whose paint attributes the path takes
        batch: Accumulated outline segments, in user space
        children: Node list to append to
        rendering_mode: shape-rendering hint for the path

    Returns:
        True if a path node was appended
    """
    segments = list(batch)
    batch.clear()

    path = Path.new(
        segments,
        fill=span.fill,
        stroke=span.stroke,
        paint_order=span.paint_order,
        rendering_mode=rendering_mode,
        visible=span.visible,
    )
    if path is None:
        return False

    children.append(path)
    return True


def _wrap(node: Node, transform: Transform) -> Group:
    group = Group(transform=transform, children=[node])
    group.calculate_bounding_boxes()
    return group


def resolve_glyph(glyph: PositionedGlyph, source: FontTableSource) -> GlyphArtifact:
    """Pick the representation a glyph is drawn from.

    Color layers win over an embedded SVG document, which wins over a
    bitmap. The outline is the fallback and may itself be absent.
    """
    fragment = source.color_layers(glyph.font_id, glyph.glyph_id)
    if fragment is not None:
        return ColorLayers(fragment)

    fragment = source.embedded_vector(glyph.font_id, glyph.glyph_id)
    if fragment is not None:
        return EmbeddedVector(fragment)

    bitmap = source.raster(glyph.font_id, glyph.glyph_id)
    if bitmap is not None:
        return Raster(bitmap)

    return ScalableOutline(source.outline(glyph.font_id, glyph.glyph_id))


def _raster_group(glyph: PositionedGlyph, bitmap: BitmapDescriptor) -> Group:
    if bitmap.is_sbix:
        x_min, y_min = 0.0, 0.0
        if bitmap.glyph_bbox is not None:
            x_min, y_min = bitmap.glyph_bbox[0], bitmap.glyph_bbox[1]
        transform = glyph.sbix_transform(
            bitmap.x, bitmap.y, x_min, y_min, bitmap.pixels_per_em, bitmap.height
        )
    else:
        transform = glyph.cbdt_transform(bitmap.x, bitmap.y, bitmap.pixels_per_em, bitmap.height)

    image = Image(data=bitmap.data, width=bitmap.width, height=bitmap.height)
    return _wrap(image, transform)


def _place(glyph: PositionedGlyph, artifact: GlyphArtifact) -> Group:
    """Wrap a non-outline artifact in its placement transform."""
    if isinstance(artifact, ColorLayers):
        return _wrap(artifact.fragment, glyph.colr_transform())
    if isinstance(artifact, EmbeddedVector):
        return _wrap(artifact.fragment, glyph.svg_transform())
    return _raster_group(glyph, artifact.bitmap)


def _count(stats: FlattenStats, artifact: GlyphArtifact) -> None:
    if isinstance(artifact, ColorLayers):
        stats.color_layer_count += 1
    elif isinstance(artifact, EmbeddedVector):
        stats.embedded_vector_count += 1
    elif isinstance(artifact, Raster):
        stats.raster_count += 1
    elif artifact.segments is not None:
        stats.outline_count += 1
    else:
        stats.unresolved_count += 1


def flatten(
    text: Text,
    cache: FontTableSource,
    stats: FlattenStats | None = None,
) -> tuple[Group, Rect] | None:
    """Flatten laid-out text into a group of paths, images and fragments.

    Per span, overline and underline come first, then the glyphs in order,
    then the line-through. A glyph that resolves to anything other than an
    outline first flushes the pending outline batch, which keeps painter's
    order intact.

    Args:
        text: Laid-out text
        cache: Glyph lookups, normally a GlyphCache owned by this call
        stats: Optional counters updated with per-representation totals

    Returns:
        (group, stroke bounding box), or None if nothing visible was produced
    """
    if stats is not None:
        stats.start_time = time.time()

    rendering_mode = resolve_rendering_mode(text)
    children: list[Node] = []
    path_count = 0

    for span in text.spans:
        for decoration in (span.overline, span.underline):
            if decoration is not None:
                children.append(replace(decoration, rendering_mode=rendering_mode))

        batch: Segments = []

        for glyph in span.positioned_glyphs:
            artifact = resolve_glyph(glyph, cache)
            if stats is not None:
                _count(stats, artifact)

            if not isinstance(artifact, ScalableOutline):
                path_count += push_outline_paths(span, batch, children, rendering_mode)
                children.append(_place(glyph, artifact))
            elif artifact.segments is not None:
                batch.extend(transform_segments(artifact.segments, glyph.outline_transform()))
            else:
                logger.debug(
                    "Glyph %d of font %d has no representation", glyph.glyph_id, glyph.font_id
                )
                if stats is not None:
                    stats.unresolved.append((glyph.font_id, glyph.glyph_id))

        path_count += push_outline_paths(span, batch, children, rendering_mode)

        if span.line_through is not None:
            children.append(replace(span.line_through, rendering_mode=rendering_mode))

    group = Group(id=text.id, children=children)
    group.calculate_bounding_boxes()

    if stats is not None:
        stats.path_count += path_count
        stats.end_time = time.time()

    if not is_non_zero_rect(group.stroke_bounding_box):
        return None
    return group, group.stroke_bounding_box
