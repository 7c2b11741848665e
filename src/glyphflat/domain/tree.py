"""Vector document tree produced by flattening.

The tree is intentionally small: groups carry transforms, paths carry pen
segments and paint attributes, images carry encoded bitmaps, and fragments
carry ready-made SVG markup (color glyph output or embedded SVG documents).

Bounding boxes are (x_min, y_min, x_max, y_max) tuples expressed in the
coordinate system of the node's parent, following fonttools' rect helpers.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from fontTools.misc.arrayTools import calcBounds, unionRect
from fontTools.misc.transform import Identity, Transform
from fontTools.pens.boundsPen import BoundsPen
from fontTools.pens.recordingPen import replayRecording

from glyphflat.domain.paint import Color

Rect = tuple[float, float, float, float]
Segments = list[tuple[str, tuple[Any, ...]]]


def transform_rect(transform: Transform, rect: Rect) -> Rect:
    """Transform a rectangle and return the bounds of its corners."""
    x_min, y_min, x_max, y_max = rect
    corners = transform.transformPoints(
        [(x_min, y_min), (x_max, y_min), (x_max, y_max), (x_min, y_max)]
    )
    return calcBounds(corners)


def union_rects(rects: list[Rect | None]) -> Rect | None:
    """Union all non-empty rectangles, or None if there are none."""
    result: Rect | None = None
    for rect in rects:
        if rect is None:
            continue
        result = rect if result is None else unionRect(result, rect)
    return result


def is_non_zero_rect(rect: Rect | None) -> bool:
    """Check that a rectangle exists and has positive width and height."""
    if rect is None:
        return False
    x_min, y_min, x_max, y_max = rect
    return x_max > x_min and y_max > y_min


class PaintOrder(str, Enum):
    """Order in which fill and stroke are painted."""

    FILL_AND_STROKE = "normal"
    STROKE_AND_FILL = "stroke"


class ShapeRendering(str, Enum):
    """SVG shape-rendering hint."""

    OPTIMIZE_SPEED = "optimizeSpeed"
    CRISP_EDGES = "crispEdges"
    GEOMETRIC_PRECISION = "geometricPrecision"


@dataclass(frozen=True)
class Fill:
    """Solid fill paint."""

    color: Color
    opacity: float = 1.0


@dataclass(frozen=True)
class Stroke:
    """Solid stroke paint."""

    color: Color
    width: float = 1.0
    opacity: float = 1.0


@dataclass
class Path:
    """A filled and/or stroked path.

    Attributes:
        segments: RecordingPen-style drawing commands
        fill: Fill paint, or None for no fill
        stroke: Stroke paint, or None for no stroke
        paint_order: Fill/stroke order
        rendering_mode: shape-rendering hint
        visible: False for visibility="hidden"
        id: Element id (may be empty)
        transform: Transform applied to the segments
    """

    segments: Segments
    fill: Fill | None = None
    stroke: Stroke | None = None
    paint_order: PaintOrder = PaintOrder.FILL_AND_STROKE
    rendering_mode: ShapeRendering = ShapeRendering.GEOMETRIC_PRECISION
    visible: bool = True
    id: str = ""
    transform: Transform = Identity

    @classmethod
    def new(cls, segments: Segments, **kwargs: Any) -> "Path | None":
        """Create a path, or None if there is nothing to draw."""
        if not any(op == "moveTo" for op, _ in segments):
            return None
        return cls(segments=segments, **kwargs)

    def data_bounds(self) -> Rect | None:
        """Bounds of the segments before the path transform."""
        pen = BoundsPen(None)
        replayRecording(self.segments, pen)
        return pen.bounds

    @property
    def bounding_box(self) -> Rect | None:
        """Fill bounds in parent coordinates."""
        bounds = self.data_bounds()
        if bounds is None:
            return None
        return transform_rect(self.transform, bounds)

    @property
    def stroke_bounding_box(self) -> Rect | None:
        """Bounds including half the stroke width on every side."""
        bounds = self.data_bounds()
        if bounds is None:
            return None
        if self.stroke is not None:
            half = self.stroke.width / 2
            x_min, y_min, x_max, y_max = bounds
            bounds = (x_min - half, y_min - half, x_max + half, y_max + half)
        return transform_rect(self.transform, bounds)


@dataclass
class Image:
    """An encoded raster image drawn at (0, 0) with its pixel size."""

    data: bytes
    width: float
    height: float
    kind: str = "png"
    id: str = ""

    @property
    def bounding_box(self) -> Rect | None:
        if self.width <= 0 or self.height <= 0:
            return None
        return (0.0, 0.0, float(self.width), float(self.height))

    @property
    def stroke_bounding_box(self) -> Rect | None:
        return self.bounding_box


@dataclass
class Fragment:
    """A ready-made markup subtree spliced into the document.

    Attributes:
        element: Root element of the subtree
        bounds: Known extent of the subtree, if any
    """

    element: ET.Element
    bounds: Rect | None = None

    @property
    def bounding_box(self) -> Rect | None:
        return self.bounds

    @property
    def stroke_bounding_box(self) -> Rect | None:
        return self.bounds


@dataclass
class Group:
    """A container node with its own transform.

    Bounding boxes are cached on the group and must be refreshed with
    calculate_bounding_boxes() after children change.
    """

    id: str = ""
    transform: Transform = Identity
    children: list["Node"] = field(default_factory=list)
    bounding_box: Rect | None = None
    stroke_bounding_box: Rect | None = None

    def calculate_bounding_boxes(self) -> None:
        """Recompute bounding boxes bottom-up."""
        for child in self.children:
            if isinstance(child, Group):
                child.calculate_bounding_boxes()

        fill_bounds = union_rects([child.bounding_box for child in self.children])
        stroke_bounds = union_rects([child.stroke_bounding_box for child in self.children])

        self.bounding_box = (
            transform_rect(self.transform, fill_bounds) if fill_bounds is not None else None
        )
        self.stroke_bounding_box = (
            transform_rect(self.transform, stroke_bounds) if stroke_bounds is not None else None
        )

    def has_children(self) -> bool:
        """Check if the group contains anything."""
        return len(self.children) > 0


Node = Group | Path | Image | Fragment
