"""Paint-program value types.

These types describe what a color glyph program asks to be drawn: colors,
brushes, color stops and the affine transforms that the paint graph pushes.
They carry no fonttools state so that painters can be driven by hand in tests.
"""

from dataclasses import dataclass, field
from enum import IntEnum

# Palette index that selects the caller's foreground color instead of CPAL
FOREGROUND_PALETTE_INDEX = 0xFFFF


@dataclass(frozen=True)
class Color:
    """An 8-bit RGBA color."""

    red: int
    green: int
    blue: int
    alpha: int = 255

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """Parse #RRGGBB or #RRGGBBAA."""
        value = value.lstrip("#")
        red = int(value[0:2], 16)
        green = int(value[2:4], 16)
        blue = int(value[4:6], 16)
        alpha = int(value[6:8], 16) if len(value) >= 8 else 255
        return cls(red=red, green=green, blue=blue, alpha=alpha)

    @property
    def opacity(self) -> float:
        """Alpha as a 0.0-1.0 opacity."""
        return self.alpha / 255.0

    def to_rgb(self) -> str:
        """Format as an SVG rgb() color."""
        return f"rgb({self.red}, {self.green}, {self.blue})"


@dataclass(frozen=True)
class PaintTransform:
    """2D affine transform in paint-program convention.

    Maps (x, y) to (xx*x + xy*y + dx, yx*x + yy*y + dy).
    """

    xx: float = 1.0
    yx: float = 0.0
    xy: float = 0.0
    yy: float = 1.0
    dx: float = 0.0
    dy: float = 0.0

    def is_identity(self) -> bool:
        """Check if this is the identity transform."""
        return self == IDENTITY

    def map_point(self, x: float, y: float) -> tuple[float, float]:
        """Apply the transform to a point."""
        return (
            self.xx * x + self.xy * y + self.dx,
            self.yx * x + self.yy * y + self.dy,
        )


IDENTITY = PaintTransform()


class Extend(IntEnum):
    """How a gradient continues past its first and last stops."""

    PAD = 0
    REPEAT = 1
    REFLECT = 2


class CompositeMode(IntEnum):
    """COLRv1 composite modes, numbered as in the font format."""

    CLEAR = 0
    SRC = 1
    DEST = 2
    SRC_OVER = 3
    DEST_OVER = 4
    SRC_IN = 5
    DEST_IN = 6
    SRC_OUT = 7
    DEST_OUT = 8
    SRC_ATOP = 9
    DEST_ATOP = 10
    XOR = 11
    PLUS = 12
    SCREEN = 13
    OVERLAY = 14
    DARKEN = 15
    LIGHTEN = 16
    COLOR_DODGE = 17
    COLOR_BURN = 18
    HARD_LIGHT = 19
    SOFT_LIGHT = 20
    DIFFERENCE = 21
    EXCLUSION = 22
    MULTIPLY = 23
    HSL_HUE = 24
    HSL_SATURATION = 25
    HSL_COLOR = 26
    HSL_LUMINOSITY = 27


@dataclass(frozen=True)
class ColorStop:
    """A gradient stop referencing a palette entry.

    Attributes:
        offset: Position along the color line
        palette_index: CPAL entry, or FOREGROUND_PALETTE_INDEX
        alpha: Alpha multiplier applied to the palette color
    """

    offset: float
    palette_index: int
    alpha: float = 1.0


@dataclass(frozen=True)
class ClipBox:
    """Axis-aligned clip rectangle in glyph units."""

    x_min: float
    y_min: float
    x_max: float
    y_max: float


@dataclass(frozen=True)
class SolidBrush:
    """Fill with a single palette color."""

    palette_index: int
    alpha: float = 1.0


@dataclass(frozen=True)
class LinearGradientBrush:
    """Linear gradient between two points."""

    p0: tuple[float, float]
    p1: tuple[float, float]
    color_stops: tuple[ColorStop, ...] = field(default_factory=tuple)
    extend: Extend = Extend.PAD


@dataclass(frozen=True)
class RadialGradientBrush:
    """Two-circle radial gradient.

    The start circle (c0, r0) acts as the focal circle, the end circle
    (c1, r1) as the outer circle.
    """

    c0: tuple[float, float]
    r0: float
    c1: tuple[float, float]
    r1: float
    color_stops: tuple[ColorStop, ...] = field(default_factory=tuple)
    extend: Extend = Extend.PAD


@dataclass(frozen=True)
class SweepGradientBrush:
    """Angular gradient around a center. Angles are in degrees."""

    c0: tuple[float, float]
    start_angle: float
    end_angle: float
    color_stops: tuple[ColorStop, ...] = field(default_factory=tuple)
    extend: Extend = Extend.PAD


Brush = SolidBrush | LinearGradientBrush | RadialGradientBrush | SweepGradientBrush
