"""Conversions and composition for paint-program transforms.

PaintTransform is the value type the paint program works with; fontTools'
Transform does the arithmetic. Both use the same six positional
coefficients, so conversion is a straight copy.
"""

from fontTools.misc.transform import Transform

from glyphflat.core.pen import format_number
from glyphflat.domain.paint import IDENTITY, PaintTransform
from glyphflat.utils.logging import get_diagnostics


def to_fonttools(transform: PaintTransform) -> Transform:
    """Convert a PaintTransform to a fontTools Transform."""
    return Transform(
        transform.xx,
        transform.yx,
        transform.xy,
        transform.yy,
        transform.dx,
        transform.dy,
    )


def from_fonttools(transform: Transform) -> PaintTransform:
    """Convert a fontTools Transform to a PaintTransform."""
    xx, yx, xy, yy, dx, dy = transform
    return PaintTransform(xx=xx, yx=yx, xy=xy, yy=yy, dx=dx, dy=dy)


def compose(outer: PaintTransform, inner: PaintTransform) -> PaintTransform:
    """Return outer * inner: points go through inner first, then outer."""
    return from_fonttools(to_fonttools(outer).transform(to_fonttools(inner)))


def invert(transform: PaintTransform) -> PaintTransform | None:
    """Invert a transform, or None if it is singular."""
    try:
        return from_fonttools(to_fonttools(transform).inverse())
    except ZeroDivisionError:
        return None


def gradient_space_delta(outline: PaintTransform, paint: PaintTransform) -> PaintTransform:
    """Map gradient coordinates from paint space into outline space.

    The filled path is written once with the outline transform, but gradient
    coordinates are authored in the paint space active at fill time. The
    gradientTransform therefore needs outline^-1 * paint.

    Args:
        outline: Transform recorded when the clip outline was drawn
        paint: Transform active when the fill was issued

    Returns:
        The delta transform, or the identity if outline is singular
    """
    inverse = invert(outline)
    if inverse is None:
        get_diagnostics().singular_transform()
        return IDENTITY
    return compose(inverse, paint)


def to_svg_matrix(transform: PaintTransform | Transform) -> str:
    """Format a transform as an SVG matrix() value."""
    if isinstance(transform, PaintTransform):
        transform = to_fonttools(transform)
    return "matrix({})".format(" ".join(format_number(v) for v in transform))
