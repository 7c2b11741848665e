"""Outline pen recorder producing SVG path data.

PathRecorder is a fontTools pen that writes one path command per drawing
call into a PathBuffer. The same recorder serves clip paths, plain outline
glyphs and batched multi-glyph paths.
"""

from fontTools.misc.arrayTools import updateBounds
from fontTools.pens.basePen import BasePen
from fontTools.pens.recordingPen import replayRecording

from glyphflat.domain.tree import Rect, Segments


def format_number(value: float) -> str:
    """Format a coordinate in its shortest form (10.0 -> "10")."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class PathBuffer:
    """Mutable buffer of path command tokens.

    Tokens are written with a trailing space. finish() trims the final one,
    so a finished buffer reads like "M 0 0 L 10 0 Z".
    """

    def __init__(self) -> None:
        self._data = ""
        self._bounds: Rect | None = None

    def clear(self) -> None:
        """Discard all recorded commands."""
        self._data = ""
        self._bounds = None

    def push(self, command: str, *points: tuple[float, float]) -> None:
        """Append one command with its points.

        Args:
            command: Single-letter path command
            *points: Points consumed by the command
        """
        parts = [command]
        for x, y in points:
            parts.append(format_number(x))
            parts.append(format_number(y))
            if self._bounds is None:
                self._bounds = (x, y, x, y)
            else:
                self._bounds = updateBounds(self._bounds, (x, y))
        self._data += " ".join(parts) + " "

    def finish(self) -> None:
        """Trim the trailing separator."""
        if self._data.endswith(" "):
            self._data = self._data[:-1]

    def is_empty(self) -> bool:
        """Check if no command has been recorded."""
        return not self._data

    @property
    def value(self) -> str:
        """Recorded path data."""
        return self._data

    @property
    def bounds(self) -> Rect | None:
        """Control-point bounds of everything recorded since the last clear."""
        return self._bounds

    def __str__(self) -> str:
        return self._data


class PathRecorder(BasePen):
    """Pen that records drawing calls as SVG path commands.

    Quadratic splines with implied on-curve points are split into single
    Q segments by BasePen before they reach this pen.

    Example:
        buffer = PathBuffer()
        pen = PathRecorder(buffer)
        glyph_set["A"].draw(pen)
        pen.finish()
        print(buffer.value)
    """

    def __init__(self, buffer: PathBuffer, glyphSet=None) -> None:
        super().__init__(glyphSet)
        self.buffer = buffer

    def _moveTo(self, pt):
        self.buffer.push("M", pt)

    def _lineTo(self, pt):
        self.buffer.push("L", pt)

    def _qCurveToOne(self, pt1, pt2):
        self.buffer.push("Q", pt1, pt2)

    def _curveToOne(self, pt1, pt2, pt3):
        self.buffer.push("C", pt1, pt2, pt3)

    def _closePath(self):
        self.buffer.push("Z")

    def _endPath(self):
        pass

    def finish(self) -> None:
        """Trim the trailing separator once recording is complete."""
        self.buffer.finish()


def segments_to_path_data(segments: Segments) -> str:
    """Serialize RecordingPen segments to SVG path data."""
    buffer = PathBuffer()
    pen = PathRecorder(buffer)
    replayRecording(segments, pen)
    pen.finish()
    return buffer.value
