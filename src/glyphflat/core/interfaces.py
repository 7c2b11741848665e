"""Capability interfaces the core depends on.

The painter and the flattening pipeline only talk to fonts and markup
through these abstract classes, so they can be driven by deterministic
fakes in tests. Concrete implementations live in glyphflat.io.
"""

import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod

from glyphflat.domain.glyph import BitmapDescriptor
from glyphflat.domain.tree import Fragment, Segments


class MarkupWriter(ABC):
    """Narrow interface for emitting nested markup.

    Nesting order is load-bearing: it is what realizes painter's-algorithm
    stacking in the output.
    """

    @abstractmethod
    def start_element(self, name: str) -> None:
        """Open a new element as a child of the current one."""

    @abstractmethod
    def write_attribute(self, name: str, value: str | float) -> None:
        """Set an attribute on the most recently opened element."""

    @abstractmethod
    def end_element(self) -> None:
        """Close the most recently opened element."""

    @abstractmethod
    def append(self, element: ET.Element) -> None:
        """Splice a finished element into the current one."""

    @property
    @abstractmethod
    def depth(self) -> int:
        """Number of currently open elements."""

    @abstractmethod
    def end_document(self) -> ET.Element:
        """Close all open elements and return the root."""


class FontTableSource(ABC):
    """Per-glyph access to the four glyph representations.

    Every lookup returns None when the representation is absent; absence is
    normal, not an error.
    """

    @abstractmethod
    def outline(self, font_id: int, glyph_id: int) -> Segments | None:
        """Get the glyph outline in font units (y up)."""

    @abstractmethod
    def raster(self, font_id: int, glyph_id: int) -> BitmapDescriptor | None:
        """Get the glyph bitmap from the largest strike."""

    @abstractmethod
    def embedded_vector(self, font_id: int, glyph_id: int) -> Fragment | None:
        """Get the glyph's SVG document fragment in font units (y down)."""

    @abstractmethod
    def color_layers(self, font_id: int, glyph_id: int) -> Fragment | None:
        """Get the glyph's color paint output in font units (y up)."""
