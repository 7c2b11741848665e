"""Streaming markup emission.

Painters emit markup through explicit start/attribute/end calls. Nesting
order is what realizes painter's-algorithm stacking in the output, so the
writer keeps an explicit stack of open elements.
"""

import xml.etree.ElementTree as ET

from glyphflat.core.interfaces import MarkupWriter
from glyphflat.core.pen import format_number
from glyphflat.exceptions import DocumentError

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)


def svg_tag(name: str) -> str:
    """Qualify a tag name with the SVG namespace."""
    return f"{{{SVG_NS}}}{name}"


def local_name(tag: str) -> str:
    """Strip the namespace from a qualified tag name."""
    return tag.rsplit("}", 1)[-1]


class ElementTreeWriter(MarkupWriter):
    """MarkupWriter that builds an xml.etree.ElementTree tree.

    Tag names are qualified with the SVG namespace. Numeric attribute values
    are written in their shortest form.

    Example:
        writer = ElementTreeWriter()
        writer.start_element("svg")
        writer.start_element("path")
        writer.write_attribute("d", "M 0 0 L 10 0 Z")
        root = writer.end_document()
    """

    def __init__(self) -> None:
        self._root: ET.Element | None = None
        self._stack: list[ET.Element] = []

    def start_element(self, name: str) -> None:
        if not self._stack:
            if self._root is not None:
                raise DocumentError("Document already has a root element")
            element = ET.Element(svg_tag(name))
            self._root = element
        else:
            element = ET.SubElement(self._stack[-1], svg_tag(name))
        self._stack.append(element)

    def write_attribute(self, name: str, value: str | float) -> None:
        if not self._stack:
            raise DocumentError(f"No open element for attribute '{name}'")
        if not isinstance(value, str):
            value = format_number(value)
        self._stack[-1].set(name, value)

    def end_element(self) -> None:
        if not self._stack:
            raise DocumentError("No open element to close")
        self._stack.pop()

    def append(self, element: ET.Element) -> None:
        if not self._stack:
            raise DocumentError("No open element to append to")
        self._stack[-1].append(element)

    @property
    def depth(self) -> int:
        return len(self._stack)

    def end_document(self) -> ET.Element:
        if self._root is None:
            raise DocumentError("Document is empty")
        self._stack.clear()
        return self._root
