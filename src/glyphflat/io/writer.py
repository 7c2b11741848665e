"""SVG document writer for flattened text.

This module serializes a flattened Group tree into an SVG file. Spliced
fragments (COLR output and SVG table documents) carry their own ids, which
repeat across glyphs, so each fragment gets a unique id prefix and every
reference inside it is rewritten to match.
"""

import base64
import copy
import re
import xml.etree.ElementTree as ET
from pathlib import Path

from fontTools.misc.transform import Identity, Transform

from glyphflat.core.interfaces import MarkupWriter
from glyphflat.core.pen import format_number, segments_to_path_data
from glyphflat.core.transforms import to_svg_matrix
from glyphflat.domain.tree import Fragment, Group, Image, Node, PaintOrder, Path, Rect
from glyphflat.exceptions import DocumentWriteError
from glyphflat.io.markup import XLINK_NS, ElementTreeWriter

URL_REFERENCE = re.compile(r"url\(#([^)]+)\)")
HREF_ATTRIBUTES = ("href", f"{{{XLINK_NS}}}href")


def namespace_ids(element: ET.Element, prefix: str) -> None:
    """Prefix every id in a subtree and rewrite the references to them.

    Only references to ids defined inside the subtree are rewritten.
    """
    ids = {node.get("id") for node in element.iter() if node.get("id")}
    if not ids:
        return

    def rewrite_url(match: re.Match[str]) -> str:
        target = match.group(1)
        return f"url(#{prefix}{target})" if target in ids else match.group(0)

    for node in element.iter():
        for name, value in list(node.attrib.items()):
            if name == "id":
                node.set(name, prefix + value)
            elif name in HREF_ATTRIBUTES and value.startswith("#") and value[1:] in ids:
                node.set(name, f"#{prefix}{value[1:]}")
            elif "url(#" in value:
                node.set(name, URL_REFERENCE.sub(rewrite_url, value))


class SvgDocumentWriter:
    """Writes flattened Group trees as standalone SVG documents.

    Example:
        writer = SvgDocumentWriter()
        writer.write(group, bbox, Path("hello.svg"))
    """

    def __init__(self, padding: float = 0.0) -> None:
        """Initialize the writer.

        Args:
            padding: Space added around the bounding box in the viewBox
        """
        self.padding = padding
        self._fragment_index = 0

    def render(self, group: Group, bbox: Rect | None = None) -> ET.Element:
        """Render a tree to an <svg> element.

        Args:
            group: Root of the flattened tree
            bbox: Extent used for the viewBox; omitted if None

        Returns:
            The <svg> root element
        """
        self._fragment_index = 0
        writer = ElementTreeWriter()
        writer.start_element("svg")
        writer.write_attribute("version", "1.1")

        if bbox is not None:
            x_min, y_min, x_max, y_max = bbox
            x_min -= self.padding
            y_min -= self.padding
            width = x_max - x_min + self.padding
            height = y_max - y_min + self.padding
            writer.write_attribute(
                "viewBox",
                " ".join(format_number(v) for v in (x_min, y_min, width, height)),
            )
            writer.write_attribute("width", width)
            writer.write_attribute("height", height)

        self._write_node(writer, group)
        return writer.end_document()

    def to_string(self, group: Group, bbox: Rect | None = None) -> str:
        """Render a tree to SVG markup."""
        return ET.tostring(self.render(group, bbox), encoding="unicode")

    def write(self, group: Group, bbox: Rect | None, output_path: Path) -> None:
        """Render a tree and save it.

        Raises:
            DocumentWriteError: If the file cannot be written
        """
        tree = ET.ElementTree(self.render(group, bbox))
        try:
            tree.write(str(output_path), encoding="utf-8", xml_declaration=True)
        except OSError as e:
            raise DocumentWriteError(str(output_path), str(e)) from e

    def _write_node(self, writer: MarkupWriter, node: Node) -> None:
        if isinstance(node, Group):
            self._write_group(writer, node)
        elif isinstance(node, Path):
            self._write_path(writer, node)
        elif isinstance(node, Image):
            self._write_image(writer, node)
        elif isinstance(node, Fragment):
            self._write_fragment(writer, node)

    def _write_group(self, writer: MarkupWriter, group: Group) -> None:
        writer.start_element("g")
        if group.id:
            writer.write_attribute("id", group.id)
        self._write_transform(writer, group.transform)
        for child in group.children:
            self._write_node(writer, child)
        writer.end_element()

    def _write_path(self, writer: MarkupWriter, path: Path) -> None:
        writer.start_element("path")
        if path.id:
            writer.write_attribute("id", path.id)
        self._write_transform(writer, path.transform)

        if path.fill is None:
            writer.write_attribute("fill", "none")
        else:
            writer.write_attribute("fill", path.fill.color.to_rgb())
            if path.fill.opacity != 1.0:
                writer.write_attribute("fill-opacity", path.fill.opacity)

        if path.stroke is not None:
            writer.write_attribute("stroke", path.stroke.color.to_rgb())
            writer.write_attribute("stroke-width", path.stroke.width)
            if path.stroke.opacity != 1.0:
                writer.write_attribute("stroke-opacity", path.stroke.opacity)

        if path.paint_order is PaintOrder.STROKE_AND_FILL:
            writer.write_attribute("paint-order", path.paint_order.value)
        writer.write_attribute("shape-rendering", path.rendering_mode.value)
        if not path.visible:
            writer.write_attribute("visibility", "hidden")

        writer.write_attribute("d", segments_to_path_data(path.segments))
        writer.end_element()

    def _write_image(self, writer: MarkupWriter, image: Image) -> None:
        writer.start_element("image")
        if image.id:
            writer.write_attribute("id", image.id)
        writer.write_attribute("width", image.width)
        writer.write_attribute("height", image.height)
        encoded = base64.b64encode(image.data).decode("ascii")
        writer.write_attribute("href", f"data:image/{image.kind};base64,{encoded}")
        writer.end_element()

    def _write_fragment(self, writer: MarkupWriter, fragment: Fragment) -> None:
        self._fragment_index += 1
        element = copy.deepcopy(fragment.element)
        namespace_ids(element, f"g{self._fragment_index}-")
        writer.append(element)

    def _write_transform(self, writer: MarkupWriter, transform: Transform) -> None:
        if transform == Identity:
            return
        writer.write_attribute("transform", to_svg_matrix(transform))


def get_output_path(font_path: Path, suffix: str = ".svg") -> Path:
    """Generate a default output path next to the font.

    Converts: NotoColorEmoji.ttf -> NotoColorEmoji-flat.svg
    """
    return font_path.parent / f"{font_path.stem}-flat{suffix}"
