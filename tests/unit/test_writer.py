"""Unit tests for the SVG document writer."""

import xml.etree.ElementTree as ET
from pathlib import Path

import pytest
from fontTools.misc.transform import Identity

from glyphflat.domain.paint import Color
from glyphflat.domain.tree import Fill, Fragment, Group, Image, PaintOrder, Stroke
from glyphflat.domain.tree import Path as PathNode
from glyphflat.exceptions import DocumentWriteError
from glyphflat.io.markup import svg_tag
from glyphflat.io.writer import SvgDocumentWriter, get_output_path, namespace_ids

SQUARE = [
    ("moveTo", ((0, 0),)),
    ("lineTo", ((10, 0),)),
    ("lineTo", ((10, 10),)),
    ("closePath", ()),
]


def colr_fragment() -> Fragment:
    """A fragment shaped like painter output, with local ids."""
    root = ET.Element(svg_tag("g"))
    clip = ET.SubElement(root, svg_tag("clipPath"), {"id": "cp1"})
    ET.SubElement(clip, svg_tag("path"), {"d": "M 0 0 L 1 1 Z"})
    group = ET.SubElement(root, svg_tag("g"), {"clip-path": "url(#cp1)"})
    ET.SubElement(group, svg_tag("linearGradient"), {"id": "lg1"})
    ET.SubElement(group, svg_tag("path"), {"fill": "url(#lg1)", "d": "M 0 0 L 1 1 Z"})
    return Fragment(element=root, bounds=(0, 0, 1, 1))


class TestNamespaceIds:
    """Tests for namespace_ids."""

    def test_ids_and_references_rewritten(self):
        """Test ids and url() references get the same prefix."""
        fragment = colr_fragment()
        namespace_ids(fragment.element, "g1-")

        ids = [e.get("id") for e in fragment.element.iter() if e.get("id")]
        assert ids == ["g1-cp1", "g1-lg1"]
        refs = [e.get("clip-path") or e.get("fill") for e in fragment.element.iter()]
        assert "url(#g1-cp1)" in refs
        assert "url(#g1-lg1)" in refs

    def test_foreign_references_untouched(self):
        """Test references to ids outside the subtree are kept."""
        root = ET.Element(svg_tag("g"))
        ET.SubElement(root, svg_tag("use"), {"href": "#elsewhere", "fill": "url(#other)"})
        ET.SubElement(root, svg_tag("rect"), {"id": "local"})
        namespace_ids(root, "p-")

        use = root[0]
        assert use.get("href") == "#elsewhere"
        assert use.get("fill") == "url(#other)"

    def test_href_rewritten(self):
        """Test href references to local ids are rewritten."""
        root = ET.Element(svg_tag("g"))
        ET.SubElement(root, svg_tag("rect"), {"id": "shape"})
        ET.SubElement(root, svg_tag("use"), {"href": "#shape"})
        namespace_ids(root, "p-")
        assert root[1].get("href") == "#p-shape"


class TestSvgDocumentWriter:
    """Tests for SvgDocumentWriter."""

    def test_view_box(self):
        """Test the viewBox covers the bounding box."""
        root = SvgDocumentWriter().render(Group(), (0, -10, 100, 20))
        assert root.tag == svg_tag("svg")
        assert root.get("viewBox") == "0 -10 100 30"
        assert root.get("width") == "100"
        assert root.get("height") == "30"

    def test_padding(self):
        """Test padding grows the viewBox on every side."""
        root = SvgDocumentWriter(padding=5).render(Group(), (0, 0, 10, 10))
        assert root.get("viewBox") == "-5 -5 20 20"

    def test_path_attributes(self):
        """Test path paint attributes are written."""
        path = PathNode.new(
            SQUARE,
            fill=Fill(color=Color(1, 2, 3), opacity=0.5),
            stroke=Stroke(color=Color(4, 5, 6), width=2),
            paint_order=PaintOrder.STROKE_AND_FILL,
            visible=False,
        )
        root = SvgDocumentWriter().render(Group(id="text", children=[path]))

        group = root.find(svg_tag("g"))
        assert group.get("id") == "text"
        element = group.find(svg_tag("path"))
        assert element.get("fill") == "rgb(1, 2, 3)"
        assert element.get("fill-opacity") == "0.5"
        assert element.get("stroke") == "rgb(4, 5, 6)"
        assert element.get("stroke-width") == "2"
        assert element.get("paint-order") == "stroke"
        assert element.get("visibility") == "hidden"
        assert element.get("shape-rendering") == "geometricPrecision"
        assert element.get("d") == "M 0 0 L 10 0 L 10 10 Z"

    def test_unfilled_path(self):
        """Test a path without fill is written with fill none."""
        root = SvgDocumentWriter().render(Group(children=[PathNode.new(SQUARE)]))
        assert root.find(f"{svg_tag('g')}/{svg_tag('path')}").get("fill") == "none"

    def test_group_transform(self):
        """Test group transforms are written as matrices."""
        group = Group(transform=Identity.translate(5, 6), children=[PathNode.new(SQUARE)])
        root = SvgDocumentWriter().render(Group(children=[group]))
        inner = root.find(svg_tag("g")).find(svg_tag("g"))
        assert inner.get("transform") == "matrix(1 0 0 1 5 6)"

    def test_image(self):
        """Test images are embedded as base64 data URLs."""
        image = Image(data=b"\x89PNG", width=16, height=8)
        root = SvgDocumentWriter().render(Group(children=[image]))
        element = root.find(f"{svg_tag('g')}/{svg_tag('image')}")
        assert element.get("href") == "data:image/png;base64,iVBORw=="
        assert (element.get("width"), element.get("height")) == ("16", "8")

    def test_fragments_get_distinct_prefixes(self):
        """Test repeated fragments do not share ids."""
        fragment = colr_fragment()
        group = Group(children=[Group(children=[fragment]), Group(children=[fragment])])
        root = SvgDocumentWriter().render(group)

        ids = [e.get("id") for e in root.iter() if e.get("id")]
        assert ids == ["g1-cp1", "g1-lg1", "g2-cp1", "g2-lg1"]
        # The source fragment is left untouched.
        assert fragment.element[0].get("id") == "cp1"

    def test_write(self, tmp_path: Path):
        """Test writing a file with an XML declaration."""
        output = tmp_path / "out.svg"
        SvgDocumentWriter().write(Group(children=[PathNode.new(SQUARE)]), (0, 0, 10, 10), output)

        content = output.read_text(encoding="utf-8")
        assert content.startswith("<?xml")
        assert "<path" in content

    def test_write_failure(self, tmp_path: Path):
        """Test unwritable paths raise DocumentWriteError."""
        output = tmp_path / "missing" / "out.svg"
        with pytest.raises(DocumentWriteError):
            SvgDocumentWriter().write(Group(), None, output)


class TestOutputPath:
    """Tests for get_output_path."""

    def test_default_name(self):
        """Test the default output sits next to the font."""
        assert get_output_path(Path("/fonts/Emoji.ttf")) == Path("/fonts/Emoji-flat.svg")


def test_to_string():
    """Test rendering to markup without a file."""
    markup = SvgDocumentWriter().to_string(Group(children=[PathNode.new(SQUARE)]), (0, 0, 10, 10))
    assert markup.startswith("<svg ")
    assert 'xmlns="http://www.w3.org/2000/svg"' in markup
    assert 'd="M 0 0 L 10 0 L 10 10 Z"' in markup
