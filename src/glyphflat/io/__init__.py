"""Font and document I/O for glyphflat.

This module provides:

- FontDatabase: Registry of fonts opened lazily with fontTools
- FontToolsSource: Glyph representations read from font tables
- GlyphCache: Memoizing wrapper around a glyph source
- ColrPaintDriver: Walks COLR v0/v1 paint graphs into a painter
- ElementTreeWriter: MarkupWriter over xml.etree
- SvgDocumentWriter: Serializes flattened trees to SVG files
"""

from glyphflat.io.cache import GlyphCache
from glyphflat.io.colr import ColrPaintDriver
from glyphflat.io.markup import ElementTreeWriter
from glyphflat.io.reader import FontDatabase
from glyphflat.io.source import FontToolsSource
from glyphflat.io.writer import SvgDocumentWriter, get_output_path

__all__ = [
    "ColrPaintDriver",
    "ElementTreeWriter",
    "FontDatabase",
    "FontToolsSource",
    "GlyphCache",
    "SvgDocumentWriter",
    "get_output_path",
]
