"""glyphflat - Flatten color, bitmap and outline glyphs into vector trees.

glyphflat takes positioned text and resolves every glyph to the best
representation its font carries: COLR color layers, OpenType SVG documents,
sbix/CBDT bitmaps or plain outlines. The result is a single group tree that
can be written out as SVG.

Example:
    $ glyphflat NotoColorEmoji.ttf "Hi 👋" -o hello.svg
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
