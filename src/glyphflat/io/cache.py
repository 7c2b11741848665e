"""Memoizing wrapper around a FontTableSource."""

from typing import Any

from glyphflat.core.interfaces import FontTableSource
from glyphflat.domain.glyph import BitmapDescriptor
from glyphflat.domain.tree import Fragment, Segments


class GlyphCache(FontTableSource):
    """Caches glyph lookups per (font id, glyph id).

    Absent results are cached too, so a missing representation is looked up
    only once. The cache is not synchronized; give each translation its own
    instance.
    """

    def __init__(self, source: FontTableSource) -> None:
        self._source = source
        self._entries: dict[tuple[str, int, int], Any] = {}
        self.hits = 0
        self.misses = 0

    def _lookup(self, kind: str, font_id: int, glyph_id: int) -> Any:
        key = (kind, font_id, glyph_id)
        if key in self._entries:
            self.hits += 1
            return self._entries[key]

        self.misses += 1
        value = getattr(self._source, kind)(font_id, glyph_id)
        self._entries[key] = value
        return value

    def outline(self, font_id: int, glyph_id: int) -> Segments | None:
        return self._lookup("outline", font_id, glyph_id)

    def raster(self, font_id: int, glyph_id: int) -> BitmapDescriptor | None:
        return self._lookup("raster", font_id, glyph_id)

    def embedded_vector(self, font_id: int, glyph_id: int) -> Fragment | None:
        return self._lookup("embedded_vector", font_id, glyph_id)

    def color_layers(self, font_id: int, glyph_id: int) -> Fragment | None:
        return self._lookup("color_layers", font_id, glyph_id)

    def clear(self) -> None:
        """Drop all cached entries."""
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)
