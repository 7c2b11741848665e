"""Unit tests for the glyph cache."""

from glyphflat.core.interfaces import FontTableSource
from glyphflat.io.cache import GlyphCache

SEGMENTS = [("moveTo", ((0, 0),)), ("lineTo", ((1, 1),)), ("closePath", ())]


class CountingSource(FontTableSource):
    """Source that counts lookups and only has outlines."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, int, int]] = []

    def outline(self, font_id, glyph_id):
        self.calls.append(("outline", font_id, glyph_id))
        return SEGMENTS if glyph_id > 0 else None

    def raster(self, font_id, glyph_id):
        self.calls.append(("raster", font_id, glyph_id))
        return None

    def embedded_vector(self, font_id, glyph_id):
        self.calls.append(("embedded_vector", font_id, glyph_id))
        return None

    def color_layers(self, font_id, glyph_id):
        self.calls.append(("color_layers", font_id, glyph_id))
        return None


class TestGlyphCache:
    """Tests for GlyphCache."""

    def test_repeated_lookup_hits_cache(self):
        """Test the source is consulted once per key."""
        source = CountingSource()
        cache = GlyphCache(source)

        assert cache.outline(0, 1) == SEGMENTS
        assert cache.outline(0, 1) == SEGMENTS
        assert source.calls == [("outline", 0, 1)]
        assert (cache.hits, cache.misses) == (1, 1)

    def test_absent_results_cached(self):
        """Test a missing representation is looked up only once."""
        source = CountingSource()
        cache = GlyphCache(source)

        assert cache.color_layers(0, 1) is None
        assert cache.color_layers(0, 1) is None
        assert source.calls == [("color_layers", 0, 1)]

    def test_keys_include_kind_and_font(self):
        """Test different kinds and fonts are cached separately."""
        source = CountingSource()
        cache = GlyphCache(source)

        cache.outline(0, 1)
        cache.outline(1, 1)
        cache.raster(0, 1)
        cache.embedded_vector(0, 1)
        assert len(cache) == 4
        assert len(source.calls) == 4

    def test_clear(self):
        """Test clearing forces fresh lookups."""
        source = CountingSource()
        cache = GlyphCache(source)

        cache.outline(0, 1)
        cache.clear()
        cache.outline(0, 1)
        assert len(source.calls) == 2
        assert cache.misses == 1
