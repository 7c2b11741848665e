"""Exception hierarchy for glyphflat."""


class GlyphFlatError(Exception):
    """Base exception for all glyphflat errors."""

    pass


class FontError(GlyphFlatError):
    """Errors related to font loading."""

    pass


class FontLoadError(FontError):
    """Error loading a font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load font '{path}': {reason}")


class FontFormatError(FontError):
    """Unsupported or invalid font format."""

    def __init__(self, path: str, details: str) -> None:
        self.path = path
        self.details = details
        super().__init__(f"Invalid font format '{path}': {details}")


class GlyphError(GlyphFlatError):
    """Errors related to resolving a single glyph."""

    pass


class ColorGlyphError(GlyphError):
    """A color glyph program could not be interpreted."""

    def __init__(self, glyph_name: str, reason: str) -> None:
        self.glyph_name = glyph_name
        self.reason = reason
        super().__init__(f"Cannot paint color glyph '{glyph_name}': {reason}")


class UnsupportedBitmapError(GlyphError):
    """Bitmap glyph uses an encoding we cannot embed."""

    def __init__(self, glyph_name: str, encoding: str) -> None:
        self.glyph_name = glyph_name
        self.encoding = encoding
        super().__init__(f"Unsupported bitmap encoding '{encoding}' for glyph '{glyph_name}'")


class DocumentError(GlyphFlatError):
    """Errors related to the output document."""

    pass


class DocumentWriteError(DocumentError):
    """Error writing an SVG document."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write document '{path}': {reason}")
