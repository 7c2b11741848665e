"""Palette lookup for color glyph paints."""

from collections.abc import Sequence

from fontTools.ttLib import TTFont

from glyphflat.domain.paint import FOREGROUND_PALETTE_INDEX, Color


def combine_alpha(stored: int, factor: float) -> int:
    """Multiply an 8-bit alpha by a factor, truncating and clamping to 0-255."""
    return max(0, min(255, int(stored * factor)))


class PaletteResolver:
    """Resolves palette indices to colors.

    Index 0xFFFF selects the foreground color; any other index is looked up
    in the active palette. A missing palette or an out-of-range index
    resolves to None.

    Example:
        resolver = PaletteResolver([Color(255, 0, 0)], foreground=Color(0, 0, 0))
        resolver.resolve(0, 0.5)  # Color(255, 0, 0, 127)
    """

    def __init__(self, colors: Sequence[Color] | None, foreground: Color) -> None:
        """Initialize the resolver.

        Args:
            colors: Colors of the active palette, or None if the font has none
            foreground: Color used for the foreground sentinel index
        """
        self._colors = colors
        self._foreground = foreground

    @property
    def foreground(self) -> Color:
        return self._foreground

    def resolve(self, palette_index: int, alpha: float = 1.0) -> Color | None:
        """Resolve a palette entry and apply an alpha factor.

        Args:
            palette_index: Palette entry, or FOREGROUND_PALETTE_INDEX
            alpha: Alpha multiplier in 0.0-1.0

        Returns:
            The combined color, or None if the entry does not exist
        """
        if palette_index == FOREGROUND_PALETTE_INDEX:
            color = self._foreground
        else:
            if self._colors is None or not 0 <= palette_index < len(self._colors):
                return None
            color = self._colors[palette_index]

        return Color(
            red=color.red,
            green=color.green,
            blue=color.blue,
            alpha=combine_alpha(color.alpha, alpha),
        )

    @classmethod
    def from_font(cls, font: TTFont, palette_index: int, foreground: Color) -> "PaletteResolver":
        """Build a resolver from a font's CPAL table.

        Falls back to the first palette when palette_index is out of range.

        Args:
            font: Font to read CPAL from
            palette_index: CPAL palette to use
            foreground: Color used for the foreground sentinel index
        """
        if "CPAL" not in font:
            return cls(None, foreground)

        palettes = font["CPAL"].palettes
        if not palettes:
            return cls(None, foreground)
        if not 0 <= palette_index < len(palettes):
            palette_index = 0

        colors = [
            Color(red=c.red, green=c.green, blue=c.blue, alpha=c.alpha)
            for c in palettes[palette_index]
        ]
        return cls(colors, foreground)
