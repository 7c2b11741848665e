"""Font database for loading TTF/OTF fonts.

Fonts are registered under integer ids and opened lazily with fontTools on
first use. A font that cannot be opened is remembered as unreadable so the
failure is reported only once.
"""

import struct
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from fontTools.ttLib import TTFont, TTLibError

from glyphflat.exceptions import FontLoadError
from glyphflat.utils.logging import get_diagnostics

COLOR_TABLES = ("COLR", "CPAL", "SVG ", "sbix", "CBDT", "CBLC")


@dataclass(frozen=True)
class _FontSource:
    path: Path | None
    data: bytes | None
    font_number: int


class FontDatabase:
    """Registry of fonts addressed by integer id.

    Example:
        with FontDatabase() as db:
            font_id = db.add_font(Path("emoji.ttf"))
            face = db.face(font_id)
    """

    def __init__(self) -> None:
        self._sources: list[_FontSource] = []
        self._faces: dict[int, TTFont | None] = {}

    def __len__(self) -> int:
        return len(self._sources)

    def __enter__(self) -> "FontDatabase":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def add_font(self, font_path: Path, font_number: int = 0) -> int:
        """Register a font file.

        Args:
            font_path: Path to a TTF, OTF or TTC file
            font_number: Face index inside a collection

        Returns:
            Font id

        Raises:
            FontLoadError: If the file does not exist
        """
        if not font_path.exists():
            raise FontLoadError(str(font_path), "file not found")
        self._sources.append(_FontSource(path=font_path, data=None, font_number=font_number))
        return len(self._sources) - 1

    def add_font_data(self, data: bytes, font_number: int = 0) -> int:
        """Register a font from memory.

        Returns:
            Font id
        """
        self._sources.append(_FontSource(path=None, data=data, font_number=font_number))
        return len(self._sources) - 1

    def load(self, font_id: int) -> TTFont:
        """Open a font, raising on failure.

        Args:
            font_id: Id returned by add_font or add_font_data

        Returns:
            The opened font

        Raises:
            FontLoadError: If the id is unknown or the font cannot be parsed
        """
        if not 0 <= font_id < len(self._sources):
            raise FontLoadError(f"<font {font_id}>", "unknown font id")

        source = self._sources[font_id]
        label = str(source.path) if source.path is not None else f"<font {font_id}>"
        file = str(source.path) if source.path is not None else BytesIO(source.data or b"")

        try:
            font = TTFont(file, fontNumber=source.font_number, lazy=True)
            # Touch the required tables so truncated files fail here.
            font["head"]
            font["maxp"]
        except (TTLibError, OSError, KeyError, ValueError, struct.error) as e:
            raise FontLoadError(label, str(e)) from e

        return font

    def open(self, font_id: int) -> TTFont:
        """Get an opened font, raising on failure.

        A successfully opened font is cached and shared with face().

        Raises:
            FontLoadError: If the font cannot be opened
        """
        font = self._faces.get(font_id)
        if font is None:
            font = self.load(font_id)
            self._faces[font_id] = font
        return font

    def face(self, font_id: int) -> TTFont | None:
        """Get an opened font, or None if it cannot be read.

        The outcome is cached, so each font is opened at most once.
        """
        if font_id in self._faces:
            return self._faces[font_id]

        try:
            font: TTFont | None = self.load(font_id)
        except FontLoadError as e:
            get_diagnostics().font_unreadable(font_id, e.reason)
            font = None

        self._faces[font_id] = font
        return font

    def units_per_em(self, font_id: int) -> int | None:
        """Get a font's units per em, or None if it cannot be read."""
        font = self.face(font_id)
        if font is None:
            return None
        return font["head"].unitsPerEm

    def color_tables(self, font_id: int) -> list[str]:
        """List the color and bitmap tables a font carries."""
        font = self.face(font_id)
        if font is None:
            return []
        return [tag.strip() for tag in COLOR_TABLES if tag in font]

    def close(self) -> None:
        """Close all opened fonts."""
        for font in self._faces.values():
            if font is not None:
                font.close()
        self._faces.clear()
