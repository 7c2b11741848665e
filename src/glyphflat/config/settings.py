"""Configuration settings for glyphflat."""

from pathlib import Path

from pydantic import BaseModel, Field

from glyphflat.domain.paint import Color
from glyphflat.domain.text import TextRendering

LOG_LEVEL_PATTERN = r"(?i)^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$"


class RenderConfig(BaseModel):
    """Configuration for glyph resolution and painting."""

    foreground_color: str = Field(
        default="#000000",
        pattern=r"^#?[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$",
        description="Color used for palette entry 0xFFFF (#RRGGBB or #RRGGBBAA)",
    )
    palette_index: int = Field(
        default=0,
        ge=0,
        description="CPAL palette used to color COLR glyphs",
    )
    font_size: float = Field(
        default=64.0,
        gt=0.0,
        le=4096.0,
        description="Font size in user units",
    )
    text_rendering: TextRendering = Field(
        default=TextRendering.OPTIMIZE_LEGIBILITY,
        description="Text rendering hint, mapped to shape-rendering on paths",
    )

    def foreground(self) -> Color:
        """Get the foreground color as a domain Color."""
        return Color.from_hex(self.foreground_color)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        pattern=LOG_LEVEL_PATTERN,
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        pattern=LOG_LEVEL_PATTERN,
        description="File log level (more verbose)",
    )


class GlyphFlatSettings(BaseModel):
    """Main application settings."""

    render: RenderConfig = Field(default_factory=RenderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> GlyphFlatSettings:
    """Get default application settings."""
    return GlyphFlatSettings()
