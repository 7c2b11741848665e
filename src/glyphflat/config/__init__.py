"""Configuration management for glyphflat.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- RenderConfig: Color, palette and sizing settings
- LoggingConfig: Logging settings
- GlyphFlatSettings: Main application settings
"""

from glyphflat.config.settings import (
    GlyphFlatSettings,
    LoggingConfig,
    RenderConfig,
    get_default_settings,
)

__all__ = [
    "GlyphFlatSettings",
    "LoggingConfig",
    "RenderConfig",
    "get_default_settings",
]
