"""Utility functions for glyphflat.

This module provides utility functions including:

- Logging setup and configuration
- The process-wide diagnostics sink
- Flattening statistics
"""

from glyphflat.utils.logging import (
    Diagnostics,
    FlattenStats,
    configure_logging,
    get_diagnostics,
)

__all__ = [
    "Diagnostics",
    "FlattenStats",
    "configure_logging",
    "get_diagnostics",
]
