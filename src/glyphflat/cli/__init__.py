"""Command-line interface for glyphflat.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- Flatten a string set in one font to an SVG file
- List the color glyphs a font carries
- Verbose/quiet output modes
- Detailed error reporting
"""

from glyphflat.cli.app import cli, main

__all__ = ["cli", "main"]
