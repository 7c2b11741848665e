"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with tables and formatted messages.
"""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from glyphflat.utils.logging import FlattenStats

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]glyphflat[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_font_info(
    font_path: str, glyph_count: int, upm: int, color_tables: list[str]
) -> None:
    """Print font information.

    Args:
        font_path: Path to the font file
        glyph_count: Total number of glyphs in font
        upm: Units per em value
        color_tables: Color and bitmap table tags present in the font
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(font_path)
    console.print(line)
    tables = ", ".join(color_tables) if color_tables else "outlines only"
    console.print(f"  {glyph_count:,} glyphs {SYM_DOT} {upm:,} UPM {SYM_DOT} {tables}")


def print_color_glyphs(glyphs: list[tuple[str, str]]) -> None:
    """Print the color glyphs of a font as a table.

    Args:
        glyphs: (glyph name, table tag) pairs
    """
    console.print(f"\n[bold]{len(glyphs)} color glyphs[/bold]\n")
    if not glyphs:
        return

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Glyph")
    table.add_column("Table")
    for glyph_name, tag in glyphs:
        table.add_row(glyph_name, tag)
    console.print(table)


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_stats(stats: FlattenStats, warnings: dict[str, int]) -> None:
    """Print how glyphs were resolved.

    Args:
        stats: Counters from the flattening run
        warnings: Diagnostic counts by kind
    """
    console.print(
        f"  {stats.color_layer_count} COLR {SYM_DOT} {stats.embedded_vector_count} SVG "
        f"{SYM_DOT} {stats.raster_count} bitmap {SYM_DOT} {stats.outline_count} outline"
    )
    if stats.unresolved_count:
        console.print(
            f"  [yellow]{stats.unresolved_count} glyphs without a representation[/yellow]"
        )
    for kind, count in sorted(warnings.items()):
        console.print(f"  [yellow]{count}[/yellow] {kind.replace('_', ' ')}")


def print_success(
    output_path: str,
    file_size: str,
    total_time_s: float,
    glyphs: int,
    paths: int,
    warnings: int,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        total_time_s: Total flattening time in seconds
        glyphs: Number of glyphs flattened
        paths: Number of outline paths emitted
        warnings: Number of diagnostics logged
    """
    time_str = _format_time(total_time_s)

    # Success header
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    # Output file info
    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)

    # Stats line
    warning_style = "yellow" if warnings > 0 else "green"
    console.print(
        f"  {glyphs} glyphs {SYM_DOT} {paths} paths {SYM_DOT} "
        f"[{warning_style}]{warnings} warnings[/{warning_style}]"
    )


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
