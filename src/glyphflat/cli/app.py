"""CLI application entry point for glyphflat.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from glyphflat import __version__
from glyphflat.cli.output import (
    console,
    print_color_glyphs,
    print_error,
    print_font_info,
    print_header,
    print_stats,
    print_step,
    print_success,
)
from glyphflat.config import GlyphFlatSettings, LoggingConfig, RenderConfig
from glyphflat.core.flatten import flatten
from glyphflat.core.layout import layout_text
from glyphflat.domain.tree import Fill
from glyphflat.exceptions import (
    DocumentWriteError,
    FontFormatError,
    FontLoadError,
    GlyphFlatError,
)
from glyphflat.io import FontDatabase, FontToolsSource, GlyphCache, SvgDocumentWriter
from glyphflat.io.writer import get_output_path
from glyphflat.utils.logging import FlattenStats, configure_logging, get_diagnostics

# Tables the layout reads from every font
LAYOUT_TABLES = ("cmap", "hhea", "hmtx")

# Create the Typer app
app = typer.Typer(
    name="glyphflat",
    help="Flatten text set in color, bitmap or outline fonts into a single SVG.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]glyphflat[/bold blue] v{__version__}")
        raise typer.Exit()


@app.command()
def flatten_text(
    input_font: Annotated[
        Path,
        typer.Argument(
            help="Path to input TTF/OTF font file",
            show_default=False,
        ),
    ],
    text: Annotated[
        str | None,
        typer.Argument(
            help="Text to flatten",
            show_default=False,
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-flat.svg)",
        ),
    ] = None,
    size: Annotated[
        float,
        typer.Option(
            "--size",
            "-s",
            help="Font size in user units",
            min=1.0,
            max=4096.0,
        ),
    ] = 64.0,
    foreground: Annotated[
        str,
        typer.Option(
            "--foreground",
            help="Text color and COLR foreground color (#RRGGBB or #RRGGBBAA)",
        ),
    ] = "#000000",
    palette: Annotated[
        int,
        typer.Option(
            "--palette",
            help="CPAL palette index for color glyphs",
            min=0,
        ),
    ] = 0,
    underline: Annotated[
        bool,
        typer.Option("--underline", help="Draw an underline"),
    ] = False,
    overline: Annotated[
        bool,
        typer.Option("--overline", help="Draw an overline"),
    ] = False,
    strikethrough: Annotated[
        bool,
        typer.Option("--strikethrough", help="Draw a line through the text"),
    ] = False,
    list_color_glyphs: Annotated[
        bool,
        typer.Option(
            "--list-color-glyphs",
            help="List all glyphs with color or bitmap data and exit",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Flatten a line of text into an SVG document.

    Every glyph is drawn from the best data the font carries: COLR color
    layers, SVG documents, sbix/CBDT bitmaps or plain outlines.

    Example:
        glyphflat NotoColorEmoji.ttf "😀🎉"

    This will create NotoColorEmoji-flat.svg next to the font.
    """
    # Validate mutually exclusive options
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    # Validate input file exists
    if not input_font.exists():
        print_error(
            f"Input file not found: {input_font}",
            details=f"The file '{input_font}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_font.is_file():
        print_error(
            f"Input path is not a file: {input_font}",
            details="Please provide a path to a TTF or OTF font file.",
        )
        raise typer.Exit(code=1)

    if text is None and not list_color_glyphs:
        print_error("Missing text", details="Pass the text to flatten after the font path.")
        raise typer.Exit(code=1)

    try:
        settings = GlyphFlatSettings(
            render=RenderConfig(
                foreground_color=foreground,
                palette_index=palette,
                font_size=size,
            ),
            logging=LoggingConfig(
                log_file=log_file,
                log_level=log_level if not quiet else "WARNING",
            ),
        )
    except ValidationError as e:
        print_error("Invalid option", details=str(e.errors()[0]["msg"]))
        raise typer.Exit(code=1)

    configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )

    if not quiet:
        print_header(__version__)

    database = FontDatabase()
    try:
        if not quiet:
            print_step("Loading font")

        font_id = database.add_font(input_font)
        font = database.open(font_id)

        if not quiet:
            print_font_info(
                font_path=str(input_font),
                glyph_count=len(font.getGlyphOrder()),
                upm=font["head"].unitsPerEm,
                color_tables=database.color_tables(font_id),
            )

        source = FontToolsSource(database, settings.render)

        if list_color_glyphs:
            print_color_glyphs(source.color_glyphs(font_id))
            raise typer.Exit(code=0)

        missing = [tag for tag in LAYOUT_TABLES if tag not in font]
        if missing:
            raise FontFormatError(str(input_font), f"missing {', '.join(missing)} table")

        if not quiet:
            print_step("Flattening")

        foreground_color = settings.render.foreground()
        laid_out = layout_text(
            font,
            font_id,
            text or "",
            settings.render.font_size,
            fill=Fill(color=foreground_color, opacity=foreground_color.opacity),
            underline=underline,
            overline=overline,
            strikethrough=strikethrough,
            text_id="text",
            rendering_mode=settings.render.text_rendering,
        )

        diagnostics = get_diagnostics()
        diagnostics.reset()
        stats = FlattenStats()
        result = flatten(laid_out, GlyphCache(source), stats)

        if verbose:
            print_stats(stats, diagnostics.counts)

        if result is None:
            print_error("Nothing to draw", details="The text produced no visible output.")
            raise typer.Exit(code=1)

        group, bbox = result
        output_path = output if output is not None else get_output_path(input_font)
        SvgDocumentWriter().write(group, bbox, output_path)

        if not quiet:
            print_success(
                output_path=str(output_path),
                file_size=_format_file_size(output_path),
                total_time_s=stats.duration_seconds,
                glyphs=stats.glyph_count,
                paths=stats.path_count,
                warnings=sum(diagnostics.counts.values()),
            )

    except FontLoadError as e:
        print_error(f"Could not load font: {e.reason}")
        raise typer.Exit(code=1)
    except FontFormatError as e:
        print_error(f"Unsupported font: {e.details}")
        raise typer.Exit(code=1)
    except DocumentWriteError as e:
        print_error(f"Could not write document: {e.reason}")
        raise typer.Exit(code=1)
    except GlyphFlatError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)
    finally:
        database.close()


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "428 KB")
    """
    try:
        size_bytes = path.stat().st_size
        if size_bytes < 1024:
            return f"{size_bytes} B"
        elif size_bytes < 1024 * 1024:
            return f"{size_bytes / 1024:.0f} KB"
        else:
            return f"{size_bytes / (1024 * 1024):.1f} MB"
    except OSError:
        return "unknown"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
