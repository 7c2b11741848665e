"""Logging utilities for glyphflat."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

import structlog

# Handlers installed by the last configure_logging call
_handlers: list[logging.Handler] = []


@dataclass
class FlattenStats:
    """Statistics from a flattening run."""

    color_layer_count: int = 0
    embedded_vector_count: int = 0
    raster_count: int = 0
    outline_count: int = 0
    unresolved_count: int = 0
    path_count: int = 0
    unresolved: list[tuple[int, int]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def glyph_count(self) -> int:
        """Total number of glyphs seen."""
        return (
            self.color_layer_count
            + self.embedded_vector_count
            + self.raster_count
            + self.outline_count
            + self.unresolved_count
        )

    @property
    def duration_seconds(self) -> float:
        """Calculate flattening duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in _handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _handlers.clear()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)
        _handlers.append(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)
    _handlers.append(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("glyphflat")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class Diagnostics:
    """Process-wide sink for non-fatal glyph resolution warnings.

    Every warning is logged through structlog and counted by kind, so callers
    can report how much of a document degraded without parsing log output.
    """

    SWEEP_GRADIENT = "sweep_gradient"
    BLEND_MODE = "blend_mode"
    SINGULAR_TRANSFORM = "singular_transform"
    SVG_NODE_MISSING = "svg_node_missing"
    SVG_UNPARSABLE = "svg_unparsable"
    BITMAP_UNSUPPORTED = "bitmap_unsupported"
    PALETTE_UNRESOLVED = "palette_unresolved"
    COLOR_GLYPH_FAILED = "color_glyph_failed"
    FONT_UNREADABLE = "font_unreadable"

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger or structlog.get_logger("glyphflat.diagnostics")
        self._counts: Counter[str] = Counter()

    def _warn(self, kind: str, message: str, **context: object) -> None:
        self._counts[kind] += 1
        self._logger.warning(message, kind=kind, **context)

    def sweep_gradient_unsupported(self) -> None:
        """Log a skipped sweep gradient fill."""
        self._warn(self.SWEEP_GRADIENT, "Sweep gradients are not supported")

    def blend_mode_unsupported(self, mode: str) -> None:
        """Log a composite mode that fell back to normal blending."""
        self._warn(self.BLEND_MODE, "Unsupported blend mode", mode=mode)

    def singular_transform(self) -> None:
        """Log a gradient whose outline transform cannot be inverted."""
        self._warn(
            self.SINGULAR_TRANSFORM,
            "Failed to calculate transform for gradient in glyph",
        )

    def svg_node_missing(self, glyph_id: int) -> None:
        """Log an SVG document without a node for the requested glyph."""
        self._warn(
            self.SVG_NODE_MISSING,
            "Failed to find SVG glyph node",
            glyph_id=glyph_id,
        )

    def svg_unparsable(self, glyph_id: int, reason: str) -> None:
        """Log an SVG document that could not be parsed."""
        self._warn(
            self.SVG_UNPARSABLE,
            "Failed to parse SVG glyph document",
            glyph_id=glyph_id,
            reason=reason,
        )

    def bitmap_unsupported(self, glyph_name: str, encoding: str) -> None:
        """Log a bitmap glyph with an encoding we cannot embed."""
        self._warn(
            self.BITMAP_UNSUPPORTED,
            "Unsupported bitmap encoding",
            glyph=glyph_name,
            encoding=encoding,
        )

    def palette_unresolved(self, palette_index: int) -> None:
        """Log a palette index that could not be resolved to a color."""
        self._warn(
            self.PALETTE_UNRESOLVED,
            "Palette entry not found",
            palette_index=palette_index,
        )

    def color_glyph_failed(self, glyph_name: str, reason: str) -> None:
        """Log a color glyph program that could not be interpreted."""
        self._warn(
            self.COLOR_GLYPH_FAILED,
            "Color glyph skipped",
            glyph=glyph_name,
            reason=reason,
        )

    def font_unreadable(self, font_id: int, reason: str) -> None:
        """Log a font that could not be opened."""
        self._warn(
            self.FONT_UNREADABLE,
            "Font could not be opened",
            font_id=font_id,
            reason=reason,
        )

    def count(self, kind: str) -> int:
        """Get the number of warnings logged for a kind."""
        return self._counts[kind]

    @property
    def counts(self) -> dict[str, int]:
        """Get warning counts by kind."""
        return dict(self._counts)

    def reset(self) -> None:
        """Clear all counters."""
        self._counts.clear()


_diagnostics: Diagnostics | None = None


def get_diagnostics() -> Diagnostics:
    """Get the process-wide diagnostics sink."""
    global _diagnostics
    if _diagnostics is None:
        _diagnostics = Diagnostics()
    return _diagnostics
