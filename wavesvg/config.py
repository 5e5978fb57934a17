"""Centralized configuration for wavesvg.

This module contains the constants and magic numbers used by the emitter,
the page assembler and the command line tool.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RenderingConfig:
    """Configuration for signal rendering (SVG user units)."""
    END_TIME_PADDING: int = 10  # Added to the last change time of the whole trace
    WAVE_HEIGHT: int = 10
    HIGH_Y: int = 0
    LOW_Y: int = 10
    CORNER_RADIUS: int = 1
    LABEL_BASELINE: int = 8

    # Outer transform applied to every wave
    SCALE_X: int = 10
    SCALE_Y: int = 2


@dataclass(frozen=True)
class PageConfig:
    """Configuration for the assembled HTML page."""
    ROW_HEIGHT_PX: int = 40
    HEIGHT_PADDING_PX: int = 20
    TITLE: str = "Waveform"
    TEMPLATE_NAME: str = "wrapper.html"
    DISPLAY_PLACEHOLDER: str = "$$$DISPLAY$$$"
    CONTROLS_PLACEHOLDER: str = "$$$CONTROLS$$$"
    TITLE_PLACEHOLDER: str = "$$$TITLE$$$"


@dataclass(frozen=True)
class CliConfig:
    """Command line defaults."""
    STDIO_MARKER: str = "-"
    DEFAULT_BACKEND: str = "vcd"
    LOG_FORMAT: str = "%(levelname)s %(name)s: %(message)s"


# Global instances for easy access
RENDERING = RenderingConfig()
PAGE = PageConfig()
CLI = CliConfig()
