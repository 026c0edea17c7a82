"""
Palette export formatting.

Produces the text the copy buttons place on the clipboard. Nothing here does I/O;
the clipboard itself is an injected writer.
"""

from typing import Callable, Sequence

from loguru import logger

from toolkit.errors import ExportError
from toolkit.services.colors.conversion import Color

EXPORT_FORMATS = ("hex", "css", "design-token")
COLOR_FORMATS = ("hex", "rgb", "hsl")


def format_palette(palette: Sequence[Color], fmt: str) -> str:
    """
    Encode a palette as text.

    Args:
        palette: Colors in palette order
        fmt: ``hex`` (comma list), ``css`` (custom properties) or
            ``design-token`` (position -> hex map)

    Raises:
        ExportError: If the palette is empty or the format is unknown
    """
    if not palette:
        raise ExportError("Generate a palette first")

    hexes = [color.hex for color in palette]

    if fmt == "hex":
        return ", ".join(hexes)
    if fmt == "css":
        return "\n".join(f"--color-{i}: {value};" for i, value in enumerate(hexes, start=1))
    if fmt == "design-token":
        body = ",\n".join(f"'{i}': '{value}'" for i, value in enumerate(hexes, start=1))
        return "{\n" + body + "\n}"

    raise ExportError(f"Unknown export format: {fmt}. Supported: {', '.join(EXPORT_FORMATS)}")


def format_color(color: Color, fmt: str = "hex") -> str:
    """Text for copying a single swatch."""
    if fmt == "hex":
        return color.hex
    if fmt == "rgb":
        return color.css_rgb
    if fmt == "hsl":
        return color.css_hsl
    raise ExportError(f"Unknown color format: {fmt}. Supported: {', '.join(COLOR_FORMATS)}")


def copy_to_clipboard(text: str, writer: Callable[[str], None]) -> str:
    """
    Hand export text to a clipboard writer.

    Any writer failure (e.g. permission denied) is reported as a recoverable
    ExportError; palette state is never touched.
    """
    try:
        writer(text)
    except Exception as e:
        logger.warning(f"Clipboard write failed: {str(e)}")
        raise ExportError(f"Failed to copy to clipboard: {str(e)}") from e
    return text
