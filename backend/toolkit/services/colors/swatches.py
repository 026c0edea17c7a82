"""
Swatch strip rendering.

A palette preview is one row of square chips, palette order left to right, with
the dominant chip outlined.
"""

import base64
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np
from loguru import logger

from toolkit.services.colors.conversion import hex_to_rgb

OUTLINE_BGR = (0, 0, 0)


def hex_to_bgr(hex_color: str) -> Tuple[int, int, int]:
    """Hex string to the BGR channel order OpenCV draws with."""
    r, g, b = hex_to_rgb(hex_color)
    return (b, g, r)


def render_swatch_strip(hex_colors: Sequence[str],
                        chip_size: int = 40,
                        highlight_index: Optional[int] = None,
                        border_color: Tuple[int, int, int] = OUTLINE_BGR,
                        border_width: int = 2) -> str:
    """
    Draw the palette as a PNG strip.

    Args:
        hex_colors: ``#rrggbb`` colors in palette order
        chip_size: Edge length of each square chip
        highlight_index: Chip to outline, normally 0 for the dominant color
        border_color: Outline color, BGR
        border_width: Outline thickness

    Returns:
        PNG bytes, base64 encoded

    Raises:
        ValueError: For an empty palette, bad chip size, index or color
        RuntimeError: If PNG encoding fails
    """
    validate_swatch_params(hex_colors, chip_size, highlight_index)

    chips = np.array([hex_to_bgr(h) for h in hex_colors], dtype=np.uint8)
    row = np.repeat(chips, chip_size, axis=0)
    img = np.ascontiguousarray(np.broadcast_to(row, (chip_size,) + row.shape))

    if highlight_index is not None:
        left = highlight_index * chip_size
        cv2.rectangle(img, (left, 0), (left + chip_size - 1, chip_size - 1),
                      border_color, border_width)

    ok, encoded = cv2.imencode('.png', img)
    if not ok:
        raise RuntimeError("Failed to encode swatch strip as PNG")

    logger.debug(f"Rendered {len(hex_colors)}-chip swatch strip ({img.shape[1]}x{chip_size})")
    return base64.b64encode(encoded.tobytes()).decode('ascii')


def validate_swatch_params(hex_colors: Sequence[str], chip_size: int, highlight_index: Optional[int]) -> None:
    if not hex_colors:
        raise ValueError("Cannot render an empty palette")
    if chip_size <= 0:
        raise ValueError(f"chip_size must be positive, got {chip_size}")
    if highlight_index is not None and not 0 <= highlight_index < len(hex_colors):
        raise ValueError(f"highlight_index {highlight_index} out of range [0, {len(hex_colors)})")

    for i, hex_color in enumerate(hex_colors):
        # full #rrggbb only; shorthand is expanded before it gets here
        if not isinstance(hex_color, str) or len(hex_color) != 7 or not hex_color.startswith('#'):
            raise ValueError(f"Invalid hex color at index {i}: {hex_color!r}")
        hex_to_rgb(hex_color)
