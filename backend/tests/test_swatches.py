"""
Unit tests for swatch strip rendering.
"""
import base64

import cv2
import numpy as np
import pytest

from toolkit.services.colors.swatches import hex_to_bgr, render_swatch_strip


def decode_png(b64: str) -> np.ndarray:
    buffer = np.frombuffer(base64.b64decode(b64), dtype=np.uint8)
    return cv2.imdecode(buffer, cv2.IMREAD_COLOR)


class TestRenderSwatchStrip:
    def test_strip_dimensions_and_colors(self):
        img = decode_png(render_swatch_strip(["#ff0000", "#336699"], chip_size=20))

        assert img.shape == (20, 40, 3)
        assert tuple(img[10, 10]) == hex_to_bgr("#ff0000")
        assert tuple(img[10, 30]) == (153, 102, 51)

    def test_highlight_border(self):
        img = decode_png(render_swatch_strip(["#ffffff", "#ffffff"], chip_size=20,
                                             highlight_index=0))
        assert tuple(img[0, 0]) == (0, 0, 0)
        assert tuple(img[10, 10]) == (255, 255, 255)
        assert tuple(img[0, 30]) == (255, 255, 255)

    @pytest.mark.parametrize("colors, chip_size, highlight", [
        ([], 40, None),
        (["#ff0000"], 0, None),
        (["#ff0000"], 40, 1),
        (["red"], 40, None),
        (["#fff"], 40, None),
    ])
    def test_invalid_params(self, colors, chip_size, highlight):
        with pytest.raises(ValueError):
            render_swatch_strip(colors, chip_size=chip_size, highlight_index=highlight)
