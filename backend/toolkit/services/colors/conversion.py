"""
Color space conversion utilities.

Hex strings are always lowercase ``#rrggbb``. HSL uses hue in degrees [0, 360)
and saturation/lightness in percent [0, 100].
"""

import math
import re
from dataclasses import dataclass, field
from typing import Optional, Tuple

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp_channel(value: int) -> int:
    return max(0, min(255, value))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert an RGB triple to a ``#rrggbb`` string."""
    for channel in (r, g, b):
        if not 0 <= int(channel) <= 255:
            raise ValueError(f"Channel out of range [0, 255]: {channel}")
    return f"#{int(r):02x}{int(g):02x}{int(b):02x}"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """
    Convert a hex color string to an RGB tuple.

    Accepts ``#rrggbb``, ``rrggbb`` and the ``#rgb`` shorthand.

    Raises:
        ValueError: If the string is not a valid hex color
    """
    match = _HEX_RE.match(hex_color.strip()) if isinstance(hex_color, str) else None
    if match is None:
        raise ValueError(f"Invalid hex color format: {hex_color!r}")

    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))


def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[int, int, int]:
    """
    Convert HSL to an RGB triple using the chroma/hue-sector formula.

    Hue is taken modulo 360 first. Channels are rounded half-up and clamped.
    """
    h = h % 360
    s = max(0.0, min(100.0, s)) / 100.0
    l = max(0.0, min(100.0, l)) / 100.0
    a = s * min(l, 1 - l)

    def channel(n: int) -> int:
        k = (n + h / 30) % 12
        value = l - a * max(min(k - 3, 9 - k, 1), -1)
        return _clamp_channel(_round_half_up(value * 255))

    return channel(0), channel(8), channel(4)


def rgb_to_hsl(r: int, g: int, b: int) -> Tuple[float, float, float]:
    """
    Convert an RGB triple to HSL.

    Returns:
        Tuple of (h, s, l) with h in [0, 360) and s, l in [0, 100].
        Achromatic colors report h = 0 and s = 0.
    """
    r_n, g_n, b_n = r / 255.0, g / 255.0, b / 255.0
    c_max = max(r_n, g_n, b_n)
    c_min = min(r_n, g_n, b_n)
    delta = c_max - c_min
    l = (c_max + c_min) / 2

    if delta == 0:
        return 0.0, 0.0, l * 100

    s = delta / (1 - abs(2 * l - 1))
    if c_max == r_n:
        h = 60 * (((g_n - b_n) / delta) % 6)
    elif c_max == g_n:
        h = 60 * ((b_n - r_n) / delta + 2)
    else:
        h = 60 * ((r_n - g_n) / delta + 4)

    return h % 360, s * 100, l * 100


@dataclass(frozen=True)
class Color:
    """Immutable 8-bit RGB color."""

    r: int
    g: int
    b: int
    # (h, s, l) the color was generated from, if any
    origin_hsl: Optional[Tuple[int, int, int]] = field(default=None, compare=False)

    def __post_init__(self):
        for name in ("r", "g", "b"):
            value = int(getattr(self, name))
            if not 0 <= value <= 255:
                raise ValueError(f"Channel {name} out of range [0, 255]: {value}")
            object.__setattr__(self, name, value)

    @classmethod
    def from_hex(cls, hex_color: str) -> "Color":
        return cls(*hex_to_rgb(hex_color))

    @classmethod
    def from_hsl(cls, h: int, s: int, l: int) -> "Color":
        """Build a color from HSL, remembering the originating triple."""
        r, g, b = hsl_to_rgb(h, s, l)
        return cls(r, g, b, origin_hsl=(h % 360, s, l))

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.r, self.g, self.b)

    @property
    def hsl(self) -> Tuple[int, int, int]:
        if self.origin_hsl is not None:
            return self.origin_hsl
        h, s, l = rgb_to_hsl(self.r, self.g, self.b)
        return _round_half_up(h) % 360, _round_half_up(s), _round_half_up(l)

    @property
    def css_rgb(self) -> str:
        return f"rgb({self.r}, {self.g}, {self.b})"

    @property
    def css_hsl(self) -> str:
        h, s, l = self.hsl
        return f"hsl({h}, {s}%, {l}%)"
