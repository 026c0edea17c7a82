"""
CSS gradient builder for the Gradient Generator tool.
"""

import random
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

from toolkit.services.colors.conversion import hex_to_rgb, rgb_to_hex

GRADIENT_TYPES = ("linear", "radial")
GRADIENT_EXPORT_FORMATS = ("css", "tailwind")
MIN_STOPS = 2
MAX_STOPS = 5
NEW_STOP_OFFSET = 20


@dataclass(frozen=True)
class GradientStop:
    """A color at a percentage position along the gradient."""
    color: str
    position: int

    def __post_init__(self):
        # normalizes shorthand and case, raises ValueError on bad input
        object.__setattr__(self, "color", rgb_to_hex(*hex_to_rgb(self.color)))
        if not 0 <= self.position <= 100:
            raise ValueError(f"Stop position must be in [0, 100], got {self.position}")


def validate_stops(stops: Sequence[GradientStop]) -> None:
    if not MIN_STOPS <= len(stops) <= MAX_STOPS:
        raise ValueError(f"A gradient needs {MIN_STOPS}-{MAX_STOPS} color stops, got {len(stops)}")


def build_gradient(stops: Sequence[GradientStop], gradient_type: str = "linear", angle: int = 90) -> str:
    """
    Build the CSS gradient function.

    >>> build_gradient([GradientStop("#ff0000", 0), GradientStop("#0000ff", 100)])
    'linear-gradient(90deg, #ff0000 0%, #0000ff 100%)'
    """
    validate_stops(stops)
    stops_css = ", ".join(f"{stop.color} {stop.position}%" for stop in stops)

    if gradient_type == "linear":
        if not 0 <= angle <= 360:
            raise ValueError(f"Angle must be in [0, 360], got {angle}")
        return f"linear-gradient({angle}deg, {stops_css})"
    if gradient_type == "radial":
        return f"radial-gradient(circle, {stops_css})"

    raise ValueError(f"Unknown gradient type: {gradient_type}")


def export_gradient(gradient: str, fmt: str = "css") -> str:
    """Wrap a gradient as a CSS declaration or a Tailwind arbitrary value."""
    if fmt == "css":
        return f"background: {gradient};"
    if fmt == "tailwind":
        return f"bg-[{gradient}]"
    raise ValueError(f"Unknown gradient export format: {fmt}")


def add_stop(stops: Sequence[GradientStop]) -> List[GradientStop]:
    """Append a white stop 20% past the last one."""
    if len(stops) >= MAX_STOPS:
        raise ValueError(f"Maximum {MAX_STOPS} color stops allowed")
    last = stops[-1].position if stops else 0
    return list(stops) + [GradientStop("#ffffff", min(100, last + NEW_STOP_OFFSET))]


def remove_stop(stops: Sequence[GradientStop], index: int) -> List[GradientStop]:
    if len(stops) <= MIN_STOPS:
        raise ValueError(f"Minimum {MIN_STOPS} color stops required")
    if not 0 <= index < len(stops):
        raise IndexError(f"Stop index {index} out of range [0, {len(stops)})")
    return [stop for i, stop in enumerate(stops) if i != index]


def randomize_stops(stops: Sequence[GradientStop], rng: Optional[random.Random] = None) -> List[GradientStop]:
    """Give every stop a random color, keeping positions."""
    rng = rng or random.Random()
    return [replace(stop, color=f"#{rng.randrange(0x1000000):06x}") for stop in stops]
