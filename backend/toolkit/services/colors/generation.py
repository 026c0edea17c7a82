"""
Harmonious palette generation.

Colors are placed at evenly spaced hues around the wheel starting from a base
hue; saturation and lightness are drawn independently per color. The PRNG is
injected so a seed reproduces a palette exactly.
"""

import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from loguru import logger

from toolkit.config import config
from toolkit.services.colors.conversion import Color


@dataclass(frozen=True)
class GenerationSettings:
    """Shape of a generated palette. Ranges are half-open [lo, hi)."""
    count: int = 5
    hue_step: int = 72
    saturation_range: Tuple[int, int] = (60, 90)
    lightness_range: Tuple[int, int] = (40, 60)

    def __post_init__(self):
        if self.count < 1:
            raise ValueError(f"count must be >= 1, got {self.count}")
        # hues must close the wheel evenly
        if (self.count * self.hue_step) % 360 != 0:
            raise ValueError(
                f"count * hue_step must be a multiple of 360, got {self.count} * {self.hue_step}"
            )
        for name, (lo, hi) in (("saturation_range", self.saturation_range),
                               ("lightness_range", self.lightness_range)):
            if not 0 <= lo < hi <= 100:
                raise ValueError(f"{name} must satisfy 0 <= lo < hi <= 100, got ({lo}, {hi})")

    @classmethod
    def from_config(cls) -> "GenerationSettings":
        return cls(
            count=config.GENERATE_COUNT,
            hue_step=config.GENERATE_HUE_STEP,
            saturation_range=tuple(config.GENERATE_SATURATION),
            lightness_range=tuple(config.GENERATE_LIGHTNESS),
        )


def generate_palette(rng: Optional[random.Random] = None,
                     base_hue: Optional[int] = None,
                     settings: Optional[GenerationSettings] = None) -> List[Color]:
    """
    Generate a palette of evenly spaced hues.

    Args:
        rng: Random source; system entropy when omitted
        base_hue: Fixed starting hue in degrees; drawn from ``rng`` when omitted
        settings: Palette shape; defaults to the configured 5 colors at 72°

    Returns:
        Colors in generation order, each carrying its originating HSL triple
    """
    rng = rng or random.Random()
    settings = settings or GenerationSettings.from_config()

    base = rng.randrange(360) if base_hue is None else int(base_hue) % 360
    s_lo, s_hi = settings.saturation_range
    l_lo, l_hi = settings.lightness_range

    palette = []
    for i in range(settings.count):
        h = (base + i * settings.hue_step) % 360
        s = rng.randrange(s_lo, s_hi)
        l = rng.randrange(l_lo, l_hi)
        palette.append(Color.from_hsl(h, s, l))

    logger.debug(f"Generated palette from base hue {base}: {[c.hex for c in palette]}")
    return palette
