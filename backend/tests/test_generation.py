"""
Unit tests for harmonious palette generation.
"""
import random

import pytest

from toolkit.services.colors.conversion import hsl_to_rgb
from toolkit.services.colors.generation import GenerationSettings, generate_palette


class TestGeneratePalette:
    """Test evenly spaced hue palettes"""

    def test_fixed_base_hue(self):
        palette = generate_palette(rng=random.Random(1), base_hue=0)
        assert [c.hsl[0] for c in palette] == [0, 72, 144, 216, 288]

    def test_base_hue_wraps(self):
        palette = generate_palette(rng=random.Random(1), base_hue=400)
        assert palette[0].hsl[0] == 40

    @pytest.mark.parametrize("seed", range(25))
    def test_hues_evenly_spaced(self, seed):
        palette = generate_palette(rng=random.Random(seed))
        hues = [c.hsl[0] for c in palette]

        assert len(palette) == 5
        for i, hue in enumerate(hues):
            assert hue == (hues[0] + i * 72) % 360

        ordered = sorted(hues)
        gaps = [b - a for a, b in zip(ordered, ordered[1:])] + [ordered[0] + 360 - ordered[-1]]
        assert gaps == [72] * 5

    @pytest.mark.parametrize("seed", range(25))
    def test_saturation_and_lightness_ranges(self, seed):
        for color in generate_palette(rng=random.Random(seed)):
            _, s, l = color.hsl
            assert 60 <= s < 90
            assert 40 <= l < 60

    def test_rgb_matches_hsl(self):
        for color in generate_palette(rng=random.Random(5)):
            assert color.rgb == hsl_to_rgb(*color.hsl)

    def test_same_seed_same_palette(self):
        first = generate_palette(rng=random.Random(42))
        second = generate_palette(rng=random.Random(42))
        assert [c.hex for c in first] == [c.hex for c in second]

    def test_custom_settings(self):
        settings = GenerationSettings(count=3, hue_step=120, saturation_range=(10, 20),
                                      lightness_range=(30, 31))
        palette = generate_palette(rng=random.Random(0), base_hue=10, settings=settings)

        assert [c.hsl[0] for c in palette] == [10, 130, 250]
        assert all(c.hsl[2] == 30 for c in palette)


class TestGenerationSettings:
    """Test settings validation"""

    def test_defaults(self):
        settings = GenerationSettings()
        assert (settings.count, settings.hue_step) == (5, 72)

    def test_from_config(self):
        assert GenerationSettings.from_config() == GenerationSettings()

    def test_hues_must_close_the_wheel(self):
        with pytest.raises(ValueError):
            GenerationSettings(count=5, hue_step=70)

    @pytest.mark.parametrize("rng_range", [(90, 60), (50, 50), (-1, 10), (0, 101)])
    def test_invalid_ranges(self, rng_range):
        with pytest.raises(ValueError):
            GenerationSettings(saturation_range=rng_range)
        with pytest.raises(ValueError):
            GenerationSettings(lightness_range=rng_range)

    def test_count_positive(self):
        with pytest.raises(ValueError):
            GenerationSettings(count=0, hue_step=72)
