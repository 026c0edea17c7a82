"""
Color extraction service for uploaded images.

This module implements the palette extraction pipeline for the Color Extractor
tool: deterministic pixel sampling, color quantization (median cut or
MiniBatchKMeans) and ranking of cluster centroids by population.
"""

import math
from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np
from loguru import logger
from sklearn.cluster import MiniBatchKMeans

from toolkit.errors import EmptyInputError
from toolkit.services.colors.conversion import Color

QUANTIZERS = ("median_cut", "kmeans")
MAX_PALETTE_SIZE = 8

# Share of the target palette split by population before volume is weighed in
FRACT_BY_POPULATION = 0.75


@dataclass
class ExtractionResult:
    """Dominant color and ranked palette of one image."""
    width: int
    height: int
    sampled_pixels: int
    method: str
    palette: List[Color]
    ratios: List[float] = field(default_factory=list)

    @property
    def dominant(self) -> Color:
        return self.palette[0]


def sample_pixels(rgba: np.ndarray,
                  quality: int = 10,
                  alpha_threshold: int = 125,
                  ignore_white: bool = False) -> np.ndarray:
    """
    Sample every ``quality``-th pixel of an image in row-major order.

    Args:
        rgba: Image array (H, W, 4) RGBA or (H, W, 3) RGB, uint8
        quality: Sampling stride; 1 keeps every pixel
        alpha_threshold: Pixels with alpha below this are skipped
        ignore_white: Skip near-white pixels (all channels > 250)

    Returns:
        Sampled RGB pixels (N, 3) uint8. The input array is never modified.

    Raises:
        ValueError: If the array shape or stride is invalid
        EmptyInputError: If no pixel survives sampling
    """
    if rgba.ndim != 3 or rgba.shape[2] not in (3, 4):
        raise ValueError(f"Expected (H, W, 3|4) pixel array, got shape {rgba.shape}")
    if quality < 1:
        raise ValueError(f"quality must be >= 1, got {quality}")

    channels = rgba.shape[2]
    sampled = rgba.reshape(-1, channels)[::quality]

    keep = np.ones(len(sampled), dtype=bool)
    if channels == 4:
        keep &= sampled[:, 3] >= alpha_threshold
    if ignore_white:
        keep &= ~np.all(sampled[:, :3] > 250, axis=1)

    pixels = sampled[keep, :3].astype(np.uint8)
    logger.debug(f"Sampled {len(pixels)} of {rgba.shape[0] * rgba.shape[1]} pixels (stride={quality})")

    if len(pixels) == 0:
        raise EmptyInputError("No pixels left to analyze after sampling")

    return pixels


def _centroid(pixels: np.ndarray) -> Color:
    mean = pixels.astype(np.float64).mean(axis=0)
    r, g, b = (min(255, int(math.floor(v + 0.5))) for v in mean)
    return Color(r, g, b)


class _ColorBox:
    """A box of pixels in RGB space, the unit median cut splits."""

    def __init__(self, pixels: np.ndarray, order: int):
        self.pixels = pixels
        self.order = order
        self.ranges = pixels.max(axis=0) - pixels.min(axis=0)

    @property
    def population(self) -> int:
        return len(self.pixels)

    @property
    def volume(self) -> int:
        return int(np.prod(self.ranges.astype(np.int64) + 1))

    @property
    def splittable(self) -> bool:
        return self.population > 1 and int(self.ranges.max()) > 0

    def split(self, next_order: int) -> Tuple["_ColorBox", "_ColorBox"]:
        """Cut at the median of the widest channel; equal values stay on one side."""
        axis = int(np.argmax(self.ranges))
        order = np.argsort(self.pixels[:, axis], kind="stable")
        values = self.pixels[order, axis]
        median = values[len(values) // 2]

        cut = int(np.searchsorted(values, median, side="right"))
        if cut == len(values):
            cut = int(np.searchsorted(values, median, side="left"))

        left = _ColorBox(self.pixels[order[:cut]], self.order)
        right = _ColorBox(self.pixels[order[cut:]], next_order)
        return left, right


def _rank(entries: List[Tuple[Color, int, int]], total: int) -> Tuple[List[Color], List[float]]:
    """Sort (color, population, order) entries by population desc, creation order asc."""
    entries = sorted(entries, key=lambda e: (-e[1], e[2]))
    return [e[0] for e in entries], [e[1] / total for e in entries]


def median_cut_palette(pixels: np.ndarray, color_count: int = 8) -> Tuple[List[Color], List[float]]:
    """
    Quantize pixels with a modified median cut.

    The box with the highest priority is split until ``color_count`` boxes exist.
    Priority is population for the first 75% of the target and population times
    color volume afterwards. When no box can be split, the most populous box is
    duplicated, so a single-color input yields ``color_count`` identical entries.

    Returns:
        Tuple of (colors, ratios) ordered by population, largest first
    """
    if len(pixels) == 0:
        raise EmptyInputError("Cannot quantize an empty pixel set")

    boxes = [_ColorBox(pixels.astype(np.int32), 0)]
    next_order = 1
    population_phase = max(1, math.ceil(color_count * FRACT_BY_POPULATION))

    while len(boxes) < color_count:
        by_volume = len(boxes) >= population_phase
        candidates = [box for box in boxes if box.splittable]

        if candidates:
            if by_volume:
                target = max(candidates, key=lambda b: (b.population * b.volume, -b.order))
            else:
                target = max(candidates, key=lambda b: (b.population, -b.order))
            left, right = target.split(next_order)
            boxes.remove(target)
            boxes.extend([left, right])
        else:
            top = max(boxes, key=lambda b: (b.population, -b.order))
            boxes.append(_ColorBox(top.pixels, next_order))
        next_order += 1

    entries = [(_centroid(box.pixels), box.population, box.order) for box in boxes]
    return _rank(entries, len(pixels))


def cluster_palette(pixels: np.ndarray, k: int = 8, rng_seed: int = 42) -> Tuple[List[Color], List[float]]:
    """
    Cluster pixels into a palette using MiniBatchKMeans.

    ``k`` is reduced to the number of distinct colors; the palette is then padded
    by repeating the most populous cluster.

    Returns:
        Tuple of (colors, ratios) ordered by cluster size, largest first

    Raises:
        RuntimeError: If clustering fails
    """
    if len(pixels) == 0:
        raise EmptyInputError("Cannot cluster an empty pixel set")

    n_unique = len(np.unique(pixels, axis=0))
    n_clusters = min(k, n_unique)
    logger.info(f"Starting clustering with k={n_clusters} (requested {k}), {len(pixels)} pixels")

    if n_clusters == 1:
        entries = [(_centroid(pixels), len(pixels), 0)]
    else:
        try:
            kmeans = MiniBatchKMeans(
                n_clusters=n_clusters,
                random_state=rng_seed,
                batch_size=min(2048, len(pixels)),
                n_init="auto",
                max_iter=100
            )
            labels = kmeans.fit_predict(pixels.astype(np.float32))
        except Exception as e:
            logger.error(f"Clustering failed: {str(e)}")
            raise RuntimeError(f"K-means clustering failed: {str(e)}") from e

        counts = np.bincount(labels, minlength=n_clusters)
        entries = [
            (_centroid(pixels[labels == i]), int(counts[i]), i)
            for i in range(n_clusters)
            if counts[i] > 0
        ]

    next_order = max(e[2] for e in entries) + 1
    top = max(entries, key=lambda e: (e[1], -e[2]))
    while len(entries) < k:
        entries.append((top[0], top[1], next_order))
        next_order += 1

    return _rank(entries, len(pixels))


def extract_palette(rgba: np.ndarray,
                    color_count: int = 8,
                    quality: int = 10,
                    method: str = "median_cut",
                    alpha_threshold: int = 125,
                    ignore_white: bool = False,
                    rng_seed: int = 42) -> ExtractionResult:
    """
    Extract the dominant color and a ranked palette from a decoded image.

    Pure function of its inputs: the same buffer and parameters always give the
    same ordered palette, and the buffer is not modified.

    Raises:
        ValueError: For an unknown method or out-of-range color_count
        EmptyInputError: If no pixels are sampled (e.g. fully transparent image)
    """
    if method not in QUANTIZERS:
        raise ValueError(f"Unknown quantization method: {method}")
    if not 1 <= color_count <= MAX_PALETTE_SIZE:
        raise ValueError(f"color_count must be in [1, {MAX_PALETTE_SIZE}], got {color_count}")

    height, width = rgba.shape[:2]
    pixels = sample_pixels(rgba, quality=quality, alpha_threshold=alpha_threshold,
                           ignore_white=ignore_white)

    if method == "kmeans":
        palette, ratios = cluster_palette(pixels, k=color_count, rng_seed=rng_seed)
    else:
        palette, ratios = median_cut_palette(pixels, color_count=color_count)

    logger.info(f"Extracted {len(palette)} colors from {width}x{height} image "
                f"({method}, dominant {palette[0].hex})")

    return ExtractionResult(
        width=width,
        height=height,
        sampled_pixels=len(pixels),
        method=method,
        palette=palette,
        ratios=ratios
    )
