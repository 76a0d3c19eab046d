"""
Build colour palettes from k-means clusters and order them by luminance.
"""

from dataclasses import dataclass

import numpy as np
from PIL import Image

from kmeans import DEFAULT_MAX_ITERATIONS, kmeans
from sample_image import DEFAULT_MAX_DIMENSION, sample_points


# Rec. 709 luma weights
LUMINANCE_WEIGHTS = (0.2126, 0.7152, 0.0722)


@dataclass(frozen=True)
class Color:
    """A palette entry: averaged RGB channels and the cluster population."""
    red: int
    green: int
    blue: int
    count: int = 0

    @classmethod
    def from_channels(cls, channels, count: int = 0) -> 'Color':
        """Build a Color from three (possibly fractional) channel values."""
        red, green, blue = (int(c) for c in np.clip(round_half_up(channels), 0, 255))
        return cls(red, green, blue, int(count))

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    @property
    def hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"


def round_half_up(values) -> np.ndarray:
    """
    Round to the nearest integer, halves away from zero.

    Channel means are never negative, so this is floor(x + 0.5): 127.5 -> 128,
    unlike numpy's round-half-to-even.
    """
    values = np.asarray(values, dtype=np.float64)
    return np.sign(values) * np.floor(np.abs(values) + 0.5)


def build_palette(points, palette_size: int,
                  max_iterations: int = DEFAULT_MAX_ITERATIONS,
                  rng=None) -> list[Color]:
    """
    Cluster RGB points and average each cluster into one Color.

    Args:
        points: Sequence of (R, G, B) points or an (n, 3) array
        palette_size: Number of clusters / colours
        max_iterations: Iteration cap passed to k-means
        rng: Random source for centroid seeding (Generator, seed or None)

    Returns:
        List of palette_size Colors in cluster order. An empty cluster yields
        its frozen centroid with count 0.
    """
    result = kmeans(points, palette_size, max_iterations=max_iterations, rng=rng)

    palette = []
    for members, centroid in zip(result.clusters, result.centroids):
        if len(members) > 0:
            palette.append(Color.from_channels(members.mean(axis=0), count=len(members)))
        else:
            palette.append(Color.from_channels(centroid, count=0))

    return palette


def image_color_palette(image: Image.Image, palette_size: int,
                        max_dimension: int = DEFAULT_MAX_DIMENSION,
                        max_iterations: int = DEFAULT_MAX_ITERATIONS,
                        rng=None) -> list[Color]:
    """Subsample an image and build its palette."""
    points = sample_points(image, max_dimension)
    return build_palette(points, palette_size, max_iterations=max_iterations, rng=rng)


def luminance(color: Color) -> float:
    """Perceptual brightness: 0.2126 R + 0.7152 G + 0.0722 B."""
    wr, wg, wb = LUMINANCE_WEIGHTS
    return wr * color.red + wg * color.green + wb * color.blue


def sort_by_luminance(palette: list[Color], descending: bool = True) -> list[Color]:
    """
    Stable sort by luminance.

    Descending puts the brightest colour first. Colours with equal luminance
    keep their relative order in both directions.
    """
    return sorted(palette, key=luminance, reverse=descending)
