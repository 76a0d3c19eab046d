#!/usr/bin/env python3
"""
Extract a page-header gradient from an image.

Four stages: Sampling → Clustering → Ordering → Render
The result is a CSS linear-gradient value built from the image's dominant
colours, brightest first, fading into the page background.
"""

import argparse
import sys
import time
from dataclasses import dataclass, field
from typing import Optional

from gradient import PAGE_BACKGROUND_STOP, render_gradient
from gradient_cache import DEFAULT_TTL, MOVIE_IMAGE_GRADIENT, GradientCache, mount_key
from kmeans import DEFAULT_MAX_ITERATIONS
from palette import Color, build_palette, sort_by_luminance
from sample_image import DEFAULT_MAX_DIMENSION, load_image, sample_points


# =============================================================================
# Constants
# =============================================================================

DEFAULT_PALETTE_SIZE = 2
DEFAULT_DIRECTION = 'left'
DEFAULT_TRAILING_STOP = PAGE_BACKGROUND_STOP


# =============================================================================
# Pipeline
# =============================================================================

@dataclass
class GradientResult:
    """Output of a full pipeline run."""
    gradient: str
    palette: list  # Colors in gradient order
    num_points: int  # Points fed to k-means
    timings: dict = field(default_factory=dict)  # stage -> seconds


def run_pipeline(source, palette_size: int = DEFAULT_PALETTE_SIZE,
                 direction: str = DEFAULT_DIRECTION,
                 trailing_stop: str = DEFAULT_TRAILING_STOP,
                 max_dimension: int = DEFAULT_MAX_DIMENSION,
                 max_iterations: int = DEFAULT_MAX_ITERATIONS,
                 descending: bool = True,
                 rng=None) -> GradientResult:
    """
    Run every stage on one image source.

    Raises:
        ImageDecodeFailure: If the source cannot be loaded
        InvalidClusterRequest: If palette_size is out of range for the image
    """
    timings = {}

    # Stage 1: Sampling
    start = time.perf_counter()
    image = load_image(source)
    points = sample_points(image, max_dimension)
    timings['sample'] = time.perf_counter() - start

    # Stage 2: Clustering
    start = time.perf_counter()
    palette = build_palette(points, palette_size, max_iterations=max_iterations, rng=rng)
    timings['cluster'] = time.perf_counter() - start

    # Stage 3: Ordering
    start = time.perf_counter()
    palette = sort_by_luminance(palette, descending=descending)
    timings['order'] = time.perf_counter() - start

    # Stage 4: Render
    start = time.perf_counter()
    gradient = render_gradient(palette, direction=direction, trailing_stop=trailing_stop)
    timings['render'] = time.perf_counter() - start

    return GradientResult(
        gradient=gradient,
        palette=palette,
        num_points=len(points),
        timings=timings,
    )


def generate_gradient(source, palette_size: int = DEFAULT_PALETTE_SIZE,
                      direction: str = DEFAULT_DIRECTION,
                      trailing_stop: str = DEFAULT_TRAILING_STOP,
                      max_dimension: int = DEFAULT_MAX_DIMENSION,
                      rng=None) -> str:
    """Cache-free gradient extraction."""
    return run_pipeline(
        source,
        palette_size=palette_size,
        direction=direction,
        trailing_stop=trailing_stop,
        max_dimension=max_dimension,
        rng=rng,
    ).gradient


def gradient_cache_key(image_url: str, palette_size: int = DEFAULT_PALETTE_SIZE,
                       direction: str = DEFAULT_DIRECTION,
                       trailing_stop: str = DEFAULT_TRAILING_STOP,
                       max_dimension: int = DEFAULT_MAX_DIMENSION) -> str:
    return mount_key(
        MOVIE_IMAGE_GRADIENT,
        imageURL=image_url,
        paletteSize=palette_size,
        direction=direction,
        trailingStop=trailing_stop,
        maxDimension=max_dimension,
    )


def generate_css_gradient_from_image(image_url: str,
                                     cache: Optional[GradientCache] = None,
                                     ttl: float = DEFAULT_TTL,
                                     palette_size: int = DEFAULT_PALETTE_SIZE,
                                     direction: str = DEFAULT_DIRECTION,
                                     trailing_stop: str = DEFAULT_TRAILING_STOP,
                                     max_dimension: int = DEFAULT_MAX_DIMENSION,
                                     rng=None) -> str:
    """
    Gradient for an image URL or path, memoised in `cache` when one is given.

    The cache key covers the image and every option that changes the
    rendered string. A miss computes the gradient and stores it for `ttl`
    seconds. Concurrent misses each compute and store.
    """
    options = dict(
        palette_size=palette_size,
        direction=direction,
        trailing_stop=trailing_stop,
        max_dimension=max_dimension,
    )
    if cache is None:
        return generate_gradient(image_url, rng=rng, **options)

    key = gradient_cache_key(image_url, **options)
    if cache.has(key):
        cached = cache.get(key)
        if cached is not None:
            return cached

    gradient = generate_gradient(image_url, rng=rng, **options)
    cache.put(key, gradient, ttl)
    return gradient


def format_palette(palette: list[Color]) -> str:
    """One line per colour: hex, rgb and cluster population."""
    total = sum(c.count for c in palette) or 1
    lines = []
    for i, color in enumerate(palette, 1):
        pct = color.count / total * 100
        lines.append(f"  {i}. {color.hex}  rgb{color.rgb}  {color.count:>7,} px ({pct:5.1f}%)")
    return '\n'.join(lines)


# =============================================================================
# CLI
# =============================================================================

def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Extract a CSS gradient from the dominant colours of an image.'
    )
    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Path or http(s) URL of the image'
    )
    parser.add_argument(
        '--palette-size', '-k',
        type=int,
        default=DEFAULT_PALETTE_SIZE,
        help=f'Number of colours to extract (default: {DEFAULT_PALETTE_SIZE})'
    )
    parser.add_argument(
        '--direction', '-d',
        default=DEFAULT_DIRECTION,
        help=f'Gradient direction after "to" (default: {DEFAULT_DIRECTION})'
    )
    parser.add_argument(
        '--trailing-stop',
        default=DEFAULT_TRAILING_STOP,
        help='Final stop appended after the colours'
    )
    parser.add_argument(
        '--no-trailing-stop',
        action='store_true',
        help='Omit the trailing stop'
    )
    parser.add_argument(
        '--ascending',
        action='store_true',
        help='Order colours darkest first instead of brightest first'
    )
    parser.add_argument(
        '--max-dimension',
        type=int,
        default=DEFAULT_MAX_DIMENSION,
        help=f'Longest side after subsampling (default: {DEFAULT_MAX_DIMENSION})'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Seed for centroid initialisation (reproducible output)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Print the palette and stage timings'
    )

    args = parser.parse_args(argv)

    try:
        result = run_pipeline(
            args.input,
            palette_size=args.palette_size,
            direction=args.direction,
            trailing_stop='' if args.no_trailing_stop else args.trailing_stop,
            max_dimension=args.max_dimension,
            descending=not args.ascending,
            rng=args.seed,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(result.gradient)

    if args.verbose:
        print(f"\nPalette ({result.num_points:,} sampled pixels):")
        print(format_palette(result.palette))

        total = sum(result.timings.values())
        print("\nStage timings:")
        for stage, t in result.timings.items():
            pct = t / total * 100 if total else 0
            print(f"  {stage:<10} {t:8.4f}s ({pct:5.1f}%)")
        print(f"  {'total':<10} {total:8.4f}s")


if __name__ == '__main__':
    main()
