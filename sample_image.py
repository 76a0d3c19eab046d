"""
Load images and reduce them to a bounded set of RGB points.
"""

import io
from pathlib import Path

import numpy as np
import requests
from PIL import Image


# =============================================================================
# Constants
# =============================================================================

DEFAULT_MAX_DIMENSION = 300  # Longest side after subsampling
HTTP_TIMEOUT = 30  # Seconds

# Image size limits (security: prevent decompression bombs)
MAX_IMAGE_PIXELS = 50_000_000  # 50 megapixels


class ImageDecodeFailure(ValueError):
    """Raised when an image source cannot be fetched or decoded."""


# =============================================================================
# Loading
# =============================================================================

def _open_source(source):
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(source)

    if isinstance(source, str) and source.lower().startswith(("http://", "https://")):
        try:
            resp = requests.get(source, timeout=HTTP_TIMEOUT)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise ImageDecodeFailure(f"Could not fetch image {source}: {e}") from e
        return io.BytesIO(resp.content)

    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.is_file():
            raise ImageDecodeFailure(f"Image not found: {source}")
        return path

    # Binary file object
    return source


def load_image(source) -> Image.Image:
    """
    Decode an image from a path, URL, bytes or binary file object.

    Raises:
        ImageDecodeFailure: If the source is missing, unreachable, not an
            image, or exceeds MAX_IMAGE_PIXELS
    """
    fp = _open_source(source)

    try:
        img = Image.open(fp)
    except Exception as e:
        raise ImageDecodeFailure(f"Could not open image: {e}") from e

    # Header only so far; reject before decoding pixel data
    width, height = img.size
    if width * height > MAX_IMAGE_PIXELS:
        raise ImageDecodeFailure(
            f"Image has {width * height:,} pixels, exceeding maximum {MAX_IMAGE_PIXELS:,}"
        )

    try:
        img.load()
    except Exception as e:
        raise ImageDecodeFailure(f"Could not decode image: {e}") from e

    return img


# =============================================================================
# Subsampling
# =============================================================================

def subsample_dimensions(width: int, height: int,
                         max_dimension: int = DEFAULT_MAX_DIMENSION) -> tuple[int, int]:
    """
    Target size for an image whose longest side must not exceed max_dimension.

    The longer side becomes max_dimension and the shorter side follows the
    aspect ratio, truncated toward zero (never below 1 pixel). Images already
    within bounds keep their size.
    """
    if max_dimension < 1:
        raise ValueError(f"max_dimension must be at least 1, got {max_dimension}")

    if width <= max_dimension and height <= max_dimension:
        return width, height

    aspect_ratio = width / height
    if width > height:
        new_width = max_dimension
        new_height = int(new_width / aspect_ratio)
    else:
        new_height = max_dimension
        new_width = int(new_height * aspect_ratio)

    return max(new_width, 1), max(new_height, 1)


def subsample_image(image: Image.Image,
                    max_dimension: int = DEFAULT_MAX_DIMENSION) -> Image.Image:
    """Convert to RGB and shrink so neither side exceeds max_dimension."""
    rgb = image.convert('RGB')
    size = subsample_dimensions(rgb.width, rgb.height, max_dimension)

    if size == rgb.size:
        return rgb
    return rgb.resize(size, Image.Resampling.BILINEAR)


def sample_points(image: Image.Image,
                  max_dimension: int = DEFAULT_MAX_DIMENSION) -> np.ndarray:
    """
    Read every pixel of the subsampled image.

    Returns:
        Integer array of shape (width * height, 3), rows in row-major pixel
        order (left to right, top to bottom)
    """
    small = subsample_image(image, max_dimension)
    pixels = np.array(small)
    return pixels.reshape(-1, 3).astype(np.int64)
