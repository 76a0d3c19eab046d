import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def two_tone_image():
    """40x20 image: left half pure red, right half pure blue."""
    pixels = np.zeros((20, 40, 3), dtype=np.uint8)
    pixels[:, :20] = (255, 0, 0)
    pixels[:, 20:] = (0, 0, 255)
    return Image.fromarray(pixels)


@pytest.fixture
def two_tone_path(tmp_path, two_tone_image):
    path = tmp_path / 'two_tone.png'
    two_tone_image.save(path)
    return path
