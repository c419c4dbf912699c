# tests/conftest.py
from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from reconyx_overlay.models.image_model import RasterSurface


def encode(image, fmt="PNG", **kwargs):
    buf = BytesIO()
    image.save(buf, format=fmt, **kwargs)
    return buf.getvalue()


def solid(size, color):
    return RasterSurface.from_image(Image.new("RGBA", size, color))


@pytest.fixture
def red_base():
    return solid((100, 50), (255, 0, 0, 255))


@pytest.fixture
def blue_overlay():
    return solid((100, 50), (0, 0, 255, 255))


@pytest.fixture
def noisy_base():
    rng = np.random.default_rng(7)
    arr = rng.integers(0, 256, size=(40, 60, 4), dtype=np.uint8)
    arr[..., 3] = 255
    return RasterSurface.from_image(Image.fromarray(arr))
