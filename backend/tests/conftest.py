"""
Shared fixtures for the UX audit tests.
"""

import base64
import io

import numpy as np
import pytest
from PIL import Image

GRAY = (200, 200, 200)
BLUE = (30, 90, 220)


@pytest.fixture
def encode_image():
    """Encode an RGB/RGBA numpy array into image bytes."""
    def _encode(array: np.ndarray, fmt: str = "PNG") -> bytes:
        img = Image.fromarray(np.asarray(array, dtype=np.uint8))
        if fmt == "JPEG" and img.mode == "RGBA":
            img = img.convert("RGB")
        buffer = io.BytesIO()
        img.save(buffer, format=fmt)
        return buffer.getvalue()
    return _encode


@pytest.fixture
def to_data_url():
    """Wrap image bytes in a base64 data URL."""
    def _to_data_url(image_bytes: bytes, mime_type: str = "image/png") -> str:
        encoded = base64.b64encode(image_bytes).decode("utf-8")
        return f"data:{mime_type};base64,{encoded}"
    return _to_data_url


@pytest.fixture
def solid_pixel_png(encode_image):
    """A 1x1 white PNG."""
    return encode_image(np.full((1, 1, 3), 255, dtype=np.uint8))


@pytest.fixture
def half_planes():
    """400x400 image: white for x < 200, black from x = 200."""
    array = np.zeros((400, 400, 3), dtype=np.uint8)
    array[:, :200] = 255
    return array


@pytest.fixture
def small_square():
    """200x200 neutral background with an isolated 20x20 saturated square."""
    array = np.full((200, 200, 3), GRAY, dtype=np.uint8)
    array[100:120, 100:120] = BLUE
    return array


@pytest.fixture
def busy_screen():
    """Deterministic cluttered screen: stripes, coloured blocks and noise."""
    rng = np.random.default_rng(7)
    array = np.full((500, 900, 3), 245, dtype=np.uint8)
    array[:, ::3] = 20
    for i in range(8):
        x = 40 + i * 100
        array[60 + i * 10:100 + i * 10, x:x + 70] = (220, 40 + i * 20, 40)
    array[300:500] = rng.integers(0, 256, size=(200, 900, 3), dtype=np.uint8)
    return array
