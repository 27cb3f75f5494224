import os

# Select the test configuration before any render_service module loads the global config.
os.environ.setdefault("APP_ENV", "testing")

import io

import pytest
from PIL import Image


def _noise_image(width: int = 400, height: int = 300, mode: str = "RGB") -> Image.Image:
    # Random pixels are incompressible, so encoded sizes track quality and dimensions.
    return Image.frombytes(mode, (width, height), os.urandom(width * height * len(mode)))


def _encode(image: Image.Image, image_format: str = "PNG", **params) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format=image_format, **params)
    return buffer.getvalue()


@pytest.fixture
def noise_image():
    return _noise_image


@pytest.fixture
def encode_image():
    return _encode


@pytest.fixture
def noise_png() -> bytes:
    return _encode(_noise_image())
