import io

import pytest
from unittest.mock import MagicMock, patch
from PIL import Image

from render_service.components.imaging.image_codec import ImageCodec
from render_service.components.imaging.image_fitter import (
    RESIZE_QUALITY,
    fit_candidates,
    fit_image,
    quality_ladder,
    scale_ladder,
    scaled_size,
)
from render_service.core.exceptions import ImageCodecError


@pytest.fixture(autouse=True)
def mock_fitter_logger():
    with patch('render_service.components.imaging.image_fitter.logger', MagicMock()) as mock_log:
        yield mock_log


class CountingCodec(ImageCodec):
    """Real Pillow codec that records every call."""
    def __init__(self):
        self.decodes = 0
        self.encodes = []
        self.resizes = []

    def decode(self, data):
        self.decodes += 1
        return super().decode(data)

    def encode(self, image, image_format, quality):
        self.encodes.append(quality)
        return super().encode(image, image_format, quality)

    def resize_and_encode(self, image, image_format, size, quality):
        self.resizes.append((size, quality))
        return super().resize_and_encode(image, image_format, size, quality)


class SizedCodec:
    """Fake codec whose output sizes are scripted, so ladder decisions are deterministic."""
    def __init__(self, size=(1000, 500), quality_sizes=None, scale_sizes=None):
        self.image = MagicMock(size=size)
        self.quality_sizes = quality_sizes or {}
        self.scale_sizes = scale_sizes or {}
        self.calls = []

    def decode(self, data):
        self.calls.append(("decode",))
        return self.image

    def encode(self, image, image_format, quality):
        self.calls.append(("encode", image_format, quality))
        return b"q" * self.quality_sizes.get(quality, 10_000)

    def resize_and_encode(self, image, image_format, size, quality):
        self.calls.append(("resize", image_format, size, quality))
        return b"s" * self.scale_sizes.get(size, 10_000)


# --- Ladders ---

def test_quality_ladder_defaults_to_100():
    assert list(quality_ladder()) == [100, 90, 80, 70, 60, 50, 40, 30, 20, 10]
    assert list(quality_ladder(0)) == list(quality_ladder(None))


def test_quality_ladder_from_initial_quality():
    assert list(quality_ladder(55)) == [55, 45, 35, 25, 15]
    assert list(quality_ladder(10)) == [10]
    assert list(quality_ladder(9)) == []


def test_scale_ladder_exact_tenths():
    assert list(scale_ladder()) == [0.9, 0.8, 0.7, 0.6, 0.5, 0.4, 0.3]


def test_candidate_sequence_is_bounded_and_single_pass():
    candidates = fit_candidates()
    listed = list(candidates)
    assert len([c for c in listed if c[0] == "quality"]) == 10
    assert len([c for c in listed if c[0] == "scale"]) == 7
    assert len(listed) == 17
    assert list(candidates) == []  # exhausted, not restartable


def test_scaled_size_floors_and_keeps_one_pixel():
    assert scaled_size((1001, 333), 0.9) == (900, 299)
    assert scaled_size((2, 2), 0.3) == (1, 1)


# --- Fitting decisions ---

def test_image_within_budget_returned_without_codec_calls():
    codec = MagicMock()
    data = b"\x89PNG" + b"0" * 96
    assert fit_image(data, "png", max_file_size=100, codec=codec) is data
    codec.decode.assert_not_called()
    codec.encode.assert_not_called()


def test_first_quality_step_within_budget_wins():
    codec = SizedCodec(quality_sizes={100: 5000, 90: 4000, 80: 900, 70: 100})
    result = fit_image(b"x" * 2000, "jpeg", max_file_size=1000, initial_quality=100, codec=codec)
    assert result == b"q" * 900
    assert codec.calls == [
        ("decode",),
        ("encode", "jpeg", 100),
        ("encode", "jpeg", 90),
        ("encode", "jpeg", 80),
    ]


def test_quality_ladder_starts_at_requested_quality():
    codec = SizedCodec(quality_sizes={60: 50})
    fit_image(b"x" * 2000, "webp", max_file_size=100, initial_quality=60, codec=codec)
    assert [c[2] for c in codec.calls if c[0] == "encode"] == [60]


def test_scale_ladder_used_after_quality_ladder_fails():
    codec = SizedCodec(size=(1000, 500), scale_sizes={(600, 300): 999})
    result = fit_image(b"x" * 2000, "png", max_file_size=1000, codec=codec)

    assert result == b"s" * 999
    resize_calls = [c for c in codec.calls if c[0] == "resize"]
    assert [c[2] for c in resize_calls] == [(900, 450), (800, 400), (700, 350), (600, 300)]
    assert all(c[3] == RESIZE_QUALITY for c in resize_calls)
    assert len([c for c in codec.calls if c[0] == "encode"]) == 10


def test_unfittable_image_returns_original_after_bounded_attempts():
    codec = SizedCodec()
    original = b"x" * 2000
    result = fit_image(original, "jpeg", max_file_size=1, codec=codec)

    assert result is original
    assert codec.calls.count(("decode",)) == 1
    encodes = [c for c in codec.calls if c[0] != "decode"]
    assert len(encodes) == 17


def test_unknown_dimensions_skip_scale_ladder():
    codec = SizedCodec(size=(0, 0))
    original = b"x" * 2000
    assert fit_image(original, "png", max_file_size=10, codec=codec) is original
    assert not [c for c in codec.calls if c[0] == "resize"]


def test_corrupt_input_fails_fast():
    codec = CountingCodec()
    with pytest.raises(ImageCodecError):
        fit_image(b"definitely not an image" * 10, "png", max_file_size=10, codec=codec)
    assert codec.encodes == []
    assert codec.resizes == []


# --- Real Pillow encodes ---

def test_tiny_budget_with_real_codec_returns_original(noise_png):
    codec = CountingCodec()
    result = fit_image(noise_png, "png", max_file_size=1, codec=codec)

    assert result == noise_png
    assert codec.decodes == 1
    assert len(codec.encodes) == 10
    assert len(codec.resizes) == 7
    assert len(codec.encodes) + len(codec.resizes) <= 17


@pytest.mark.parametrize("image_format, pil_format", [("jpeg", "JPEG"), ("png", "PNG"), ("webp", "WEBP")])
def test_real_codec_meets_achievable_budget(noise_png, image_format, pil_format):
    budget = 60_000
    assert len(noise_png) > budget

    result = fit_image(noise_png, image_format, max_file_size=budget, initial_quality=100)

    assert len(result) <= budget
    with Image.open(io.BytesIO(result)) as fitted:
        assert fitted.format == pil_format
        assert fitted.size[0] <= 400 and fitted.size[1] <= 300
