"""
Adaptive image fitting: shrink screenshot bytes under a byte budget.

The fitter walks a fixed, finite ladder of candidates and returns the first
encoding that fits:

1. Quality ladder: the original dimensions re-encoded at the initial quality
   (100 when unset or 0), then 10 lower each step, down to and including 10.
2. Scale ladder: the image resized to 0.9, 0.8, ... 0.3 of its dimensions
   (floored to whole pixels) and encoded at quality 70.

If nothing fits, the original bytes are returned unchanged; callers that need
a hard limit must check the size themselves.
"""
import math
from typing import Iterator, Optional, Tuple

from render_service.components.imaging.image_codec import ImageCodec
from render_service.core.logger import get_logger

logger = get_logger(__name__)

DEFAULT_QUALITY = 100
QUALITY_STEP = 10
MIN_QUALITY = 10
RESIZE_QUALITY = 70
# Scale candidates as tenths to avoid accumulating float error.
MAX_SCALE_TENTHS = 9
MIN_SCALE_TENTHS = 3

QUALITY_PHASE = "quality"
SCALE_PHASE = "scale"


def quality_ladder(initial_quality: Optional[int] = None) -> Iterator[int]:
    """Yield re-encode qualities from *initial_quality* down to MIN_QUALITY."""
    quality = initial_quality or DEFAULT_QUALITY
    while quality >= MIN_QUALITY:
        yield quality
        quality -= QUALITY_STEP


def scale_ladder() -> Iterator[float]:
    """Yield 0.9, 0.8, ..., 0.3."""
    for tenths in range(MAX_SCALE_TENTHS, MIN_SCALE_TENTHS - 1, -1):
        yield tenths / 10


def fit_candidates(initial_quality: Optional[int] = None) -> Iterator[Tuple[str, float]]:
    """Every (phase, value) pair the fitter may try, in order."""
    for quality in quality_ladder(initial_quality):
        yield QUALITY_PHASE, quality
    for scale in scale_ladder():
        yield SCALE_PHASE, scale


def scaled_size(size: Tuple[int, int], scale: float) -> Tuple[int, int]:
    width, height = size
    return max(1, math.floor(width * scale)), max(1, math.floor(height * scale))


def fit_image(
    image_bytes: bytes,
    image_format: str,
    max_file_size: int,
    initial_quality: Optional[int] = None,
    codec: Optional[ImageCodec] = None,
) -> bytes:
    """
    Return an encoding of *image_bytes* no larger than *max_file_size* when one
    exists on the ladder, otherwise *image_bytes* unchanged.

    Args:
        image_bytes (bytes): The captured image.
        image_format (str): Output format: "jpeg", "png" or "webp".
        max_file_size (int): Byte budget.
        initial_quality (Optional[int]): First rung of the quality ladder.
        codec (Optional[ImageCodec]): Codec to use; a Pillow `ImageCodec` by default.

    Returns:
        bytes: The first candidate within budget, or the original bytes.

    Raises:
        ImageCodecError: If *image_bytes* cannot be decoded.
    """
    if len(image_bytes) <= max_file_size:
        return image_bytes

    codec = codec or ImageCodec()
    source = codec.decode(image_bytes)
    original_size = source.size
    logger.debug(
        f"Fitting {len(image_bytes)} byte {image_format} image ({original_size[0]}x{original_size[1]}) "
        f"into {max_file_size} bytes."
    )

    for phase, value in fit_candidates(initial_quality):
        if phase == QUALITY_PHASE:
            candidate = codec.encode(source, image_format, int(value))
        else:
            if not all(original_size):
                break
            candidate = codec.resize_and_encode(
                source, image_format, scaled_size(original_size, value), RESIZE_QUALITY
            )
        if len(candidate) <= max_file_size:
            logger.info(
                f"Image fitted at {phase}={value}: {len(image_bytes)} -> {len(candidate)} bytes "
                f"(budget {max_file_size})."
            )
            return candidate

    logger.warning(
        f"Could not fit {image_format} image of {len(image_bytes)} bytes into {max_file_size} bytes; "
        f"returning original."
    )
    return image_bytes
