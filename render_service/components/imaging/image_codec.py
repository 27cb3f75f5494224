"""
Pillow-backed image codec used by the adaptive image fitter.

The codec decodes screenshot bytes once and re-encodes the decoded image as
JPEG, PNG or WEBP at a given quality, optionally after resizing.

Quality per format:
- JPEG and WEBP pass `quality` straight to the encoder.
- PNG has no quality knob. Below 100 the image is quantized to a palette of
  ``max(2, 256 * quality // 100)`` colours before being written with maximum
  zlib effort; at 100 it is written as truecolor.
"""
import io
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from render_service.core.exceptions import ImageCodecError
from render_service.core.logger import get_logger

logger = get_logger(__name__)

SUPPORTED_FORMATS = ("jpeg", "png", "webp")
PNG_COMPRESS_LEVEL = 9
MIN_PALETTE_COLORS = 2


class ImageCodec:
    """Decode / encode / resize operations on in-memory images."""

    def decode(self, data: bytes) -> Image.Image:
        """
        Decode *data* into a fully loaded Pillow image.

        Raises:
            ImageCodecError: If *data* is empty or not a readable image.
        """
        if not data:
            raise ImageCodecError("Cannot decode an empty image buffer.")
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as e:
            raise ImageCodecError(f"Failed to decode image: {e}")
        return image

    def encode(self, image: Image.Image, image_format: str, quality: int) -> bytes:
        """
        Encode *image* as *image_format* at *quality* (0-100).

        Raises:
            ImageCodecError: For an unsupported format or an encoder failure.
        """
        if image_format not in SUPPORTED_FORMATS:
            raise ImageCodecError(f"Unsupported image format: {image_format}")

        buffer = io.BytesIO()
        try:
            if image_format == "jpeg":
                _to_rgb(image).save(buffer, format="JPEG", quality=quality)
            elif image_format == "webp":
                _to_webp_mode(image).save(buffer, format="WEBP", quality=quality)
            else:
                _quantize_for_png(image, quality).save(
                    buffer, format="PNG", compress_level=PNG_COMPRESS_LEVEL
                )
        except (OSError, ValueError) as e:
            raise ImageCodecError(f"Failed to encode image as {image_format}: {e}")
        return buffer.getvalue()

    def resize_and_encode(
        self,
        image: Image.Image,
        image_format: str,
        size: Tuple[int, int],
        quality: int,
    ) -> bytes:
        width, height = size
        resized = image.resize((max(1, width), max(1, height)), Image.Resampling.LANCZOS)
        return self.encode(resized, image_format, quality)

    def transcode(self, data: bytes, image_format: str, quality: int) -> bytes:
        """Decode *data* and re-encode it as *image_format*."""
        return self.encode(self.decode(data), image_format, quality)


def _to_rgb(image: Image.Image) -> Image.Image:
    # JPEG has no alpha channel: composite onto white.
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def _to_webp_mode(image: Image.Image) -> Image.Image:
    if image.mode in ("RGB", "RGBA"):
        return image
    has_alpha = image.mode in ("LA", "PA") or "transparency" in image.info
    return image.convert("RGBA" if has_alpha else "RGB")


def _quantize_for_png(image: Image.Image, quality: int) -> Image.Image:
    if quality >= 100:
        return image
    colors = max(MIN_PALETTE_COLORS, 256 * quality // 100)
    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA")
    # FASTOCTREE handles RGBA input; MEDIANCUT (the RGB default) does not.
    method = Image.Quantize.FASTOCTREE if image.mode == "RGBA" else Image.Quantize.MEDIANCUT
    return image.quantize(colors=colors, method=method)
