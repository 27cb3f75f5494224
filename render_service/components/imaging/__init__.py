"""
Imaging component for the Render Service.

Holds the Pillow image codec and the adaptive fitter that shrinks screenshots
under a caller's byte budget.
"""
from .image_codec import ImageCodec
from .image_fitter import fit_image, fit_candidates, quality_ladder, scale_ladder

__all__ = [
    "ImageCodec",
    "fit_image",
    "fit_candidates",
    "quality_ladder",
    "scale_ladder",
]
