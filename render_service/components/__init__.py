"""
Components sub-package for the Render Service.

The `__all__` variable defines the public API of this sub-package,
making key components directly importable from `render_service.components`.
"""
from .renderer.browser_session import BrowserSession
from .renderer.page_renderer import PageRenderer
from .imaging.image_codec import ImageCodec
from .imaging.image_fitter import fit_image

__all__ = [
    "BrowserSession",
    "PageRenderer",
    "ImageCodec",
    "fit_image",
]
