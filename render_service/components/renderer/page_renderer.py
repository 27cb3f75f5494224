"""
Render orchestration: one request, one page.

`PageRenderer` opens a fresh page on the shared `BrowserSession`, applies the
viewport, loads the URL or inline HTML, captures a PDF or screenshot and
closes the page again, whether or not the capture succeeded. Screenshots
over their byte budget are then handed to the adaptive image fitter.
"""
import asyncio
import base64
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, TYPE_CHECKING

from playwright.async_api import Page

from render_service.components.imaging.image_codec import ImageCodec
from render_service.components.imaging.image_fitter import fit_image
from render_service.components.renderer.browser_session import BrowserSession
from render_service.core.exceptions import MissingTargetError, RenderServiceError, RendererError
from render_service.core.logger import get_logger
from render_service.core.schemas import (
    AnyRenderRequest,
    ExportOptions,
    ImageRequest,
    PdfRequest,
    RenderRequest,
    Viewport,
)

if TYPE_CHECKING:
    from render_service.core.config import ConfigurationManager

logger = get_logger(__name__)

# Playwright screenshots only come as PNG or JPEG; WEBP is transcoded afterwards.
SCREENSHOT_TYPES = {"jpeg": "jpeg", "png": "png", "webp": "png"}


class PageRenderer:
    """
    Drives a single browser page through load and capture.

    Attributes:
        session (BrowserSession): The shared browser session pages are opened on.
        navigation_timeout_ms (int): Timeout for `goto`/`set_content`, in milliseconds.
    """
    DEFAULT_NAVIGATION_TIMEOUT = 30000  # Milliseconds

    def __init__(
        self,
        session: BrowserSession,
        config: Optional['ConfigurationManager'] = None,
        codec: Optional[ImageCodec] = None,
    ):
        self.session = session
        self.navigation_timeout_ms = int(
            config.get('renderer.navigation_timeout_ms', self.DEFAULT_NAVIGATION_TIMEOUT)
            if config else self.DEFAULT_NAVIGATION_TIMEOUT
        )
        self.codec = codec or ImageCodec()

    async def render(self, request: AnyRenderRequest) -> bytes:
        """Render *request* to PDF or image bytes depending on its type."""
        if isinstance(request, ImageRequest):
            return await self.render_image(request)
        return await self.render_pdf(request)

    async def render_pdf(self, request: PdfRequest) -> bytes:
        """
        Prints the request's page to PDF.

        Returns:
            bytes: The PDF document.

        Raises:
            MissingTargetError: If the request has neither `url` nor `html`.
            RendererError: On navigation, timeout or print failures.
        """
        options = request.export
        async with self._page(options) as page:
            await self._load(page, request)
            pdf_bytes = await page.pdf(
                scale=options.scale,
                margin=options.margin.model_dump(),
                print_background=options.print_background,
            )
        logger.info(f"Generated PDF for {_describe(request)}: {len(pdf_bytes)} bytes.")
        return pdf_bytes

    async def render_image(self, request: ImageRequest) -> bytes:
        """
        Screenshots the request's page and fits the result under `maxFileSize`.

        The returned bytes may exceed the budget when no smaller encoding could be
        produced. With `encoding="base64"` the final image is base64 encoded.

        Raises:
            MissingTargetError: If the request has neither `url` nor `html`.
            RendererError: On navigation, timeout or screenshot failures.
            ImageCodecError: If the screenshot cannot be re-encoded.
        """
        options = request.export
        screenshot_options = {
            "type": SCREENSHOT_TYPES[options.format],
            "omit_background": options.omit_background,
        }
        if options.format == "jpeg":
            screenshot_options["quality"] = options.quality
        if options.clip is not None:
            screenshot_options["clip"] = options.clip.model_dump()
        else:
            screenshot_options["full_page"] = options.full_page

        async with self._page(options) as page:
            await self._load(page, request)
            image_bytes = await page.screenshot(**screenshot_options)

        if options.format == "webp":
            image_bytes = await asyncio.to_thread(
                self.codec.transcode, image_bytes, "webp", options.quality
            )

        if len(image_bytes) > options.max_file_size:
            image_bytes = await asyncio.to_thread(
                fit_image,
                image_bytes,
                options.format,
                options.max_file_size,
                options.quality,
                self.codec,
            )

        logger.info(f"Generated {options.format} image for {_describe(request)}: {len(image_bytes)} bytes.")
        if options.encoding == "base64":
            return base64.b64encode(image_bytes)
        return image_bytes

    @asynccontextmanager
    async def _page(self, options: ExportOptions) -> AsyncIterator[Page]:
        """Opens a page sized to `options.viewport` and closes it on exit."""
        browser = self.session.current()
        try:
            page = await browser.new_page()
        except Exception as e:
            raise RendererError(f"Failed to open a new page: {e}")
        try:
            if options.viewport is not None:
                await page.set_viewport_size(_viewport_size(options.viewport))
            yield page
        except RenderServiceError:
            raise
        except Exception as e:
            logger.error(f"Rendering failed: {e}", exc_info=True)
            raise RendererError(str(e))
        finally:
            try:
                await page.close()
            except Exception as e:
                logger.error(f"Error closing page: {e}", exc_info=True)

    async def _load(self, page: Page, request: RenderRequest) -> None:
        target = request.target
        if not target:
            raise MissingTargetError()
        if request.url:
            logger.debug(f"Navigating to {target} (timeout {self.navigation_timeout_ms}ms).")
            await page.goto(target, wait_until="load", timeout=self.navigation_timeout_ms)
        else:
            await page.set_content(target, wait_until="load", timeout=self.navigation_timeout_ms)


def _viewport_size(viewport: Viewport) -> dict:
    return {"width": viewport.width, "height": viewport.height}


def _describe(request: RenderRequest) -> str:
    return request.url or f"inline html ({len(request.target)} chars)"
