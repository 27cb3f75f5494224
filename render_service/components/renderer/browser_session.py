"""
Shared Playwright browser session for the Render Service.

This module provides the `BrowserSession` class, which owns the single
long-lived browser every request opens its pages on. The browser is launched
once (`ensure_launched()` is idempotent and safe to call concurrently) and
reused for the lifetime of the process. Accessing it before launch fails
fast with `BrowserNotLaunchedError`.
"""
import asyncio
import os
from typing import Optional, TYPE_CHECKING, List

from playwright.async_api import async_playwright, Playwright, Browser

from render_service.core.exceptions import BrowserNotLaunchedError, ConfigurationError, RendererError
from render_service.core.logger import get_logger

if TYPE_CHECKING:
    from render_service.core.config import ConfigurationManager

logger = get_logger(__name__)


class BrowserSession:
    """
    Lazily launched, process-wide browser handle.

    The session is configured via the application's `ConfigurationManager`
    (`browser.*` keys). Pages are opened per request on `current()`; the
    session itself holds no per-request state.

    Attributes:
        browser_type (str): The type of browser to launch (e.g., 'chromium').
        headless (bool): Whether the browser runs headless.
        launch_args (List[str]): Extra command line flags for the browser.
        executable_path (Optional[str]): Custom browser binary, if any.
    """
    DEFAULT_BROWSER_TYPE = 'chromium'
    SUPPORTED_BROWSER_TYPES = ('chromium', 'firefox', 'webkit')
    DEFAULT_LAUNCH_ARGS = ['--no-sandbox', '--disable-dev-shm-usage']

    def __init__(self, config: Optional['ConfigurationManager'] = None):
        """
        Initializes the BrowserSession without launching anything.

        Args:
            config (Optional[ConfigurationManager]): Source of `browser.browser_type`,
                `browser.headless`, `browser.launch_args` and `browser.executable_path`.
                If None, defaults are used.

        Raises:
            ConfigurationError: If an unsupported browser type is configured.
        """
        get = config.get if config else (lambda key, default=None: default)
        self.browser_type: str = get('browser.browser_type', self.DEFAULT_BROWSER_TYPE)
        self.headless: bool = bool(get('browser.headless', True))
        self.launch_args: List[str] = list(get('browser.launch_args', self.DEFAULT_LAUNCH_ARGS) or [])
        self.executable_path: Optional[str] = (
            os.getenv('BROWSER_EXECUTABLE_PATH') or get('browser.executable_path')
        )

        if self.browser_type not in self.SUPPORTED_BROWSER_TYPES:
            logger.error(f"Unsupported browser type configured: {self.browser_type}")
            raise ConfigurationError(
                f"Unsupported browser type: {self.browser_type}. Must be 'chromium', 'firefox', or 'webkit'."
            )

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    @property
    def is_launched(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def ensure_launched(self) -> None:
        """
        Starts Playwright and launches the browser if that has not happened yet.

        Calling this more than once, or from concurrent requests, is a no-op
        after the first successful launch.

        Raises:
            RendererError: If Playwright fails to start or the browser fails to launch
                           (typically because browser binaries are not installed).
        """
        if self.is_launched:
            return
        async with self._lock:
            if self.is_launched:
                return
            await self._launch()

    async def _launch(self) -> None:
        # A browser that dropped its connection is replaced, not reused.
        await self._shutdown()
        logger.info(f"Launching {self.browser_type} browser (headless={self.headless}).")
        try:
            self._playwright = await async_playwright().start()
            launcher = getattr(self._playwright, self.browser_type)
            launch_options = {"headless": self.headless, "args": self.launch_args}
            if self.executable_path:
                launch_options["executable_path"] = self.executable_path
            self._browser = await launcher.launch(**launch_options)
        except Exception as e:
            logger.error(f"Failed to launch browser {self.browser_type}: {e}", exc_info=True)
            await self._shutdown()
            raise RendererError(f"Failed to initialize Playwright or launch browser {self.browser_type}: {e}")
        logger.info(f"{self.browser_type} browser launched successfully.")

    def current(self) -> Browser:
        """
        Returns the shared browser.

        Raises:
            BrowserNotLaunchedError: If `ensure_launched()` has not completed.
        """
        if self._browser is None:
            raise BrowserNotLaunchedError()
        return self._browser

    async def close(self) -> None:
        """Closes the browser and stops Playwright. Used on application shutdown."""
        async with self._lock:
            await self._shutdown()

    async def _shutdown(self) -> None:
        if self._browser is not None:
            try:
                await self._browser.close()
                logger.info("Browser closed.")
            except Exception as e:
                logger.error(f"Error closing browser: {e}", exc_info=True)
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.error(f"Error stopping Playwright: {e}", exc_info=True)
        self._browser = None
        self._playwright = None
