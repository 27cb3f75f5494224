"""
Renderer component for the Render Service.

This sub-package owns the shared headless browser session and the per-request
page orchestration that turns a URL or inline HTML into PDF or image bytes.
"""
from .browser_session import BrowserSession
from .page_renderer import PageRenderer

__all__ = [
    "BrowserSession",
    "PageRenderer",
]
