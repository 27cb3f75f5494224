"""
FastAPI dependency providers.

The browser session is created once per process and shared by every request;
a `PageRenderer` is handed out per request after the session is ready.
Request bodies are validated by their own dependencies, declared ahead of the
renderer in each endpoint, so invalid requests never touch the browser.
"""
from typing import Any, Optional

from fastapi import Depends, Request

from render_service.components.renderer.browser_session import BrowserSession
from render_service.components.renderer.page_renderer import PageRenderer
from render_service.core.config import config_manager
from render_service.core.exceptions import InvalidRequestBodyError
from render_service.core.schemas import ImageRequest, PdfRequest
from render_service.core.validation import validate_image_request, validate_pdf_request

_browser_session: Optional[BrowserSession] = None


def get_browser_session() -> BrowserSession:
    global _browser_session
    if _browser_session is None:
        _browser_session = BrowserSession(config=config_manager)
    return _browser_session


async def get_page_renderer(session: BrowserSession = Depends(get_browser_session)) -> PageRenderer:
    await session.ensure_launched()
    return PageRenderer(session, config=config_manager)


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise InvalidRequestBodyError("Request body must be valid JSON")


async def pdf_request_body(request: Request) -> PdfRequest:
    return validate_pdf_request(await _json_body(request))


async def image_request_body(request: Request) -> ImageRequest:
    return validate_image_request(await _json_body(request))
