"""
HTTP middleware: request logging and the optional shared-secret gate.

When an API key is configured (``API_KEY`` environment variable, or
``security.api_key`` in the YAML config), every request except the health
check must carry it in the ``X-API-Key`` header.
"""
import os
import secrets
import time
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

from render_service.core.config import get_config
from render_service.core.logger import get_logger

logger = get_logger(__name__)

API_KEY_HEADER = "X-API-Key"
API_KEY_EXEMPT_PATHS = frozenset({"/health"})


def get_api_key() -> Optional[str]:
    """The configured shared secret, or None when the gate is disabled."""
    return os.getenv("API_KEY") or get_config("security.api_key")


async def api_key_middleware(request: Request, call_next):
    api_key = get_api_key()
    if not api_key or request.url.path in API_KEY_EXEMPT_PATHS:
        return await call_next(request)

    provided_key = request.headers.get(API_KEY_HEADER)
    if not provided_key:
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": "API key is required"})
    if not secrets.compare_digest(provided_key.encode(), str(api_key).encode()):
        logger.warning(f"Rejected request with invalid API key: {request.method} {request.url.path}")
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": "Invalid API key"})
    return await call_next(request)


async def request_logging_middleware(request: Request, call_next):
    """Logs method, path, status code and duration of every request."""
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.error(f"request | {request.method} {request.url.path} | failed | {duration_ms:.0f}ms")
        raise
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(f"request | {request.method} {request.url.path} | {response.status_code} | {duration_ms:.0f}ms")
    return response
