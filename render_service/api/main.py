"""
Main application file for the Render Service API.

This file initializes the FastAPI application, sets up logging, installs the
request logging and API key middleware, registers the exception handlers that
shape error responses, and includes the API routers. The shared browser is
launched in the application lifespan and closed on shutdown.
"""
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from render_service import __version__
from render_service.api.dependencies import get_browser_session
from render_service.api.middleware import api_key_middleware, get_api_key, request_logging_middleware
from render_service.api.routes import health_router, render_router
from render_service.core.config import config_manager
from render_service.core.exceptions import RenderServiceError
from render_service.core.logger import setup_logging, get_logger

setup_logging(config_manager)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if get_api_key():
        logger.info("API key is required for all requests")
    else:
        logger.info("No API key is configured")

    session = get_browser_session()
    # Launching up front avoids paying the browser start-up cost on the first request.
    if config_manager.get("browser.launch_on_startup", True):
        await session.ensure_launched()
    yield
    await session.close()


app = FastAPI(
    title="Render Service API",
    description="Renders a URL or raw HTML to PDF or to an image that fits a byte budget, "
                "using a shared headless browser.",
    version=__version__,
    lifespan=lifespan,
)

# Last registered runs first: requests are logged before the API key check.
app.middleware("http")(api_key_middleware)
app.middleware("http")(request_logging_middleware)


@app.exception_handler(RenderServiceError)
async def render_service_exception_handler(request: Request, exc: RenderServiceError):
    """
    Converts validation, rendering and codec failures into the `400 {"error": message}` envelope.

    Args:
        request (Request): The incoming request that caused the exception.
        exc (RenderServiceError): The caught application exception.

    Returns:
        JSONResponse: HTTP 400 carrying the exception message.
    """
    logger.error(f"{exc.__class__.__name__} for {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.message})


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.critical(
        f"Unhandled exception {exc.__class__.__name__} for {request.method} {request.url.path}: {exc}",
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "An unexpected server error occurred."},
    )


app.include_router(health_router, tags=["General"])
app.include_router(render_router, tags=["Rendering"])


def run() -> None:
    """Serves the application with Uvicorn on `server.host`/`server.port` (``PORT`` overrides)."""
    import uvicorn

    host = config_manager.get("server.host", "0.0.0.0")
    port = int(os.getenv("PORT") or config_manager.get("server.port", 80))
    logger.info(f"Starting Render Service on {host}:{port} (environment: {config_manager.current_environment}).")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
