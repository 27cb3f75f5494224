"""
API Routes sub-package for the Render Service.

Routers are re-exported here for inclusion in the main FastAPI application
(`api/main.py`).
"""

from .health_routes import router as health_router
from .render_routes import router as render_router

__all__ = [
    "health_router",
    "render_router",
]
