"""
API sub-package for the Render Service.

This package contains the FastAPI application, its middleware, dependency
providers and route definitions. Import `render_service.api.main:app` to
serve it.
"""

__all__ = []
