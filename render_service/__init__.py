"""Headless-browser rendering service: URL or HTML in, PDF or size-bounded image out."""

__version__ = "0.1.0"
