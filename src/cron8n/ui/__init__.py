"""Web UI - FastAPI app serving a single page over the actions layer."""

from .server import create_app, serve

__all__ = ["create_app", "serve"]
