"""HTTP layer - FastAPI app, schemas and the uvicorn entry point."""

from .server import create_app

__all__ = ["create_app"]
