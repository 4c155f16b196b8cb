"""FastAPI relay that keeps the OpenAI API key server-side for a trusted frontend."""

from .main import app, create_app

__all__ = ["app", "create_app"]
