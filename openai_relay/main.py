from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import Response

from .config import get_settings
from .handlers import MultimodalHandler, PassthroughHandler

settings = get_settings()

logger = logging.getLogger("openai-relay")
logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

app = FastAPI(title=settings.app_name)

# Every method is routed to the handlers so that they, not the router, answer non-POST calls.
RELAY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@app.middleware("http")
async def add_app_header(request: Request, call_next):  # type: ignore[override]
    response = await call_next(request)
    response.headers["X-App"] = settings.app_name
    return response


@app.get("/healthz")
async def health() -> dict:
    return {"status": "ok"}


@app.api_route("/openai-proxy", methods=RELAY_METHODS)
async def openai_proxy(request: Request, handler: PassthroughHandler = Depends()) -> Response:
    """Generic relay: forwards the JSON body to ``<base_url>/<path>``."""
    return await handler.handle(request)


@app.api_route("/oai", methods=RELAY_METHODS)
async def oai(request: Request, handler: MultimodalHandler = Depends()) -> Response:
    """Multimodal relay: prompt plus base64 images to the Responses API, answers ``{"text": ...}``."""
    return await handler.handle(request)


def create_app() -> FastAPI:
    return app
