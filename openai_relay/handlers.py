"""Relay handlers.

Two independent, stateless handlers share the same validation order:
method, credential, target, body. They differ only in how the upstream
payload is built and how the provider's answer is rendered back.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from fastapi import Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from .config import Settings, get_settings
from .errors import BadRequest, MethodNotAllowed, RelayError, ServerMisconfigured, UpstreamError
from .providers.openai import RESPONSES_PATH, MultimodalRequest, OpenAIProvider, loads_json
from .upstream import call_openai, get_upstream_transport

logger = logging.getLogger("openai-relay.handlers")


class _RelayHandler:
    def __init__(
        self,
        settings: Settings = Depends(get_settings),
        transport: Optional[httpx.AsyncBaseTransport] = Depends(get_upstream_transport),
    ):
        self._settings = settings
        self._transport = transport

    def _ensure_post(self, request: Request, message: str) -> None:
        if request.method != "POST":
            raise MethodNotAllowed(message)

    def _ensure_credential(self, message: str) -> None:
        if not self._settings.has_credential:
            logger.error("OpenAI API key is not configured on the server")
            raise ServerMisconfigured(message)

    async def _post(self, path: str, payload: Any) -> httpx.Response:
        url = OpenAIProvider.endpoint_url(self._settings.openai_base_url, path)
        return await call_openai(url, payload, self._settings, transport=self._transport)


class PassthroughHandler(_RelayHandler):
    """Forward an arbitrary JSON body to ``/v1/<path>`` and mirror the answer."""

    async def handle(self, request: Request) -> Response:
        try:
            return await self._relay(request)
        except RelayError as exc:
            return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
        except Exception as exc:
            logger.exception("Unexpected error while relaying request")
            return JSONResponse(
                status_code=500,
                content={"error": "Internal Server Error", "message": str(exc)},
            )

    async def _relay(self, request: Request) -> Response:
        self._ensure_post(request, "Only POST requests are supported.")
        self._ensure_credential("OpenAI API Key is not configured on the server.")

        path = request.query_params.get("path")
        if not path:
            raise BadRequest(
                'Missing "path" query parameter for OpenAI API endpoint (e.g., chat/completions).'
            )

        raw_body = await request.body()
        try:
            payload = loads_json(raw_body)
        except ValueError as exc:
            logger.warning("Failed to parse incoming request body: %s", exc)
            raise BadRequest("Invalid JSON in request body from client.")

        response = await self._post(path, payload)
        try:
            data = OpenAIProvider.parse_passthrough(response)
        except UpstreamError:
            logger.error(
                "OpenAI responded with non-JSON text (status %s): %s",
                response.status_code,
                response.text,
            )
            raise

        return JSONResponse(status_code=response.status_code, content=data)


class MultimodalHandler(_RelayHandler):
    """Turn ``{model, prompt, images}`` into a Responses API call and return ``{"text": ...}``."""

    async def handle(self, request: Request) -> Response:
        try:
            return await self._relay(request)
        except RelayError as exc:
            return PlainTextResponse(exc.message, status_code=exc.status_code)
        except Exception as exc:
            logger.exception("Unexpected error while relaying multimodal request")
            return PlainTextResponse(str(exc), status_code=400)

    async def _relay(self, request: Request) -> Response:
        self._ensure_post(request, "Method Not Allowed")
        self._ensure_credential("Server missing OpenAI API key configuration")

        raw_body = await request.body()
        try:
            body = loads_json(raw_body or b"{}")
        except ValueError as exc:
            raise BadRequest(f"Invalid JSON in request body: {exc}")
        if body is None:
            raise BadRequest("Request body must not be null")
        if not isinstance(body, dict):
            body = {}

        multimodal = MultimodalRequest.model_validate(body)
        payload = OpenAIProvider.build_responses_payload(multimodal)
        logger.info(
            "proxying multimodal request",
            extra={"model": multimodal.model, "images": len(payload["input"][0]["content"]) - 1},
        )

        response = await self._post(RESPONSES_PATH, payload)
        if not response.is_success:
            logger.warning("OpenAI responded with status %s", response.status_code)
            raise UpstreamError(response.text, status_code=response.status_code)

        return JSONResponse(content={"text": OpenAIProvider.extract_output_text(response.text)})
