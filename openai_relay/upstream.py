from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from .config import Settings
from .errors import UpstreamUnreachable

logger = logging.getLogger("openai-relay.upstream")


def get_upstream_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Transport used for provider calls. None means httpx's default network transport."""
    return None


async def call_openai(
    url: str,
    payload: Any,
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.Response:
    """POST ``payload`` to ``url`` with the configured credential.

    Only transport failures raise; any status code the provider returns is
    handed back to the caller for normalization.
    """
    headers = {
        "Authorization": f"Bearer {settings.openai_api_key}",
        "Content-Type": "application/json",
    }

    logger.info("Proxying request to: %s", url)
    try:
        async with httpx.AsyncClient(timeout=settings.request_timeout_seconds, transport=transport) as client:
            response = await client.post(url, headers=headers, content=json.dumps(payload, allow_nan=False))
    except httpx.RequestError as exc:
        logger.error("Error during request to OpenAI API", extra={"url": url, "error": str(exc)})
        raise UpstreamUnreachable(f"Failed to communicate with OpenAI API. Details: {exc}")

    logger.info("OpenAI responded", extra={"url": url, "status": response.status_code})
    return response
