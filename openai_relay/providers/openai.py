"""OpenAI request/response shapes used by the relay handlers."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field, validator

from ..errors import UpstreamError

DEFAULT_MODEL = "gpt-5-thinking"
DEFAULT_IMAGE_MIME = "image/jpeg"
RESPONSES_PATH = "responses"
RESPONSES_TEMPERATURE = 0.2
RAW_EXCERPT_LENGTH = 200


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def loads_json(text: Any) -> Any:
    """Strict ``json.loads``: ``NaN``, ``Infinity`` and ``-Infinity`` are rejected."""
    return json.loads(text, parse_constant=_reject_constant)


def _is_falsy(value: Any) -> bool:
    # Empty arrays and objects count as present.
    return value is None or (not isinstance(value, (list, dict)) and not value)


def as_text(value: Any) -> str:
    """Render a decoded JSON value the way a browser's ``String()`` would."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ",".join("" if item is None else as_text(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


class ImageInput(BaseModel):
    name: Optional[str] = None
    mime: Optional[str] = None
    b64: Optional[str] = None

    @validator("name", "mime", "b64", pre=True)
    def _falsy_is_missing(cls, value: object) -> Optional[str]:
        if _is_falsy(value):
            return None
        return as_text(value)

    def data_uri(self) -> str:
        return f"data:{self.mime or DEFAULT_IMAGE_MIME};base64,{self.b64}"


class MultimodalRequest(BaseModel):
    """Body accepted by the multimodal route."""

    model: Any = Field(default=DEFAULT_MODEL, description="Absent or empty falls back to DEFAULT_MODEL, else sent as-is")
    prompt: str = Field(default="", description="Coerced to a string")
    images: List[ImageInput] = Field(default_factory=list, description="Non-array values are treated as empty")

    @validator("model", pre=True)
    def _default_model(cls, value: object) -> Any:
        return DEFAULT_MODEL if _is_falsy(value) else value

    @validator("prompt", pre=True)
    def _coerce_prompt(cls, value: object) -> str:
        if _is_falsy(value):
            return ""
        return as_text(value)

    @validator("images", pre=True)
    def _only_image_objects(cls, value: object) -> List[Any]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]


class OpenAIProvider:
    """Adapter for the OpenAI REST API."""

    @staticmethod
    def endpoint_url(base_url: str, path: str) -> str:
        return f"{base_url}/{path}"

    @staticmethod
    def build_responses_payload(request: MultimodalRequest) -> Dict[str, Any]:
        """Build a Responses API payload: one user turn, text first, then images in order.

        Images without a base64 payload are skipped.
        """
        content: List[Dict[str, Any]] = [{"type": "input_text", "text": request.prompt}]
        for image in request.images:
            if not image.b64:
                continue
            content.append({"type": "input_image", "image_url": {"url": image.data_uri()}})

        return {
            "model": request.model,
            "input": [{"role": "user", "content": content}],
            "temperature": RESPONSES_TEMPERATURE,
        }

    @staticmethod
    def extract_output_text(text: str) -> str:
        """Pull the assistant text out of a Responses API body.

        Falls back to the top-level ``output_text`` field, and to the raw
        text itself when the body is not a JSON object.
        """
        try:
            data = loads_json(text)
        except ValueError:
            return text
        if not isinstance(data, dict):
            return text

        outputs = data.get("output")
        if not isinstance(outputs, list):
            outputs = []

        parts = []
        for output in outputs:
            blocks = output.get("content") if isinstance(output, dict) else None
            if not isinstance(blocks, list):
                continue
            for block in blocks:
                if (
                    isinstance(block, dict)
                    and block.get("type") == "output_text"
                    and isinstance(block.get("text"), str)
                ):
                    parts.append(block["text"])

        out_text = "\n".join(parts).strip()
        if not out_text and isinstance(data.get("output_text"), str):
            out_text = data["output_text"]
        return out_text

    @staticmethod
    def parse_passthrough(response: httpx.Response) -> Any:
        """Parse an upstream body as JSON whatever its status.

        Raises UpstreamError carrying the provider's status and the raw text
        when the body is not JSON.
        """
        text = response.text
        try:
            return loads_json(text)
        except ValueError:
            raise UpstreamError(
                "OpenAI returned a non-JSON response or an unexpected error format. "
                f"Status: {response.status_code}. Raw response: {text[:RAW_EXCERPT_LENGTH]}...",
                status_code=response.status_code,
                extra={"openai_raw_response": text},
            )
