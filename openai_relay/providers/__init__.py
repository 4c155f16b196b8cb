"""AI provider adapters."""

from .openai import ImageInput, MultimodalRequest, OpenAIProvider

__all__ = ["ImageInput", "MultimodalRequest", "OpenAIProvider"]
