from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, validator
from pydantic_settings import BaseSettings

from .secrets import get_secret_from_manager, should_use_secret_manager

logger = logging.getLogger("openai-relay.config")


class Settings(BaseSettings):
    app_name: str = "openai-relay"
    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "openai_api_key"),
        description="Bearer credential attached to every upstream call. Never logged or returned.",
    )
    openai_base_url: str = "https://api.openai.com/v1"
    request_timeout_seconds: Optional[float] = Field(
        default=None,
        description="Upstream timeout. None leaves the call unbounded; the hosting layer owns timeouts.",
    )
    log_level: str = "INFO"

    # Secret Manager configuration
    gcp_project_id: Optional[str] = None
    secret_api_key_name: str = "openai-api-key"

    class Config:
        env_prefix = "OPENAI_RELAY_"
        env_file = ".env"
        extra = "ignore"
        frozen = True

    @validator("openai_api_key", pre=True)
    def _blank_key_is_missing(cls, value: object) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @validator("openai_base_url")
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def has_credential(self) -> bool:
        return bool(self.openai_api_key)


@lru_cache()
def get_settings() -> Settings:
    settings = Settings()
    if settings.has_credential or not should_use_secret_manager():
        return settings

    logger.info("Loading OpenAI API key from Secret Manager")
    api_key = get_secret_from_manager(settings.secret_api_key_name, settings.gcp_project_id)
    return settings.model_copy(update={"openai_api_key": api_key or None})
