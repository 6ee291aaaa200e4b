"""Application configuration and .env loading."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_VISION_PROMPT = (
    "Write a short, factual image description for a Word document. "
    "At most 2 sentences."
)


class Settings(BaseSettings):
    """Centralized runtime configuration.

    API keys are deliberately absent: callers pass their own key per request.
    """

    ocr_api_url: str = Field(
        default="https://api.mistral.ai/v1/ocr", validation_alias="MISTRAL_OCR_API_URL"
    )
    ocr_model: str = Field(
        default="mistral-ocr-latest", validation_alias="MISTRAL_OCR_MODEL"
    )
    ocr_timeout: float = Field(default=120.0, validation_alias="MISTRAL_OCR_TIMEOUT")
    ocr_include_image_base64: bool = Field(
        default=True, validation_alias="MISTRAL_OCR_INCLUDE_IMAGES"
    )

    vision_model: str = Field(
        default="pixtral-large-latest", validation_alias="MISTRAL_VISION_MODEL"
    )
    vision_model_provider: str = Field(
        default="mistralai", validation_alias="MISTRAL_VISION_MODEL_PROVIDER"
    )
    vision_timeout: float = Field(
        default=60.0, validation_alias="MISTRAL_VISION_TIMEOUT"
    )
    vision_max_tokens: int = Field(
        default=120, validation_alias="MISTRAL_VISION_MAX_TOKENS"
    )
    vision_max_retries: int = Field(
        default=0, validation_alias="MISTRAL_VISION_MAX_RETRIES"
    )
    vision_prompt: str = Field(
        default=DEFAULT_VISION_PROMPT, validation_alias="MISTRAL_VISION_PROMPT"
    )

    usage_api_url: str = Field(default="", validation_alias="MISTRAL_USAGE_API_URL")

    api_key_header: str = Field(
        default="X-Mistral-Api-Key", validation_alias="API_KEY_HEADER"
    )
    max_upload_mb: int = Field(default=50, validation_alias="MAX_UPLOAD_MB")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once from .env/environment."""
    return Settings()


__all__ = ["DEFAULT_VISION_PROMPT", "Settings", "get_settings"]
