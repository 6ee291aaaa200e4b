"""Remote collaborators: OCR extraction, vision captions and usage lookup.

The core never retries these calls and sets no policy beyond the configured
timeouts; failures surface as ``ProviderError``.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import httpx

from core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """A remote collaborator call failed."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class OcrProvider(Protocol):
    def extract(self, pdf_bytes: bytes) -> Any: ...


class ChatModelLike(Protocol):
    def invoke(self, input: object) -> Any: ...


class MistralOcrClient:
    """OCR collaborator posting the PDF as a base64 data URI."""

    def __init__(
        self,
        api_key: str,
        *,
        settings: Optional[Settings] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._api_key = api_key
        self._settings = settings or get_settings()
        self._client = client

    def extract(self, pdf_bytes: bytes) -> Any:
        encoded = base64.b64encode(pdf_bytes).decode("ascii")
        payload = {
            "model": self._settings.ocr_model,
            "document": {
                "type": "document_url",
                "document_url": f"data:application/pdf;base64,{encoded}",
            },
            "include_image_base64": self._settings.ocr_include_image_base64,
        }
        logger.debug("Sending %d bytes to %s", len(pdf_bytes), self._settings.ocr_api_url)
        response = self._post(payload)
        if response.is_error:
            details = response.text or None
            raise ProviderError(
                f"Mistral OCR {response.status_code}: {details or 'no details'}",
                status_code=response.status_code,
                details=details,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError("Mistral OCR returned invalid JSON.") from exc

    def _post(self, payload: dict[str, Any]) -> httpx.Response:
        headers = _auth_headers(self._api_key)
        headers["Content-Type"] = "application/json"
        try:
            if self._client is not None:
                return self._client.post(
                    self._settings.ocr_api_url,
                    headers=headers,
                    json=payload,
                    timeout=self._settings.ocr_timeout,
                )
            with httpx.Client(timeout=self._settings.ocr_timeout) as client:
                return client.post(self._settings.ocr_api_url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            raise ProviderError(f"Mistral OCR request failed: {exc}") from exc


@dataclass(frozen=True)
class VisionConfig:
    model: str
    model_provider: Optional[str] = None
    prompt: str = ""
    timeout: Optional[float] = None
    max_tokens: Optional[int] = None
    max_retries: Optional[int] = 0

    @classmethod
    def from_settings(cls, settings: Settings) -> "VisionConfig":
        return cls(
            model=settings.vision_model,
            model_provider=settings.vision_model_provider or None,
            prompt=settings.vision_prompt,
            timeout=settings.vision_timeout,
            max_tokens=settings.vision_max_tokens,
            max_retries=settings.vision_max_retries,
        )


class VisionDescriber:
    """Vision collaborator producing short image captions via a chat model."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        config: Optional[VisionConfig] = None,
        llm: Optional[ChatModelLike] = None,
    ) -> None:
        self._api_key = api_key
        self._config = config or VisionConfig.from_settings(get_settings())
        self._llm = llm

    def describe(self, base64_image: str) -> Optional[str]:
        if not base64_image or not self._config.model:
            return None
        from langchain_core.messages import HumanMessage

        message = HumanMessage(
            content=[
                {"type": "text", "text": self._config.prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:image/jpeg;base64,{base64_image}"},
                },
            ]
        )
        response = self._model().invoke([message])
        return extract_caption(getattr(response, "content", response))

    def _model(self) -> ChatModelLike:
        if self._llm is None:
            self._llm = _init_chat_model(self._config, self._api_key)
        return self._llm


def extract_caption(content: Any) -> Optional[str]:
    """Pull the caption text out of a chat completion's content."""
    if isinstance(content, str):
        return content.strip() or None
    if isinstance(content, list) and content:
        parts = [part for part in content if isinstance(part, dict)]
        text_part = next((part for part in parts if part.get("type") == "text"), None)
        if text_part is None and parts:
            text_part = parts[0]
        if text_part is not None and isinstance(text_part.get("text"), str):
            return text_part["text"].strip() or None
        if isinstance(content[0], str):
            return content[0].strip() or None
    return None


def fetch_usage(
    api_key: str,
    *,
    settings: Optional[Settings] = None,
    client: Optional[httpx.Client] = None,
) -> Any:
    """Proxy the provider's usage endpoint; requires ``usage_api_url``."""
    resolved = settings or get_settings()
    if not resolved.usage_api_url:
        raise ProviderError("Usage endpoint is not configured.", status_code=501)
    try:
        if client is not None:
            response = client.get(resolved.usage_api_url, headers=_auth_headers(api_key))
        else:
            with httpx.Client(timeout=resolved.ocr_timeout) as owned:
                response = owned.get(resolved.usage_api_url, headers=_auth_headers(api_key))
    except httpx.HTTPError as exc:
        raise ProviderError(f"Usage request failed: {exc}") from exc

    if response.is_error:
        raise ProviderError(
            f"Usage request failed ({response.status_code})",
            status_code=response.status_code,
            details=(response.text or "")[:500] or None,
        )
    if not response.text:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise ProviderError("Usage response could not be read.") from exc


def _auth_headers(api_key: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {api_key}", "Accept": "application/json"}


def _init_chat_model(config: VisionConfig, api_key: Optional[str]) -> ChatModelLike:
    from langchain.chat_models import init_chat_model

    kwargs: dict[str, Any] = {}
    if config.model_provider:
        kwargs["model_provider"] = config.model_provider
    if api_key:
        kwargs["api_key"] = api_key
    if config.timeout is not None:
        kwargs["timeout"] = config.timeout
    if config.max_tokens is not None:
        kwargs["max_tokens"] = config.max_tokens
    if config.max_retries is not None:
        kwargs["max_retries"] = config.max_retries

    return init_chat_model(config.model, **kwargs)


__all__ = [
    "ChatModelLike",
    "MistralOcrClient",
    "OcrProvider",
    "ProviderError",
    "VisionConfig",
    "VisionDescriber",
    "extract_caption",
    "fetch_usage",
]
