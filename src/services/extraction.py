"""Extraction service: OCR collaborator call plus document assembly."""

from __future__ import annotations

import json
import logging
from time import perf_counter
from typing import Any, Mapping

from normalization.assembler import assemble_document
from schemas.internal.documents import Document
from services.providers import OcrProvider, ProviderError

logger = logging.getLogger(__name__)

_PREVIEW_CHARS = 1200

EMPTY_RESULT_MESSAGE = "OCR returned no extractable content."


class EmptyResultError(RuntimeError):
    """The provider answered, but nothing could be assembled from it."""

    def __init__(self, payload: Any = None) -> None:
        super().__init__(EMPTY_RESULT_MESSAGE)
        self.payload = payload


def extract_document(pdf_bytes: bytes, provider: OcrProvider) -> Document:
    """Send the PDF to the OCR provider and normalize its answer."""
    start = perf_counter()
    try:
        payload = provider.extract(pdf_bytes)
    except ProviderError as exc:
        logger.error("OCR provider failed: %s", exc)
        raise
    logger.debug("OCR call finished in %.2fs", perf_counter() - start)
    return normalize_payload(payload)


def normalize_payload(payload: Any) -> Document:
    """Assemble a provider payload, failing when nothing is extractable."""
    document = assemble_document(payload)
    if document.is_empty:
        logger.error(
            "OCR returned no pages (keys=%s): %s",
            _payload_keys(payload),
            payload_preview(payload),
        )
        raise EmptyResultError(payload)
    logger.debug(
        "Assembled %d page(s), html=%s", len(document.pages), document.html is not None
    )
    return document


def payload_preview(payload: Any, limit: int = _PREVIEW_CHARS) -> str:
    try:
        text = json.dumps(payload, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        text = repr(payload)
    return text[:limit]


def _payload_keys(payload: Any) -> list[str]:
    if isinstance(payload, Mapping):
        return [str(key) for key in payload.keys()]
    return []


__all__ = [
    "EMPTY_RESULT_MESSAGE",
    "EmptyResultError",
    "extract_document",
    "normalize_payload",
    "payload_preview",
]
