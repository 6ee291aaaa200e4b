"""Image captioning for exports.

Captions are memoized by image identity so each distinct image reaches the
vision collaborator at most once per export. Calls are made strictly one after
another to stay within provider rate limits; a failing image gets a
placeholder caption and the batch continues.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Protocol

from schemas.internal.annotations import (
    NO_ANNOTATION,
    AnnotationMap,
    annotation_key,
    caption_key,
)
from schemas.internal.documents import Page

logger = logging.getLogger(__name__)

CAPTION_FAILED = "Image description could not be generated."


class VisionDescriber(Protocol):
    def describe(self, base64: str) -> Optional[str]: ...


class CaptionCache:
    """Per-export caption memo keyed by image identity."""

    def __init__(self, vision: VisionDescriber) -> None:
        self._vision = vision
        self._captions: Dict[str, str] = {}

    def seed(self, key: str, caption: str) -> None:
        self._captions[key] = caption

    def caption_for(self, key: str, base64: str) -> str:
        cached = self._captions.get(key)
        if cached is not None:
            return cached
        try:
            caption = self._vision.describe(base64) or CAPTION_FAILED
        except Exception as exc:
            logger.error("Image description failed for %s: %s", key, exc)
            caption = CAPTION_FAILED
        self._captions[key] = caption
        return caption

    def as_dict(self) -> Dict[str, str]:
        return dict(self._captions)


def generate_captions(
    pages: Iterable[Page],
    annotations: AnnotationMap,
    vision: VisionDescriber,
) -> Dict[str, str]:
    cache = CaptionCache(vision)
    for page in pages:
        for index, image in enumerate(page.images):
            annotation = annotations.get(
                annotation_key(image, page.number, index), NO_ANNOTATION
            )
            if not image.base64 or annotation.removed:
                continue
            key = caption_key(image, page.number, index)
            if annotation.replacement:
                # Id-less replacements stay on their own slot.
                if image.id:
                    cache.seed(key, annotation.replacement)
                continue
            cache.caption_for(key, image.base64)
    return cache.as_dict()


__all__ = ["CAPTION_FAILED", "CaptionCache", "VisionDescriber", "generate_captions"]
