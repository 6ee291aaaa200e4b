"""User-driven image annotations layered over an extraction at export time."""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict

from schemas.internal.documents import Image


class ImageAnnotation(BaseModel):
    removed: bool = False
    description: Optional[str] = None
    replace_with_description: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def replacement(self) -> Optional[str]:
        """Description that should stand in for the image, if requested."""
        if self.replace_with_description and self.description:
            return self.description
        return None


AnnotationMap = Dict[str, ImageAnnotation]

NO_ANNOTATION = ImageAnnotation()


def annotation_key(image: Image, page_number: int, index: int) -> str:
    """Overlay key: explicit id, else the image's slot on its page.

    Id-less images never share a key, even when their payloads share a prefix.
    """
    return image.id or f"{page_number}-{index}"


def caption_key(image: Image, page_number: int, index: int) -> str:
    """Caption memo key: explicit id, else payload prefix, else the slot."""
    return image.identity_key() or f"{page_number}-{index}"


__all__ = [
    "AnnotationMap",
    "ImageAnnotation",
    "NO_ANNOTATION",
    "annotation_key",
    "caption_key",
]
