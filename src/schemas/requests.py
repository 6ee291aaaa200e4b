"""External request schemas."""

from __future__ import annotations

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from schemas.internal.annotations import AnnotationMap, ImageAnnotation, annotation_key
from schemas.internal.documents import Image, Page


class AnnotatedImage(Image):
    """Image as echoed back by the client, carrying its UI annotations."""

    removed: bool = Field(default=False, alias="_removed")
    description: Optional[str] = Field(default=None, alias="_description")
    replace_with_description: bool = Field(
        default=False, alias="_replaceWithDescription"
    )

    def annotation(self) -> ImageAnnotation:
        return ImageAnnotation(
            removed=self.removed,
            description=self.description,
            replace_with_description=self.replace_with_description,
        )

    def canonical(self) -> Image:
        return Image(id=self.id, base64=self.base64, position=self.position)


class AnnotatedPage(Page):
    images: List[AnnotatedImage] = Field(default_factory=list)


class ExportRequest(BaseModel):
    pages: List[AnnotatedPage] = Field(default_factory=list)
    html: Optional[str] = None
    disable_descriptions: bool = Field(default=False, alias="disableDescriptions")
    format: Literal["doc", "docx"] = "doc"

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def split_annotations(self) -> Tuple[List[Page], AnnotationMap]:
        """Separate canonical pages from the annotation overlay."""
        pages: List[Page] = []
        annotations: AnnotationMap = {}
        for page in self.pages:
            images: List[Image] = []
            for index, image in enumerate(page.images):
                annotation = image.annotation()
                if annotation != ImageAnnotation():
                    annotations[annotation_key(image, page.number, index)] = annotation
                images.append(image.canonical())
            pages.append(
                Page(
                    number=page.number,
                    lines=page.lines,
                    tables=page.tables,
                    images=images,
                )
            )
        return pages, annotations

    @property
    def fallback_html(self) -> str:
        return (self.html or "").strip()


class DescribeImageRequest(BaseModel):
    base64: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


__all__ = [
    "AnnotatedImage",
    "AnnotatedPage",
    "DescribeImageRequest",
    "ExportRequest",
]
