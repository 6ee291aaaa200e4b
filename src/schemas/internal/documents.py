"""Canonical document model produced by OCR normalization.

Every view of an extraction (HTML preview, plain text, Word export) is derived
from these models. Field aliases follow the camelCase JSON contract shared with
the browser client, so dump with ``by_alias=True`` when serializing.
"""

from __future__ import annotations

from typing import Any, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_FONT_SIZE = "16px"
DEFAULT_FONT_FAMILY = "Inter, sans-serif"
DEFAULT_LETTER_SPACING = "0.15px"

FONT_WEIGHT_NORMAL = 400
FONT_WEIGHT_BOLD = 600

Alignment = Literal["left", "center", "right", "justify"]
TextDecoration = Literal["none", "underline", "line-through", "underline line-through"]

_FROZEN = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Point(BaseModel):
    x: float = 0.0
    y: float = 0.0

    model_config = _FROZEN


class Style(BaseModel):
    """Fully populated text style; defaults fill every unresolved field."""

    font_size: str = Field(default=DEFAULT_FONT_SIZE, alias="fontSize")
    font_weight: Literal[400, 600] = Field(default=FONT_WEIGHT_NORMAL, alias="fontWeight")
    font_style: Literal["normal", "italic"] = Field(default="normal", alias="fontStyle")
    text_decoration: TextDecoration = Field(default="none", alias="textDecoration")
    font_family: str = Field(default=DEFAULT_FONT_FAMILY, alias="fontFamily")
    letter_spacing: str = Field(default=DEFAULT_LETTER_SPACING, alias="letterSpacing")

    model_config = _FROZEN

    @property
    def bold(self) -> bool:
        return self.font_weight == FONT_WEIGHT_BOLD

    @property
    def italic(self) -> bool:
        return self.font_style == "italic"

    @property
    def underline(self) -> bool:
        return "underline" in self.text_decoration

    @property
    def line_through(self) -> bool:
        return "line-through" in self.text_decoration


class SegmentMeta(BaseModel):
    position: Point = Field(default_factory=Point)

    model_config = _FROZEN


class Segment(BaseModel):
    """Minimal run of text sharing one style."""

    text: str
    style: Style = Field(default_factory=Style)
    meta: SegmentMeta = Field(default_factory=SegmentMeta)

    model_config = _FROZEN


class Line(BaseModel):
    y: float = 0.0
    x: float = 0.0
    align: Alignment = "left"
    segments: List[Segment] = Field(default_factory=list)

    model_config = _FROZEN

    @property
    def text(self) -> str:
        return "".join(segment.text for segment in self.segments)


class Cell(BaseModel):
    text: str = ""
    is_header: bool = Field(default=False, alias="isHeader")
    col_span: int = Field(default=1, ge=1, alias="colSpan")
    row_span: int = Field(default=1, ge=1, alias="rowSpan")

    model_config = _FROZEN


class Table(BaseModel):
    """Normalized table with precomputed markup and plain-text projection."""

    id: str
    rows: List[List[Cell]] = Field(default_factory=list)
    html: str = ""
    text: str = ""
    y: float = 0.0
    bounding_box: Optional[Tuple[float, float, float, float]] = Field(
        default=None, alias="boundingBox"
    )

    model_config = _FROZEN


class ImagePosition(BaseModel):
    top_left: Point = Field(default_factory=Point, alias="topLeft")
    bottom_right: Point = Field(default_factory=Point, alias="bottomRight")

    model_config = _FROZEN


class Image(BaseModel):
    id: Optional[str] = None
    base64: Optional[str] = None
    position: ImagePosition = Field(default_factory=ImagePosition)

    model_config = _FROZEN

    def identity_key(self) -> Optional[str]:
        """Key used to share annotations and captions between references."""
        if self.id:
            return self.id
        if self.base64:
            return self.base64[:16]
        return None


class Page(BaseModel):
    number: int = Field(default=1, ge=1)
    lines: List[Line] = Field(default_factory=list)
    tables: List[Table] = Field(default_factory=list)
    images: List[Image] = Field(default_factory=list)

    model_config = _FROZEN


class Document(BaseModel):
    """Assembler output. ``raw`` keeps the provider payload for diagnostics."""

    pages: List[Page] = Field(default_factory=list)
    html: Optional[str] = None
    raw: Any = Field(default=None, exclude=True)

    model_config = _FROZEN

    @property
    def is_empty(self) -> bool:
        return not self.pages and not self.html


__all__ = [
    "Alignment",
    "Cell",
    "DEFAULT_FONT_FAMILY",
    "DEFAULT_FONT_SIZE",
    "DEFAULT_LETTER_SPACING",
    "Document",
    "FONT_WEIGHT_BOLD",
    "FONT_WEIGHT_NORMAL",
    "Image",
    "ImagePosition",
    "Line",
    "Page",
    "Point",
    "Segment",
    "SegmentMeta",
    "Style",
    "Table",
    "TextDecoration",
]
