"""External response schemas."""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.internal.documents import Document, Page


class ExtractResponse(BaseModel):
    pages: List[Page]
    page_count: int = Field(alias="pageCount")
    source: Literal["mistral"] = "mistral"
    html: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_document(cls, document: Document) -> "ExtractResponse":
        return cls(
            pages=document.pages,
            page_count=len(document.pages),
            html=document.html,
        )


class DescribeImageResponse(BaseModel):
    description: str


class UsageResponse(BaseModel):
    data: Any = None


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
    unsupported: Optional[bool] = None


__all__ = [
    "DescribeImageResponse",
    "ErrorResponse",
    "ExtractResponse",
    "UsageResponse",
]
