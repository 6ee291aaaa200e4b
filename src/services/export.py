"""Export service: captions, re-flow and rendering of an annotated document."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from reporting.captions import VisionDescriber, generate_captions
from reporting.html import render_html
from schemas.requests import ExportRequest

logger = logging.getLogger(__name__)

DOC_MEDIA_TYPE = "application/msword"
DOCX_MEDIA_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)


class NothingToExportError(ValueError):
    """Export request without pages and without fallback HTML."""

    def __init__(self) -> None:
        super().__init__("No content to export.")


@dataclass(frozen=True)
class ExportResult:
    content: bytes
    filename: str
    media_type: str


def export_document(
    request: ExportRequest,
    *,
    vision: Optional[VisionDescriber] = None,
) -> ExportResult:
    pages, annotations = request.split_annotations()
    fallback_html = request.fallback_html
    if not pages and not fallback_html:
        raise NothingToExportError()

    captions: dict[str, str] = {}
    if pages and not request.disable_descriptions and vision is not None:
        captions = generate_captions(pages, annotations, vision)
        logger.debug("Generated %d image caption(s)", len(captions))

    options = dict(
        annotations=annotations,
        captions=captions,
        disable_descriptions=request.disable_descriptions,
        fallback_html=fallback_html,
    )
    stem = export_stem()
    if request.format == "docx":
        from reporting.docx import render_docx

        return ExportResult(
            content=render_docx(pages, **options),
            filename=f"{stem}.docx",
            media_type=DOCX_MEDIA_TYPE,
        )
    return ExportResult(
        content=render_html(pages, **options).encode("utf-8"),
        filename=f"{stem}.doc",
        media_type=DOC_MEDIA_TYPE,
    )


def export_stem() -> str:
    """``export-`` followed by the last six digits of the epoch milliseconds."""
    millis = int(time.time() * 1000)
    return f"export-{millis % 1_000_000:06d}"


__all__ = [
    "DOCX_MEDIA_TYPE",
    "DOC_MEDIA_TYPE",
    "ExportResult",
    "NothingToExportError",
    "export_document",
    "export_stem",
]
