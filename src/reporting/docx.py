"""Docx export renderer built on the same re-flow as the HTML export."""

from __future__ import annotations

import base64
import binascii
import html
import io
import logging
import re
from typing import TYPE_CHECKING, List, Mapping, Optional, Sequence

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.image.exceptions import UnrecognizedImageError
from docx.shared import Inches, Pt

from reporting.html import EXPORT_TITLE
from reporting.reflow import (
    MAX_INDENT_PX,
    MIN_INDENT_PX,
    ImageBlock,
    LineElement,
    ReflowPage,
    reflow_pages,
)
from schemas.internal.annotations import AnnotationMap
from schemas.internal.documents import DEFAULT_FONT_FAMILY, Cell, Line, Page, Style, Table

if TYPE_CHECKING:
    from docx.document import Document as DocxDocument
    from docx.text.run import Run

logger = logging.getLogger(__name__)

PX_TO_PT = 0.75
PICTURE_WIDTH = Inches(6)
# Word refuses tables wider than this.
MAX_TABLE_COLUMNS = 63

_ALIGNMENTS = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
    "justify": WD_ALIGN_PARAGRAPH.JUSTIFY,
}
_SIZE_RE = re.compile(r"^(\d+(?:\.\d+)?)(px|pt)$", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_BREAK_RE = re.compile(r"<br\s*/?>|</p>|</h[1-6]>|</li>|</tr>", re.IGNORECASE)


def render_docx(
    pages: Sequence[Page],
    *,
    annotations: Optional[AnnotationMap] = None,
    captions: Optional[Mapping[str, str]] = None,
    disable_descriptions: bool = False,
    fallback_html: str = "",
) -> bytes:
    """Render the export as a .docx file and return its bytes."""
    doc = Document()
    doc.styles["Normal"].font.name = "Arial"
    doc.add_heading(EXPORT_TITLE, 0)

    if pages:
        reflowed = reflow_pages(
            pages,
            annotations=annotations,
            captions=captions,
            disable_descriptions=disable_descriptions,
        )
        for position, page in enumerate(reflowed):
            _add_page(doc, page)
            if position < len(reflowed) - 1:
                doc.add_page_break()
    elif fallback_html:
        for paragraph in _html_to_paragraphs(fallback_html):
            doc.add_paragraph(paragraph)

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def _add_page(doc: "DocxDocument", page: ReflowPage) -> None:
    doc.add_heading(f"Page {page.number}", level=1)
    for element in page.elements:
        if isinstance(element, LineElement):
            _add_line(doc, element.line)
        else:
            _add_table(doc, element.table)
    for image in page.images:
        _add_image(doc, image)


def _add_line(doc: "DocxDocument", line: Line) -> None:
    if not line.text.strip():
        return
    paragraph = doc.add_paragraph()
    paragraph.alignment = _ALIGNMENTS[line.align]
    if line.align == "left" and line.x > MIN_INDENT_PX:
        paragraph.paragraph_format.left_indent = Pt(min(line.x, MAX_INDENT_PX) * PX_TO_PT)
    for segment in line.segments:
        _apply_style(paragraph.add_run(segment.text), segment.style)


def _apply_style(run: "Run", style: Style) -> None:
    run.bold = style.bold
    run.italic = style.italic
    run.underline = style.underline
    run.font.strike = style.line_through
    size = font_size_points(style.font_size)
    if size is not None:
        run.font.size = Pt(size)
    family = primary_font_family(style.font_family)
    if family is not None:
        run.font.name = family


def _add_table(doc: "DocxDocument", table: Table) -> None:
    rows = table.rows or _rows_from_text(table.text)
    if not rows:
        return
    columns = min(
        max(sum(cell.col_span for cell in row) for row in rows), MAX_TABLE_COLUMNS
    )
    if columns < 1:
        return
    grid = doc.add_table(rows=len(rows), cols=columns)
    grid.style = "Table Grid"
    for row_index, row in enumerate(rows):
        column = 0
        for cell in row:
            if column >= columns:
                break
            end = min(column + cell.col_span, columns) - 1
            target = grid.cell(row_index, column)
            if end > column:
                target = target.merge(grid.cell(row_index, end))
            target.text = cell.text
            if cell.is_header:
                for run in target.paragraphs[0].runs:
                    run.bold = True
            column = end + 1


def _add_image(doc: "DocxDocument", image: ImageBlock) -> None:
    if image.kind == "picture" and image.base64:
        try:
            data = base64.b64decode(image.base64, validate=False)
            doc.add_picture(io.BytesIO(data), width=PICTURE_WIDTH)
            return
        except (binascii.Error, ValueError, UnrecognizedImageError) as exc:
            logger.warning("Could not embed image into docx export: %s", exc)
            _add_caption(doc, "[image could not be embedded]")
            return
    if image.caption:
        _add_caption(doc, image.caption)


def _add_caption(doc: "DocxDocument", caption: str) -> None:
    paragraph = doc.add_paragraph()
    paragraph.add_run("Image:").bold = True
    paragraph.add_run(f" {caption}")


def font_size_points(font_size: str) -> Optional[float]:
    """Convert a CSS size (``px`` or ``pt``) to points; other units are ignored."""
    match = _SIZE_RE.match(font_size.strip())
    if match is None:
        return None
    value = float(match.group(1))
    if value <= 0:
        return None
    if match.group(2).lower() == "px":
        return value * PX_TO_PT
    return value


def primary_font_family(font_family: str) -> Optional[str]:
    """First family of a normalized chain, ``None`` for the default chain."""
    if font_family == DEFAULT_FONT_FAMILY:
        return None
    primary = font_family.split("',", 1)[0].strip().strip("'").strip()
    return primary or None


def _rows_from_text(text: str) -> List[List[Cell]]:
    if not text:
        return []
    return [[Cell(text=value) for value in row.split("\t")] for row in text.split("\n")]


def _html_to_paragraphs(markup: str) -> List[str]:
    text = html.unescape(_TAG_RE.sub("", _BREAK_RE.sub("\n", markup)))
    return [line.strip() for line in text.split("\n") if line.strip()]


__all__ = ["MAX_TABLE_COLUMNS", "font_size_points", "primary_font_family", "render_docx"]
