"""Document assembly from raw OCR provider payloads.

``assemble_document`` is a pure function of the payload: it never raises on
malformed input and identical payloads always produce identical documents.

HTML resolution order:

1. document-level markdown, if any;
2. markdown harvested from pages that fell back to their markdown field
   (overrides 1);
3. the plain-text projection of the assembled pages.

When no page could be assembled at all, a top-level text field is used as a
last resort for both pages and HTML.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from normalization.lines import text_to_lines
from normalization.markdown import markdown_to_html
from normalization.pages import normalize_page, normalize_tables
from normalization.resolvers import FieldResolver, as_mapping, is_non_empty_list, is_text
from schemas.internal.documents import Document, Page

_PAGE_COLLECTIONS = FieldResolver.of("pages", "results", accept=is_non_empty_list)
_DOCUMENT_TABLES = FieldResolver.of("tables", accept=is_non_empty_list)
_DOCUMENT_MARKDOWN = FieldResolver.of(
    "markdown",
    "text_markdown",
    "document_markdown",
    "output_markdown",
    "result_markdown",
    accept=is_text,
)
_DOCUMENT_TEXT = FieldResolver.of(
    "text",
    "document_text",
    "output",
    "result",
    "ocr_text",
    "data",
    "markdown",
    accept=is_text,
)


def assemble_document(payload: object) -> Document:
    record = as_mapping(payload)
    if not record:
        return Document(pages=[], html=None, raw=payload)

    pages: List[Page] = []
    markdown_parts: List[str] = []
    for index, item in enumerate(_PAGE_COLLECTIONS.resolve(record, [])):
        normalized = normalize_page(item, index)
        if normalized.markdown_html is not None:
            markdown_parts.append(normalized.markdown_html)
        if normalized.page is not None:
            pages.append(normalized.page)

    pages = _attach_document_tables(pages, normalize_tables(_DOCUMENT_TABLES.resolve(record)))

    html: Optional[str] = None
    document_markdown = _DOCUMENT_MARKDOWN.resolve(record)
    if document_markdown:
        html = markdown_to_html(document_markdown)
    if markdown_parts:
        html = "\n".join(markdown_parts)

    plain_text = pages_to_plain_text(pages)
    if not html and plain_text:
        html = markdown_to_html(plain_text)

    if not pages:
        raw_text = _DOCUMENT_TEXT.resolve(record)
        if raw_text:
            lines = text_to_lines(raw_text)
            pages = [Page(number=1, lines=lines)] if lines else []
            html = html or markdown_to_html(raw_text)

    return Document(pages=pages, html=html or None, raw=payload)


def pages_to_plain_text(pages: Iterable[Page]) -> str:
    """Plain-text projection: line text, then table text, per page."""
    blocks: List[str] = []
    for page in pages:
        line_text = "\n".join(
            text for text in (line.text.rstrip() for line in page.lines) if text
        )
        table_text = "\n\n".join(table.text for table in page.tables if table.text)
        block = "\n\n".join(part for part in (line_text, table_text) if part)
        if block:
            blocks.append(block)
    return "\n\n".join(blocks)


def _attach_document_tables(pages: List[Page], tables: list) -> List[Page]:
    """Document-wide tables go to the first page, or to a synthetic page."""
    if not tables:
        return pages
    if not pages:
        return [Page(number=1, lines=[], tables=tables)]
    first = pages[0]
    return [first.model_copy(update={"tables": [*first.tables, *tables]}), *pages[1:]]


__all__ = ["assemble_document", "pages_to_plain_text"]
