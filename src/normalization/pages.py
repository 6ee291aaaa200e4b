"""Page and image normalization with markdown/text fallbacks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from normalization.lines import normalize_line, text_to_lines
from normalization.markdown import markdown_to_html
from normalization.resolvers import (
    FieldResolver,
    as_list,
    as_mapping,
    as_number,
    is_present,
    is_text,
    is_truthy,
)
from normalization.tables import normalize_table
from schemas.internal.documents import Image, ImagePosition, Line, Page, Point, Table
from utils.text import data_uri_payload

logger = logging.getLogger(__name__)

_PAGE_NUMBER = FieldResolver.of("number", "page", "page_number")
_LINES = FieldResolver.of("lines", "text_lines", "blocks")
_TABLES = FieldResolver.of("tables", "table", accept=is_truthy)
_IMAGES = FieldResolver.of("images")
_MARKDOWN = FieldResolver.of("markdown", accept=is_text)
_TEXT = FieldResolver.of("text", accept=is_truthy)

_IMAGE_ID = FieldResolver.of("id", "image_id")
_IMAGE_PAYLOAD = FieldResolver.of("image_base64", "image", "base64", accept=is_text)
_IMAGE_URL = FieldResolver.of("image_url", accept=is_text)
_IMAGE_LEFT = FieldResolver.of("top_left_x", "x", "position.topLeft.x", accept=is_present)
_IMAGE_TOP = FieldResolver.of("top_left_y", "y", "position.topLeft.y", accept=is_present)
_IMAGE_RIGHT = FieldResolver.of("bottom_right_x", "position.bottomRight.x")
_IMAGE_BOTTOM = FieldResolver.of("bottom_right_y", "position.bottomRight.y")


@dataclass(frozen=True)
class NormalizedPage:
    """Normalization outcome; ``markdown_html`` is set when markdown was used."""

    page: Optional[Page]
    markdown_html: Optional[str] = None


def normalize_page(raw: object, index: int = 0) -> NormalizedPage:
    record = as_mapping(raw)
    if not record:
        return NormalizedPage(page=None)

    lines = _provider_lines(record)
    tables = normalize_tables(_TABLES.resolve(record))
    images = [
        image
        for image in (normalize_image(item) for item in as_list(_IMAGES.resolve(record)))
        if image is not None
    ]

    markdown_html: Optional[str] = None
    markdown_text = _MARKDOWN.resolve(record)
    if not lines and markdown_text:
        lines = text_to_lines(markdown_text)
        markdown_html = markdown_to_html(markdown_text)

    if not lines:
        raw_text = _TEXT.resolve(record)
        if isinstance(raw_text, str):
            lines = text_to_lines(raw_text)

    number = _page_number(record, index)
    if not lines:
        if tables or images:
            logger.warning(
                "Dropping page %d without text lines (%d tables, %d images)",
                number,
                len(tables),
                len(images),
            )
        return NormalizedPage(page=None, markdown_html=markdown_html)

    logger.debug(
        "Normalized page %d: %d lines, %d tables, %d images",
        number,
        len(lines),
        len(tables),
        len(images),
    )
    page = Page(number=number, lines=lines, tables=tables, images=images)
    return NormalizedPage(page=page, markdown_html=markdown_html)


def normalize_tables(raw: object) -> List[Table]:
    tables: List[Table] = []
    for index, item in enumerate(as_list(raw)):
        table = normalize_table(item, index)
        if table is not None:
            tables.append(table)
    return tables


def normalize_image(raw: object) -> Optional[Image]:
    record = as_mapping(raw)
    if not record:
        return None

    payload = data_uri_payload(_IMAGE_PAYLOAD.resolve(record))
    if payload is None:
        payload = data_uri_payload(_IMAGE_URL.resolve(record), require_data_uri=True)

    image_id = _IMAGE_ID.resolve(record)
    return Image(
        id=str(image_id) if image_id is not None else None,
        base64=payload,
        position=ImagePosition(
            top_left=Point(x=_coordinate(_IMAGE_LEFT, record), y=_coordinate(_IMAGE_TOP, record)),
            bottom_right=Point(
                x=_coordinate(_IMAGE_RIGHT, record), y=_coordinate(_IMAGE_BOTTOM, record)
            ),
        ),
    )


def _provider_lines(record: Any) -> List[Line]:
    lines: List[Line] = []
    for index, item in enumerate(as_list(_LINES.resolve(record))):
        line = normalize_line(item, index)
        if line is not None:
            lines.append(line)
    return lines


def _page_number(record: Any, index: int) -> int:
    number = as_number(_PAGE_NUMBER.resolve(record))
    if number is None or number < 1 or not float(number).is_integer():
        return index + 1
    return int(number)


def _coordinate(resolver: FieldResolver, record: Any) -> float:
    return as_number(resolver.resolve(record)) or 0.0


__all__ = ["NormalizedPage", "normalize_image", "normalize_page", "normalize_tables"]
