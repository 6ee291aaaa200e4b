"""Export re-flow: positioned page elements to one linear reading order.

Per page, lines whose source position falls inside a table's bounding box are
dropped (the table already carries that text), the remaining lines and all
tables are merged by vertical position, and images follow as a trailing block
resolved against the user's annotations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Literal, Mapping, Optional, Sequence, Union

from schemas.internal.annotations import (
    NO_ANNOTATION,
    AnnotationMap,
    annotation_key,
    caption_key,
)
from schemas.internal.documents import Line, Page, Segment, Style, Table
from utils.text import escape_html, format_number

logger = logging.getLogger(__name__)

MIN_INDENT_PX = 10
MAX_INDENT_PX = 400
DESCRIPTION_UNAVAILABLE = "Image description unavailable."
IMAGE_CAPTION_LABEL = "Image:"

# Rendered style properties, in output order.
_CSS_PROPERTIES = (
    ("font_size", "font-size"),
    ("font_weight", "font-weight"),
    ("font_style", "font-style"),
    ("text_decoration", "text-decoration"),
    ("font_family", "font-family"),
    ("letter_spacing", "letter-spacing"),
)


@dataclass(frozen=True)
class TableZone:
    x_min: float
    y_min: float
    x_max: float
    y_max: float

    def contains(self, x: float, y: float) -> bool:
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max


@dataclass(frozen=True)
class LineElement:
    line: Line
    kind: Literal["line"] = "line"

    @property
    def y(self) -> float:
        return self.line.y


@dataclass(frozen=True)
class TableElement:
    table: Table
    kind: Literal["table"] = "table"

    @property
    def y(self) -> float:
        return self.table.y


ReflowElement = Union[LineElement, TableElement]


@dataclass(frozen=True)
class ImageBlock:
    """An image as it should appear in the export: embedded or as a caption."""

    kind: Literal["picture", "caption"]
    base64: Optional[str] = None
    caption: Optional[str] = None


@dataclass(frozen=True)
class ReflowPage:
    number: int
    elements: List[ReflowElement]
    images: List[ImageBlock]


def table_zones(tables: Iterable[Table]) -> List[TableZone]:
    return [TableZone(*table.bounding_box) for table in tables if table.bounding_box]


def line_position(line: Line) -> tuple[float, float]:
    return line.x, line.y


def is_inside_table(line: Line, zones: Sequence[TableZone]) -> bool:
    x, y = line_position(line)
    return any(zone.contains(x, y) for zone in zones)


def order_elements(page: Page) -> List[ReflowElement]:
    """Lines outside table zones plus tables, stable-sorted by vertical position."""
    zones = table_zones(page.tables)
    kept = [line for line in page.lines if not is_inside_table(line, zones)]
    if len(kept) != len(page.lines):
        logger.debug(
            "Page %d: %d lines fall inside table zones",
            page.number,
            len(page.lines) - len(kept),
        )
    elements: List[ReflowElement] = [LineElement(line) for line in kept]
    elements.extend(TableElement(table) for table in page.tables)
    return sorted(elements, key=lambda element: element.y)


def resolve_images(
    page: Page,
    *,
    annotations: AnnotationMap,
    captions: Mapping[str, str],
    disable_descriptions: bool,
) -> List[ImageBlock]:
    blocks: List[ImageBlock] = []
    for index, image in enumerate(page.images):
        annotation = annotations.get(
            annotation_key(image, page.number, index), NO_ANNOTATION
        )
        if annotation.removed:
            continue
        if disable_descriptions:
            if image.base64 and not annotation.replace_with_description:
                blocks.append(ImageBlock(kind="picture", base64=image.base64))
            elif annotation.description:
                blocks.append(ImageBlock(kind="caption", caption=annotation.description))
            continue
        caption = (
            annotation.replacement
            or captions.get(caption_key(image, page.number, index))
            or DESCRIPTION_UNAVAILABLE
        )
        blocks.append(ImageBlock(kind="caption", caption=caption))
    return blocks


def reflow_pages(
    pages: Iterable[Page],
    *,
    annotations: Optional[AnnotationMap] = None,
    captions: Optional[Mapping[str, str]] = None,
    disable_descriptions: bool = False,
) -> List[ReflowPage]:
    return [
        ReflowPage(
            number=page.number,
            elements=order_elements(page),
            images=resolve_images(
                page,
                annotations=annotations or {},
                captions=captions or {},
                disable_descriptions=disable_descriptions,
            ),
        )
        for page in pages
    ]


def style_css(style: Style) -> str:
    return ";".join(
        f"{css_name}:{escape_html(getattr(style, field))}"
        for field, css_name in _CSS_PROPERTIES
    )


def render_segment(segment: Segment) -> str:
    text = escape_html(segment.text)
    if not text:
        return ""
    return f'<span style="{style_css(segment.style)}">{text}</span>'


def render_line(line: Line) -> str:
    """Inline markup of a line; empty when the line renders no text."""
    return "".join(render_segment(segment) for segment in line.segments).strip()


def line_block_css(line: Line) -> str:
    styles = []
    if line.align != "left":
        styles.append(f"text-align:{line.align}")
    elif line.x > MIN_INDENT_PX:
        styles.append(f"margin-left:{format_number(min(line.x, MAX_INDENT_PX))}px")
    return ";".join(styles)


def render_element(element: ReflowElement) -> str:
    if isinstance(element, TableElement):
        if not element.table.html:
            return ""
        return f'<div class="table-block">{element.table.html}</div>'
    inline = render_line(element.line)
    if not inline:
        return ""
    css = line_block_css(element.line)
    style_attr = f' style="{css}"' if css else ""
    return f"<p{style_attr}>{inline}</p>"


def render_image(block: ImageBlock) -> str:
    if block.kind == "picture":
        return (
            '<p><img alt="Image" style="max-width:100%;height:auto;" '
            f'src="data:image/jpeg;base64,{block.base64}"/></p>'
        )
    return f"<p><strong>{IMAGE_CAPTION_LABEL}</strong> {escape_html(block.caption)}</p>"


def render_page(page: ReflowPage) -> List[str]:
    """Markup blocks for one page: heading, elements, images, separator."""
    blocks = [f"<h2>Page {page.number}</h2>"]
    blocks.extend(markup for markup in map(render_element, page.elements) if markup)
    if page.images:
        blocks.append("<br/>")
        blocks.extend(render_image(image) for image in page.images)
    blocks.append("<hr />")
    return blocks


__all__ = [
    "DESCRIPTION_UNAVAILABLE",
    "ImageBlock",
    "LineElement",
    "MAX_INDENT_PX",
    "MIN_INDENT_PX",
    "ReflowElement",
    "ReflowPage",
    "TableElement",
    "TableZone",
    "is_inside_table",
    "line_block_css",
    "order_elements",
    "reflow_pages",
    "render_element",
    "render_image",
    "render_line",
    "render_page",
    "render_segment",
    "resolve_images",
    "style_css",
    "table_zones",
]
