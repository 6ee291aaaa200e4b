"""Table normalization: irregular provider tables to canonical ``Table``."""

from __future__ import annotations

import re
from typing import Any, List, Mapping, Optional, Tuple

from normalization.resolvers import (
    FieldResolver,
    as_list,
    as_mapping,
    as_number,
    is_number,
    is_truthy,
)
from schemas.internal.documents import Cell, Table
from utils.text import escape_html

BoundingBox = Tuple[float, float, float, float]

_CELL_BREAK_RE = re.compile(r"[\t\r\n]+")

_ROWS = FieldResolver.of("rows", "data", "cells", "content", "table", accept=is_truthy)
_TABLE_ID = FieldResolver.of("id", "table_id", accept=is_truthy)
_BOX_ARRAY = FieldResolver.of(
    "geometry.bounding_box", "bounding_box", "boundingBox", "bbox", accept=is_truthy
)
_TOP_LEFT_Y = FieldResolver.of("geometry.top_left.y", "y", "top_left_y", accept=is_number)

_CELL_TEXT = FieldResolver.of("text", "content", "value", "plain_text", accept=is_truthy)
_HEADER = FieldResolver.of("header", "is_header", "isHeader", "th", accept=is_truthy)
_COLSPAN = FieldResolver.of(
    "colspan", "col_span", "colSpan", "span_cols", accept=is_truthy
)
_ROWSPAN = FieldResolver.of(
    "rowspan", "row_span", "rowSpan", "span_rows", accept=is_truthy
)

_CORNER_KEYS = (
    ("top_left_x", "top_left_y", "bottom_right_x", "bottom_right_y"),
    (
        "geometry.top_left.x",
        "geometry.top_left.y",
        "geometry.bottom_right.x",
        "geometry.bottom_right.y",
    ),
)
_CORNERS = tuple(
    tuple(FieldResolver.of(path, accept=is_number) for path in group)
    for group in _CORNER_KEYS
)


def normalize_table(raw: object, index: int = 0) -> Optional[Table]:
    """Normalize one table; tables without any usable row yield ``None``."""
    record = as_mapping(raw)
    if not record:
        return None

    rows = [_row_cells(row) for row in as_list(_ROWS.resolve(record))]
    raw_rows = [row for row in rows if row is not None]
    if not raw_rows:
        return None

    cells = [[_normalize_cell(cell) for cell in row] for row in raw_rows]
    bounding_box = _bounding_box(record)
    if bounding_box is not None:
        y = bounding_box[1]
    else:
        y = as_number(_TOP_LEFT_Y.resolve(record)) or 0.0

    return Table(
        id=str(_TABLE_ID.resolve(record, f"table-{index}")),
        rows=cells,
        html=render_table_html(cells),
        text=table_plain_text(cells),
        y=y,
        bounding_box=bounding_box,
    )


def render_table_html(rows: List[List[Cell]]) -> str:
    body = "".join(
        "<tr>" + "".join(_cell_html(cell) for cell in row) + "</tr>" for row in rows
    )
    return f"<table>{body}</table>"


def table_plain_text(rows: List[List[Cell]]) -> str:
    """Tab-separated cells, newline-separated rows, same order as the markup.

    Tabs and line breaks inside a cell become spaces so the grid stays intact.
    """
    return "\n".join("\t".join(_flat(cell.text) for cell in row) for row in rows)


def _flat(text: str) -> str:
    return _CELL_BREAK_RE.sub(" ", text)


def _row_cells(row: object) -> Optional[list]:
    if isinstance(row, (list, tuple)):
        return list(row)
    if isinstance(row, Mapping) and isinstance(row.get("cells"), (list, tuple)):
        return list(row["cells"])
    return None


def _normalize_cell(raw: Any) -> Cell:
    if raw is None:
        return Cell()
    if isinstance(raw, str):
        return Cell(text=raw)
    if not isinstance(raw, Mapping):
        return Cell(text=str(raw))
    return Cell(
        text=str(_CELL_TEXT.resolve(raw, "")),
        is_header=_HEADER.any(raw),
        col_span=_span(_COLSPAN.resolve(raw)),
        row_span=_span(_ROWSPAN.resolve(raw)),
    )


def _span(value: Any) -> int:
    number = as_number(value)
    if number is None or number < 1:
        return 1
    return int(number)


def _cell_html(cell: Cell) -> str:
    tag = "th" if cell.is_header else "td"
    attrs = []
    if cell.col_span > 1:
        attrs.append(f'colspan="{cell.col_span}"')
    if cell.row_span > 1:
        attrs.append(f'rowspan="{cell.row_span}"')
    attr_str = f" {' '.join(attrs)}" if attrs else ""
    return f"<{tag}{attr_str}>{escape_html(cell.text)}</{tag}>"


def _bounding_box(record: Mapping[str, Any]) -> Optional[BoundingBox]:
    for candidate in _BOX_ARRAY.candidates(record):
        values = [as_number(value) for value in as_list(candidate)]
        if len(values) == 4 and all(value is not None for value in values):
            return (values[0], values[1], values[2], values[3])

    for group in _CORNERS:
        values = [as_number(resolver.resolve(record)) for resolver in group]
        if all(value is not None for value in values):
            return (values[0], values[1], values[2], values[3])
    return None


__all__ = ["normalize_table", "render_table_html", "table_plain_text"]
