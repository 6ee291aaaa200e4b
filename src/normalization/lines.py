"""Line normalization and plain-text line derivation."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from normalization.inline import parse_inline_segments
from normalization.resolvers import FieldResolver, as_list, as_mapping, as_number
from normalization.style import normalize_style
from schemas.internal.documents import Alignment, Line, Point, Segment, SegmentMeta
from utils.text import normalize_nbsp, split_source_lines

# Synthetic vertical spacing when the provider supplies no geometry.
PROVIDER_LINE_HEIGHT = 18
TEXT_LINE_HEIGHT = 20

_ALIGNMENT_VOCABULARY: dict[str, Alignment] = {
    **dict.fromkeys(("left", "start", "l", "align_left"), "left"),
    **dict.fromkeys(("right", "end", "r", "align_right"), "right"),
    **dict.fromkeys(("center", "centre", "middle", "c", "align_center"), "center"),
    **dict.fromkeys(("justify", "justified", "full", "distributed", "block"), "justify"),
}


def normalize_alignment(value: Any) -> Optional[Alignment]:
    if value is None or isinstance(value, (dict, list)):
        return None
    raw = str(value).strip().lower()
    return _ALIGNMENT_VOCABULARY.get(raw)


def _is_coordinate(value: Any) -> bool:
    return as_number(value) is not None


_SEGMENT_SOURCES = FieldResolver.of("segments", "runs", "text_runs", "words", "chunks")
_LINE_TEXT = FieldResolver.of("text", accept=bool)
_SEGMENT_TEXT = FieldResolver.of("text", "content", "value")
_X = FieldResolver.of("position.x", "x", accept=_is_coordinate)
_Y = FieldResolver.of("position.y", "y", accept=_is_coordinate)
_ALIGNMENT = FieldResolver.of(
    "text_alignment",
    "alignment",
    "textAlign",
    "text_align",
    "align",
    "justification",
    "justify",
    "style.textAlign",
    "style.text_alignment",
    accept=lambda value: normalize_alignment(value) is not None,
)


def normalize_line(raw: object, index: int = 0) -> Optional[Line]:
    """Normalize one provider line; lines without usable text yield ``None``."""
    record = as_mapping(raw)
    if not record:
        return None

    x = as_number(_X.resolve(record)) or 0.0
    y = as_number(_Y.resolve(record))
    if y is None:
        y = float(index * PROVIDER_LINE_HEIGHT)
    meta = SegmentMeta(position=Point(x=x, y=y))

    segments: List[Segment] = []
    for candidate in _segment_candidates(record):
        segment = _normalize_segment(candidate, meta)
        if segment is not None:
            segments.append(segment)
    if not segments:
        return None

    return Line(
        y=y,
        x=x,
        align=normalize_alignment(_ALIGNMENT.resolve(record)) or "left",
        segments=segments,
    )


def text_to_lines(text: object) -> List[Line]:
    """Derive lines from plain text or markdown, parsing inline markup per line."""
    if not isinstance(text, str) or not text:
        return []
    lines: List[Line] = []
    for index, source_line in enumerate(split_source_lines(text)):
        line_text = normalize_nbsp(source_line)
        if not line_text.strip():
            continue
        y = float(index * TEXT_LINE_HEIGHT)
        position = Point(x=0.0, y=y)
        segments = parse_inline_segments(line_text, position=position)
        if not segments:
            # Marker-only lines (e.g. "**") are kept literally.
            segments = [Segment(text=line_text, meta=SegmentMeta(position=position))]
        lines.append(Line(y=y, x=0.0, align="left", segments=segments))
    return lines


def _segment_candidates(record: Mapping[str, Any]) -> list:
    source = _SEGMENT_SOURCES.resolve(record)
    if source is not None:
        return as_list(source)
    text = _LINE_TEXT.resolve(record)
    if text:
        return [{"text": text}]
    return []


def _normalize_segment(raw: Any, meta: SegmentMeta) -> Optional[Segment]:
    if isinstance(raw, str):
        raw = {"text": raw}
    record = as_mapping(raw)
    if not record:
        return None
    value = _SEGMENT_TEXT.resolve(record, "")
    if isinstance(value, (dict, list, bool)):
        return None
    text = normalize_nbsp(str(value))
    if not text.strip():
        return None
    return Segment(text=text, style=normalize_style(record), meta=meta)


__all__ = [
    "PROVIDER_LINE_HEIGHT",
    "TEXT_LINE_HEIGHT",
    "normalize_alignment",
    "normalize_line",
    "text_to_lines",
]
