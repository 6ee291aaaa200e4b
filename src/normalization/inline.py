"""Inline markup tokenizer for OCR text lines.

Recognizes ``**bold**``/``__bold__``, ``*italic*``/``_italic_`` and
``<u>underline</u>``. Markers toggle a running style; text between markers is
emitted as one segment each. Unterminated markers simply leave the style
toggled until the end of the line, nothing is ever raised.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, List

from normalization.style import normalize_style
from schemas.internal.documents import Point, Segment, SegmentMeta

BOLD_MARKERS = ("**", "__")
ITALIC_MARKERS = ("*", "_")
UNDERLINE_OPEN = "<u>"
UNDERLINE_CLOSE = "</u>"

_ALL_MARKERS = (*BOLD_MARKERS, *ITALIC_MARKERS, UNDERLINE_OPEN, UNDERLINE_CLOSE)


@dataclass(frozen=True)
class _InlineState:
    bold: bool = False
    italic: bool = False
    underline: bool = False


def parse_inline_markup(text: str, *, position: Point | None = None) -> Iterator[Segment]:
    """Yield styled segments for one line of lightweight markup."""
    if not text:
        return
    meta = SegmentMeta(position=position or Point())
    state = _InlineState()
    remaining = text

    while remaining:
        index = _earliest_marker(remaining)
        if index < 0:
            yield from _emit(remaining, state, meta)
            return
        if index > 0:
            yield from _emit(remaining[:index], state, meta)
        remaining = remaining[index:]

        if remaining.startswith(BOLD_MARKERS):
            # A doubled marker is always consumed as a pair, never as two singles.
            state = replace(state, bold=not state.bold)
            remaining = remaining[2:]
        elif remaining.startswith(ITALIC_MARKERS):
            state = replace(state, italic=not state.italic)
            remaining = remaining[1:]
        elif remaining.startswith(UNDERLINE_OPEN):
            state = replace(state, underline=True)
            remaining = remaining[len(UNDERLINE_OPEN):]
        else:
            # </u> always switches underline off; there is no nesting stack.
            state = replace(state, underline=False)
            remaining = remaining[len(UNDERLINE_CLOSE):]


def parse_inline_segments(text: str, *, position: Point | None = None) -> List[Segment]:
    return list(parse_inline_markup(text, position=position))


def _earliest_marker(text: str) -> int:
    found = [text.find(marker) for marker in _ALL_MARKERS]
    hits = [index for index in found if index >= 0]
    return min(hits) if hits else -1


def _emit(text: str, state: _InlineState, meta: SegmentMeta) -> Iterator[Segment]:
    if not text.strip():
        return
    style = normalize_style(
        {}, bold=state.bold, italic=state.italic, underline=state.underline
    )
    yield Segment(text=text, style=style, meta=meta)


__all__ = [
    "BOLD_MARKERS",
    "ITALIC_MARKERS",
    "UNDERLINE_CLOSE",
    "UNDERLINE_OPEN",
    "parse_inline_markup",
    "parse_inline_segments",
]
