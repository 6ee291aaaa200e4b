"""Text normalization helpers."""

from __future__ import annotations

import html
from typing import List, Optional

NBSP = "\u00a0"


def normalize_nbsp(text: str) -> str:
    """Replace non-breaking spaces with ordinary spaces."""
    return text.replace(NBSP, " ")


def split_source_lines(text: str) -> List[str]:
    """Split OCR text into raw lines, keeping blank lines for index stability."""
    return text.replace("\r", "").split("\n")


def escape_html(value: object) -> str:
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def format_number(value: float) -> str:
    """Render a number the way it appears in CSS (``12`` not ``12.0``)."""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def data_uri_payload(value: object, *, require_data_uri: bool = False) -> Optional[str]:
    """Return the base64 payload of a data URI, or the value if it is bare."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.startswith("data:"):
        _, _, payload = text.partition(",")
        return payload or None
    if require_data_uri:
        return None
    return text


__all__ = [
    "NBSP",
    "data_uri_payload",
    "escape_html",
    "format_number",
    "normalize_nbsp",
    "split_source_lines",
]
