"""Style normalization: raw provider style descriptors to a canonical Style.

This is a total function. Every input, however malformed, resolves to a fully
populated ``Style`` through defaults.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from normalization.resolvers import FieldResolver, as_number, is_text, is_truthy
from schemas.internal.documents import (
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    DEFAULT_LETTER_SPACING,
    FONT_WEIGHT_BOLD,
    FONT_WEIGHT_NORMAL,
    Style,
    TextDecoration,
)
from utils.text import format_number

_WEIGHT = FieldResolver.of(
    "fontWeight", "font_weight", "style.fontWeight", "style.font_weight"
)
_BOLD_FLAGS = FieldResolver.of(
    "bold", "isBold", "style.bold", "style.isBold", accept=is_truthy
)
_SLANT = FieldResolver.of(
    "fontStyle", "font_style", "style.fontStyle", "style.font_style"
)
_ITALIC_FLAGS = FieldResolver.of(
    "italic",
    "isItalic",
    "oblique",
    "style.italic",
    "style.isItalic",
    "style.oblique",
    accept=is_truthy,
)
_DECORATION = FieldResolver.of(
    "textDecoration",
    "text_decoration",
    "textDecorationLine",
    "text_decoration_line",
    "decoration",
    "style.textDecoration",
    "style.text_decoration",
    "style.textDecorationLine",
    "style.text_decoration_line",
    "style.decoration",
    accept=is_text,
)
_UNDERLINE_FLAGS = FieldResolver.of(
    "underline",
    "isUnderline",
    "underlined",
    "style.underline",
    "style.isUnderline",
    "style.underlined",
    accept=is_truthy,
)
_STRIKE_FLAGS = FieldResolver.of(
    "strikethrough",
    "strike",
    "isStrike",
    "isStrikethrough",
    "style.strikethrough",
    "style.strike",
    "style.isStrike",
    "style.isStrikethrough",
    accept=is_truthy,
)
_SIZE = FieldResolver.of(
    "fontSize", "font_size", "size", "style.fontSize", "style.font_size"
)
_FAMILY = FieldResolver.of(
    "fontFamily",
    "font_family",
    "fontName",
    "font",
    "style.fontFamily",
    "style.font_family",
    accept=is_text,
)

_BOLD_RE = re.compile(r"bold", re.IGNORECASE)
_ITALIC_RE = re.compile(r"italic", re.IGNORECASE)
_NUMERIC_RE = re.compile(r"^\d+(?:\.\d+)?$")
_UNIT_RE = re.compile(
    r"^\d+(?:\.\d+)?(?:px|pt|pc|em|rem|ex|ch|vw|vh|vmin|vmax|cm|mm|in|q|%)$",
    re.IGNORECASE,
)
_FAMILY_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9 ,'-]")
_FAMILY_FALLBACK_SUFFIX = f", {DEFAULT_FONT_FAMILY}"


def normalize_style(
    raw: object,
    *,
    bold: Optional[bool] = None,
    italic: Optional[bool] = None,
    underline: Optional[bool] = None,
    strikethrough: Optional[bool] = None,
) -> Style:
    """Resolve a raw style-like record into a canonical ``Style``.

    Keyword overrides, when not ``None``, decide the corresponding attribute
    outright (used by the inline markup parser).
    """
    is_bold = _resolve_bold(raw) if bold is None else bold
    is_italic = _resolve_italic(raw) if italic is None else italic
    has_underline, has_strike = _resolve_decoration_flags(raw)
    if underline is not None:
        has_underline = underline
    if strikethrough is not None:
        has_strike = strikethrough

    return Style(
        font_size=to_pixel_string(_SIZE.resolve(raw)),
        font_weight=FONT_WEIGHT_BOLD if is_bold else FONT_WEIGHT_NORMAL,
        font_style="italic" if is_italic else "normal",
        text_decoration=compose_decoration(has_underline, has_strike),
        font_family=normalize_font_family(_FAMILY.resolve(raw)),
        letter_spacing=DEFAULT_LETTER_SPACING,
    )


def to_pixel_string(value: Any) -> str:
    """Numbers get a ``px`` suffix, unit-bearing strings pass through."""
    if isinstance(value, bool):
        return DEFAULT_FONT_SIZE
    if isinstance(value, (int, float)):
        number = as_number(value)
        if number is None:
            return DEFAULT_FONT_SIZE
        return f"{format_number(number)}px"
    if isinstance(value, str):
        trimmed = value.strip()
        if _NUMERIC_RE.match(trimmed):
            return f"{trimmed}px"
        if _UNIT_RE.match(trimmed):
            return trimmed
    return DEFAULT_FONT_SIZE


def normalize_font_family(value: Any) -> str:
    """Sanitize a family name and chain the default family as fallback."""
    if not isinstance(value, str):
        return DEFAULT_FONT_FAMILY
    primary = _FAMILY_UNSAFE_RE.sub("", value).strip()
    # Already-normalized chains are unwrapped so the result is a fixed point.
    if primary.endswith(_FAMILY_FALLBACK_SUFFIX):
        primary = primary[: -len(_FAMILY_FALLBACK_SUFFIX)].strip()
    if len(primary) >= 2 and primary[0] == primary[-1] == "'":
        primary = primary[1:-1].strip()
    if not primary or primary == DEFAULT_FONT_FAMILY:
        return DEFAULT_FONT_FAMILY
    return f"'{primary}'{_FAMILY_FALLBACK_SUFFIX}"


def compose_decoration(underline: bool, strikethrough: bool) -> TextDecoration:
    if underline and strikethrough:
        return "underline line-through"
    if underline:
        return "underline"
    if strikethrough:
        return "line-through"
    return "none"


def _resolve_bold(raw: object) -> bool:
    weight = _WEIGHT.resolve(raw)
    if isinstance(weight, str) and _BOLD_RE.search(weight):
        return True
    numeric = as_number(weight)
    if numeric is not None and numeric >= FONT_WEIGHT_BOLD:
        return True
    return _BOLD_FLAGS.any(raw)


def _resolve_italic(raw: object) -> bool:
    slant = _SLANT.resolve(raw)
    if isinstance(slant, str) and _ITALIC_RE.search(slant):
        return True
    return _ITALIC_FLAGS.any(raw)


def _resolve_decoration_flags(raw: object) -> tuple[bool, bool]:
    decoration = str(_DECORATION.resolve(raw, "")).lower()
    underline = "underline" in decoration or _UNDERLINE_FLAGS.any(raw)
    strike = (
        "line-through" in decoration
        or "strikethrough" in decoration
        or _STRIKE_FLAGS.any(raw)
    )
    return underline, strike


__all__ = [
    "compose_decoration",
    "normalize_font_family",
    "normalize_style",
    "to_pixel_string",
]
