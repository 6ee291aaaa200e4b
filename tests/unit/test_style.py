from __future__ import annotations

import pytest

from normalization.style import (
    compose_decoration,
    normalize_font_family,
    normalize_style,
    to_pixel_string,
)
from schemas.internal.documents import Style


@pytest.mark.parametrize("raw", [{}, None, "bold", 42, [], {"style": "not-a-dict"}])
def test_malformed_input_yields_default_style(raw) -> None:
    assert normalize_style(raw) == Style()


def test_default_style_values() -> None:
    style = normalize_style({})
    assert style.font_size == "16px"
    assert style.font_weight == 400
    assert style.font_style == "normal"
    assert style.text_decoration == "none"
    assert style.font_family == "Inter, sans-serif"
    assert style.letter_spacing == "0.15px"


@pytest.mark.parametrize(
    "raw",
    [
        {"fontWeight": "bold"},
        {"font_weight": "Semi-Bold"},
        {"style": {"fontWeight": 700}},
        {"style": {"font_weight": "600"}},
        {"bold": True},
        {"isBold": 1},
    ],
)
def test_bold_variants(raw) -> None:
    assert normalize_style(raw).font_weight == 600


@pytest.mark.parametrize(
    "raw",
    [{"fontWeight": 400}, {"fontWeight": "normal"}, {"bold": False}, {"fontWeight": "heavy-ish"}],
)
def test_not_bold(raw) -> None:
    assert normalize_style(raw).font_weight == 400


@pytest.mark.parametrize(
    "raw",
    [{"fontStyle": "Italic"}, {"style": {"font_style": "italic"}}, {"oblique": True}, {"isItalic": True}],
)
def test_italic_variants(raw) -> None:
    assert normalize_style(raw).font_style == "italic"


def test_decoration_from_string_and_flags() -> None:
    assert normalize_style({"textDecoration": "underline"}).text_decoration == "underline"
    assert (
        normalize_style({"text_decoration_line": "underline line-through"}).text_decoration
        == "underline line-through"
    )
    assert normalize_style({"style": {"decoration": "strikethrough"}}).text_decoration == "line-through"
    assert normalize_style({"underlined": True, "strike": True}).text_decoration == "underline line-through"
    assert normalize_style({"textDecoration": "none"}).text_decoration == "none"


def test_keyword_overrides_win() -> None:
    style = normalize_style({"bold": True, "underline": True}, bold=False, underline=False, italic=True)
    assert style.font_weight == 400
    assert style.text_decoration == "none"
    assert style.font_style == "italic"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (12, "12px"),
        (12.5, "12.5px"),
        ("14", "14px"),
        ("1.5em", "1.5em"),
        ("11pt", "11pt"),
        ("huge", "16px"),
        (None, "16px"),
        (True, "16px"),
        (0, "0px"),
        (float("nan"), "16px"),
    ],
)
def test_to_pixel_string(value, expected) -> None:
    assert to_pixel_string(value) == expected


def test_size_field_variants() -> None:
    assert normalize_style({"size": 9}).font_size == "9px"
    assert normalize_style({"style": {"fontSize": "20px"}}).font_size == "20px"


def test_font_family_chain_and_sanitizing() -> None:
    assert normalize_font_family("Arial") == "'Arial', Inter, sans-serif"
    assert normalize_font_family("Times<script>") == "'Timesscript', Inter, sans-serif"
    assert normalize_font_family(None) == "Inter, sans-serif"
    assert normalize_font_family("  ") == "Inter, sans-serif"
    assert normalize_style({"fontName": "Georgia"}).font_family == "'Georgia', Inter, sans-serif"


def test_font_family_is_a_fixed_point() -> None:
    once = normalize_font_family("Open Sans")
    assert normalize_font_family(once) == once
    assert normalize_font_family("Inter, sans-serif") == "Inter, sans-serif"


def test_normalized_style_is_a_fixed_point() -> None:
    style = normalize_style(
        {"fontWeight": "bold", "italic": True, "underline": True, "fontSize": 11, "font": "Arial"}
    )
    assert normalize_style({"style": style.model_dump(by_alias=True)}) == style
    assert normalize_style(style) == style


def test_compose_decoration() -> None:
    assert compose_decoration(False, False) == "none"
    assert compose_decoration(True, False) == "underline"
    assert compose_decoration(False, True) == "line-through"
    assert compose_decoration(True, True) == "underline line-through"
