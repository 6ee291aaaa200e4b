from __future__ import annotations

from normalization.inline import parse_inline_segments
from schemas.internal.documents import Point


def _summary(segments):
    return [
        (s.text, s.style.font_weight, s.style.font_style, s.style.text_decoration)
        for s in segments
    ]


def test_bold_and_italic() -> None:
    segments = parse_inline_segments("**bold** and *italic*")
    assert _summary(segments) == [
        ("bold", 600, "normal", "none"),
        (" and ", 400, "normal", "none"),
        ("italic", 400, "italic", "none"),
    ]


def test_underline_tags() -> None:
    segments = parse_inline_segments("<u>under</u>line")
    assert _summary(segments) == [
        ("under", 400, "normal", "underline"),
        ("line", 400, "normal", "none"),
    ]


def test_underscore_markers() -> None:
    segments = parse_inline_segments("__strong__ _soft_")
    assert _summary(segments) == [
        ("strong", 600, "normal", "none"),
        ("soft", 400, "italic", "none"),
    ]


def test_plain_text_is_one_segment() -> None:
    segments = parse_inline_segments("Nothing special here.")
    assert _summary(segments) == [("Nothing special here.", 400, "normal", "none")]


def test_unterminated_marker_keeps_style_to_end_of_line() -> None:
    segments = parse_inline_segments("start **open ended")
    assert _summary(segments) == [
        ("start ", 400, "normal", "none"),
        ("open ended", 600, "normal", "none"),
    ]


def test_styles_compose() -> None:
    segments = parse_inline_segments("***both***")
    assert _summary(segments) == [("both", 600, "italic", "none")]


def test_closing_underline_resets_without_nesting() -> None:
    segments = parse_inline_segments("<u>a<u>b</u>c")
    assert _summary(segments) == [
        ("a", 400, "normal", "underline"),
        ("b", 400, "normal", "underline"),
        ("c", 400, "normal", "none"),
    ]


def test_whitespace_only_runs_are_dropped() -> None:
    assert parse_inline_segments("** **") == []
    assert parse_inline_segments("") == []
    assert parse_inline_segments("**") == []


def test_position_is_carried_in_meta() -> None:
    segments = parse_inline_segments("a *b*", position=Point(x=3, y=40))
    assert {(s.meta.position.x, s.meta.position.y) for s in segments} == {(3.0, 40.0)}
