"""Markdown rendering for HTML previews."""

from __future__ import annotations

import markdown

_EXTENSIONS = ["nl2br", "tables", "fenced_code", "sane_lists"]


def markdown_to_html(text: object) -> str:
    """Render markdown with hard line breaks; non-text input renders empty."""
    if not isinstance(text, str) or not text:
        return ""
    return markdown.markdown(text, extensions=_EXTENSIONS, output_format="html")


__all__ = ["markdown_to_html"]
