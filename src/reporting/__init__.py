"""Reporting module exports."""

from __future__ import annotations

from reporting.captions import CAPTION_FAILED, CaptionCache, generate_captions
from reporting.html import render_html
from reporting.reflow import ReflowPage, reflow_pages


def render_docx(*args, **kwargs) -> bytes:
    from reporting.docx import render_docx as _render_docx

    return _render_docx(*args, **kwargs)


__all__ = [
    "CAPTION_FAILED",
    "CaptionCache",
    "ReflowPage",
    "generate_captions",
    "reflow_pages",
    "render_docx",
    "render_html",
]
