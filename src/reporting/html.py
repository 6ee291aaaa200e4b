"""HTML word-processor export renderer."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from reporting.reflow import reflow_pages, render_page
from schemas.internal.annotations import AnnotationMap
from schemas.internal.documents import Page

EXPORT_TITLE = "PDF Export"


def render_html(
    pages: Sequence[Page],
    *,
    annotations: Optional[AnnotationMap] = None,
    captions: Optional[Mapping[str, str]] = None,
    disable_descriptions: bool = False,
    fallback_html: str = "",
    lang: str = "en",
) -> str:
    """Render the export document; without pages the fallback HTML is the body."""
    blocks: list[str] = []
    if pages:
        for page in reflow_pages(
            pages,
            annotations=annotations,
            captions=captions,
            disable_descriptions=disable_descriptions,
        ):
            blocks.extend(render_page(page))
    elif fallback_html:
        blocks.append(fallback_html)

    template_dir = Path(__file__).parent / "templates"
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    template = env.get_template("export.html")
    return template.render(title=EXPORT_TITLE, lang=lang, blocks=blocks)


__all__ = ["EXPORT_TITLE", "render_html"]
