"""Provider-independent normalization of OCR output."""

from .assembler import assemble_document, pages_to_plain_text
from .inline import parse_inline_markup, parse_inline_segments
from .lines import normalize_alignment, normalize_line, text_to_lines
from .pages import NormalizedPage, normalize_image, normalize_page
from .style import normalize_style
from .tables import normalize_table

__all__ = [
    "NormalizedPage",
    "assemble_document",
    "normalize_alignment",
    "normalize_image",
    "normalize_line",
    "normalize_page",
    "normalize_style",
    "normalize_table",
    "pages_to_plain_text",
    "parse_inline_markup",
    "parse_inline_segments",
    "text_to_lines",
]
