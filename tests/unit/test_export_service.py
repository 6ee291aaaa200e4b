from __future__ import annotations

import io
import re

import pytest
from docx import Document as load_docx

from reporting.docx import MAX_TABLE_COLUMNS, font_size_points, primary_font_family
from reporting.reflow import ImageBlock, reflow_pages
from schemas.internal.annotations import ImageAnnotation
from schemas.requests import ExportRequest
from services.export import (
    DOC_MEDIA_TYPE,
    DOCX_MEDIA_TYPE,
    NothingToExportError,
    export_document,
)


class _CountingVision:
    def __init__(self):
        self.calls = 0

    def describe(self, base64):
        self.calls += 1
        return "Generated caption"


def _request(**overrides) -> ExportRequest:
    payload = {
        "pages": [
            {
                "number": 1,
                "lines": [
                    {
                        "y": 10,
                        "x": 0,
                        "align": "left",
                        "segments": [
                            {"text": "Heading", "style": {"fontWeight": 600, "fontSize": "20px"}},
                        ],
                    },
                    {"y": 100, "x": 50, "segments": [{"text": "inside the table"}]},
                ],
                "tables": [
                    {
                        "id": "t",
                        "html": "<table><tr><td>a</td><td>b</td></tr></table>",
                        "text": "a\tb",
                        "y": 90,
                        "boundingBox": [0, 90, 200, 150],
                        "rows": [[{"text": "a"}, {"text": "b"}]],
                    }
                ],
                "images": [
                    {"id": "img-1", "base64": "AAAA", "_description": "Old", "_replaceWithDescription": False},
                    {"id": "img-2", "base64": "BBBB", "_removed": True},
                ],
            }
        ],
        "html": "<p>fallback</p>",
    }
    payload.update(overrides)
    return ExportRequest.model_validate(payload)


def test_split_annotations_keeps_only_meaningful_overlays() -> None:
    pages, annotations = _request().split_annotations()
    assert annotations == {
        "img-1": ImageAnnotation(description="Old"),
        "img-2": ImageAnnotation(removed=True),
    }
    assert [image.id for image in pages[0].images] == ["img-1", "img-2"]
    assert not hasattr(pages[0].images[0], "removed")


def test_doc_export_with_captions() -> None:
    vision = _CountingVision()
    result = export_document(_request(), vision=vision)
    body = result.content.decode("utf-8")

    assert result.media_type == DOC_MEDIA_TYPE
    assert re.fullmatch(r"export-\d{6}\.doc", result.filename)
    assert vision.calls == 1
    assert "<strong>Image:</strong> Generated caption" in body
    assert "inside the table" not in body
    assert "Heading" in body
    assert "BBBB" not in body


def test_doc_export_without_descriptions_embeds_images() -> None:
    vision = _CountingVision()
    result = export_document(_request(disableDescriptions=True), vision=vision)
    body = result.content.decode("utf-8")
    assert vision.calls == 0
    assert 'src="data:image/jpeg;base64,AAAA"' in body


def test_fallback_html_when_no_pages() -> None:
    result = export_document(_request(pages=[]))
    assert "<p>fallback</p>" in result.content.decode("utf-8")


def test_nothing_to_export() -> None:
    with pytest.raises(NothingToExportError):
        export_document(_request(pages=[], html="   "))


def test_docx_export() -> None:
    result = export_document(_request(format="docx", disableDescriptions=True))
    assert result.media_type == DOCX_MEDIA_TYPE
    assert result.filename.endswith(".docx")

    doc = load_docx(io.BytesIO(result.content))
    texts = [paragraph.text for paragraph in doc.paragraphs]
    assert "PDF Export" in texts
    assert "Page 1" in texts
    assert "Heading" in texts
    assert "inside the table" not in texts
    assert len(doc.tables) == 1
    assert [cell.text for cell in doc.tables[0].rows[0].cells] == ["a", "b"]

    heading_run = next(p for p in doc.paragraphs if p.text == "Heading").runs[0]
    assert heading_run.bold is True
    assert heading_run.font.size.pt == 15.0


def test_docx_helpers() -> None:
    assert font_size_points("16px") == 12.0
    assert font_size_points("11pt") == 11.0
    assert font_size_points("1.2em") is None
    assert font_size_points("0px") is None
    assert primary_font_family("'Arial', Inter, sans-serif") == "Arial"
    assert primary_font_family("Inter, sans-serif") is None


JPEG_A = "/9j/4AAQSkZJRgABAQAAAQABAADAAAA"
JPEG_B = "/9j/4AAQSkZJRgABAQAAAQABAADBBBB"


def test_flags_on_images_without_id_stay_on_their_own_image() -> None:
    request = _request(
        pages=[
            {
                "number": 1,
                "images": [
                    {"base64": JPEG_A, "_removed": True},
                    {"base64": JPEG_B},
                ],
            }
        ]
    )
    pages, annotations = request.split_annotations()
    [reflowed] = reflow_pages(pages, annotations=annotations, disable_descriptions=True)
    assert reflowed.images == [ImageBlock(kind="picture", base64=JPEG_B)]


def test_replacement_on_image_without_id_does_not_caption_its_neighbour() -> None:
    vision = _CountingVision()
    request = _request(
        pages=[
            {
                "number": 1,
                "images": [
                    {"base64": JPEG_A, "_description": "Mine", "_replaceWithDescription": True},
                    {"base64": JPEG_B},
                ],
            }
        ]
    )
    body = export_document(request, vision=vision).content.decode("utf-8")
    assert vision.calls == 1
    assert "<strong>Image:</strong> Mine" in body
    assert "<strong>Image:</strong> Generated caption" in body


def test_docx_table_width_is_capped() -> None:
    request = _request(
        format="docx",
        disableDescriptions=True,
        pages=[
            {
                "number": 1,
                "tables": [
                    {
                        "id": "wide",
                        "rows": [[{"text": "wide", "colSpan": 1000000}], [{"text": "x"}]],
                    }
                ],
            }
        ],
    )
    doc = load_docx(io.BytesIO(export_document(request).content))
    assert len(doc.tables[0].columns) == MAX_TABLE_COLUMNS
    assert doc.tables[0].cell(0, 0).text == "wide"
