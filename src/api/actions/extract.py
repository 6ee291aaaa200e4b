from typing import Optional

from fastapi import APIRouter, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool

from api.errors import ApiError
from api.security import api_key_from
from core.config import get_settings
from schemas.responses import ExtractResponse
from services.extraction import extract_document
from services.providers import MistralOcrClient

router = APIRouter()

PDF_CONTENT_TYPE = "application/pdf"


@router.post("/extract", response_model=ExtractResponse, tags=["Extraction"])
async def extract_pdf(
    request: Request,
    pdf: Optional[UploadFile] = File(None),
):
    """
    Run OCR on an uploaded PDF and return the normalized document.

    The caller's provider key travels in the configured API key header.
    """
    api_key = api_key_from(request)
    if pdf is None:
        raise ApiError(400, "No PDF uploaded.")
    if pdf.content_type != PDF_CONTENT_TYPE:
        raise ApiError(400, "Only PDF files are supported.")

    settings = get_settings()
    content = await pdf.read()
    if len(content) > settings.max_upload_bytes:
        raise ApiError(400, f"PDF exceeds the {settings.max_upload_mb} MB upload limit.")

    provider = MistralOcrClient(api_key, settings=settings)
    document = await run_in_threadpool(extract_document, content, provider)
    return ExtractResponse.from_document(document)
