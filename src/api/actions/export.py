from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from api.security import api_key_from
from schemas.requests import ExportRequest
from services.export import export_document
from services.providers import VisionDescriber

router = APIRouter()


@router.post("/export-docx", tags=["Export"])
async def export_docx(payload: ExportRequest, request: Request):
    """
    Re-flow an extraction into a Word-compatible download.

    Image captions need the caller's key; with descriptions disabled the key
    is optional.
    """
    api_key = api_key_from(request, required=not payload.disable_descriptions)
    vision = None
    if api_key and not payload.disable_descriptions:
        vision = VisionDescriber(api_key)

    result = await run_in_threadpool(export_document, payload, vision=vision)
    return Response(
        content=result.content,
        media_type=result.media_type,
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )
