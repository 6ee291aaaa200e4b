import logging

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool

from api.errors import ApiError
from api.security import api_key_from
from schemas.requests import DescribeImageRequest
from schemas.responses import DescribeImageResponse
from services.providers import VisionDescriber
from utils.text import data_uri_payload

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/describe-image", response_model=DescribeImageResponse, tags=["Export"])
async def describe_image(payload: DescribeImageRequest, request: Request):
    """Caption a single image with the vision model."""
    api_key = api_key_from(request)
    image = data_uri_payload(payload.base64)
    if not image:
        raise ApiError(400, "Missing image data.")

    describer = VisionDescriber(api_key)
    try:
        description = await run_in_threadpool(describer.describe, image)
    except Exception as exc:
        logger.error("Image description failed: %s", exc)
        raise ApiError(502, "Image description failed.", details=str(exc)) from exc

    if not description:
        raise ApiError(502, "Vision model returned no description.")
    return DescribeImageResponse(description=description)
