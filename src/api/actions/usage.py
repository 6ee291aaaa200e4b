from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool

from api.errors import ApiError
from api.security import api_key_from
from core.config import get_settings
from schemas.responses import UsageResponse
from services.providers import ProviderError, fetch_usage

router = APIRouter()


@router.get("/usage", response_model=UsageResponse, tags=["System"])
async def get_usage(request: Request):
    """Proxy the provider's usage endpoint when one is configured."""
    settings = get_settings()
    if not settings.usage_api_url:
        raise ApiError(
            501,
            "Usage endpoint is not configured (set MISTRAL_USAGE_API_URL).",
            unsupported=True,
        )
    api_key = api_key_from(request)
    try:
        data = await run_in_threadpool(fetch_usage, api_key, settings=settings)
    except ProviderError as exc:
        raise ApiError(exc.status_code or 502, str(exc), details=exc.details) from exc
    return UsageResponse(data=data)
