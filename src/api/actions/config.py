from typing import Any

from fastapi import APIRouter

from core.config import get_settings

router = APIRouter()

@router.get("/config", response_model=dict[str, Any], tags=["System"])
async def get_configuration():
    """Get current runtime configuration (no credentials are stored here)."""
    return get_settings().model_dump()
