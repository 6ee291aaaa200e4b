"""Per-request credential lookup."""

from __future__ import annotations

from typing import Optional

from fastapi import Request

from api.errors import ApiError
from core.config import get_settings


def api_key_from(request: Request, *, required: bool = True) -> Optional[str]:
    """Read the caller's provider key from the configured header."""
    header = get_settings().api_key_header
    value = (request.headers.get(header) or "").strip()
    if not value and required:
        raise ApiError(400, f"Missing API key (header {header}).")
    return value or None
