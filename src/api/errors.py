"""Error type and handlers shared by the HTTP routes."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from schemas.responses import ErrorResponse
from services.export import NothingToExportError
from services.extraction import EmptyResultError
from services.providers import ProviderError

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Error rendered as ``{"error": ...}`` with the given status code."""

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        details: Optional[str] = None,
        unsupported: Optional[bool] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details
        self.unsupported = unsupported


def error_response(
    status_code: int,
    message: str,
    *,
    details: Optional[str] = None,
    unsupported: Optional[bool] = None,
) -> JSONResponse:
    body = ErrorResponse(error=message, details=details, unsupported=unsupported)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(
        exc.status_code, exc.message, details=exc.details, unsupported=exc.unsupported
    )


async def handle_empty_result(request: Request, exc: EmptyResultError) -> JSONResponse:
    return error_response(502, str(exc))


async def handle_provider_error(request: Request, exc: ProviderError) -> JSONResponse:
    logger.warning("Provider call failed on %s: %s", request.url.path, exc)
    return error_response(502, str(exc), details=exc.details)


async def handle_nothing_to_export(
    request: Request, exc: NothingToExportError
) -> JSONResponse:
    return error_response(400, str(exc))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, handle_api_error)
    app.add_exception_handler(EmptyResultError, handle_empty_result)
    app.add_exception_handler(ProviderError, handle_provider_error)
    app.add_exception_handler(NothingToExportError, handle_nothing_to_export)


__all__ = ["ApiError", "error_response", "register_error_handlers"]
