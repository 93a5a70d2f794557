"""
Error responses and the exception handlers that render them.

Handlers raise ``ApiError`` with the exact JSON body the client should
see; store failures and malformed request bodies both become 400s.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from database.store import StoreError

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """An error with a fixed status code and JSON body."""

    def __init__(self, status_code: int, body: Optional[Dict[str, Any]] = None):
        super().__init__(status_code, body)
        self.status_code = status_code
        self.body: Dict[str, Any] = body if body is not None else {}

    @classmethod
    def with_message(cls, status_code: int, message: str) -> "ApiError":
        return cls(status_code, {"message": message})


def store_error_body(exc: StoreError, message: str) -> Dict[str, Any]:
    return {
        "response": exc.message,
        "success": False,
        "message": message,
        "errors": exc.errors,
    }


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.body)


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.warning("Store error on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=store_error_body(exc, "Store operation failed"),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Invalid request body",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all error handlers to ``app``."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
