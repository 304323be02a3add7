"""Exception handlers turning failures into ``ErrorResponse`` bodies."""

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import ErrorKind, UpstreamError
from app.models.error import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message).model_dump(),
    )


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.error(
        "%s %s failed: kind=%s status=%s",
        request.method,
        request.url.path,
        exc.kind.value,
        exc.status,
    )
    return _error_response(exc.http_status, exc.error, exc.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    try:
        error = HTTPStatus(exc.status_code).phrase
    except ValueError:
        error = f"HTTP {exc.status_code}"
    response = _error_response(exc.status_code, error, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, "Bad Request", str(exc.errors()))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    fallback = UpstreamError(ErrorKind.UNEXPECTED, str(exc) or type(exc).__name__)
    return _error_response(fallback.http_status, fallback.error, fallback.message)


def register_exception_handlers(application: FastAPI) -> None:
    application.add_exception_handler(UpstreamError, upstream_error_handler)
    application.add_exception_handler(StarletteHTTPException, http_error_handler)
    application.add_exception_handler(RequestValidationError, validation_error_handler)
    application.add_exception_handler(Exception, unexpected_error_handler)
