"""Render every error as the JSON error envelope.

Envelope: ``{success, error, message, statusCode, timestamp, path}``.
"""

import logging
from datetime import datetime, timezone
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import TaskError, ValidationFailed, describe_validation_errors

logger = logging.getLogger(__name__)

INTERNAL_MESSAGE = "Internal server error"


def request_path(request: Request) -> str:
    """Path plus query string, as the client sent it."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def error_response(request: Request, status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "message": message,
            "statusCode": status_code,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "path": request_path(request),
        },
    )


async def task_error_handler(request: Request, exc: TaskError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s - %s - %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
            exc_info=exc,
        )
    else:
        logger.info("%s %s - %s - %s", request.method, request.url.path, exc.status_code, exc.message)
    return error_response(request, exc.status_code, exc.error, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = describe_validation_errors(exc.errors())
    logger.info("%s %s - 400 - %s", request.method, request.url.path, message)
    return error_response(request, status.HTTP_400_BAD_REQUEST, ValidationFailed.error, message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    try:
        error = HTTPStatus(exc.status_code).phrase
    except ValueError:
        error = "Error"
    response = error_response(request, exc.status_code, error, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "%s %s - 500 - unhandled %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc_info=exc,
    )
    return error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", INTERNAL_MESSAGE
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskError, task_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
