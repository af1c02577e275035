"""Translation of core exceptions into localized HTTP error responses."""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from walletsync.api.middleware import request_locale
from walletsync.dates.normalizer import InvalidFormatError
from walletsync.locale.messages import (
    INVALID_SYNC_FROM,
    METHOD_NOT_ALLOWED,
    RESOURCE_NOT_FOUND,
    VALIDATION_FAILED,
    translate,
)

log = structlog.stdlib.get_logger()

HTTP_422_UNPROCESSABLE = 422

# Status codes raised by routing whose detail is replaced by a catalog message
HTTP_STATUS_MESSAGES = {
    404: RESOURCE_NOT_FOUND,
    405: METHOD_NOT_ALLOWED,
}


def failure(
    message: str,
    status_code: int,
    errors: dict[str, list[str]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the standard failure body."""
    return JSONResponse(
        status_code=status_code,
        headers=headers,
        content={"success": False, "message": message, "errors": errors or {}},
    )


def _field_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        location: tuple[Any, ...] = tuple(error.get("loc", ()))
        field = str(location[-1]) if location else "request"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return errors


def register_exception_handlers(app: FastAPI, default_locale: str) -> None:
    """Install handlers that render errors in the negotiated locale."""

    @app.exception_handler(InvalidFormatError)
    async def invalid_format_handler(request: Request, exc: InvalidFormatError) -> JSONResponse:
        locale = request_locale(request, default_locale)
        message = translate(INVALID_SYNC_FROM, locale)
        log.info("invalid_sync_from_rejected", value=str(exc.value), path=request.url.path)
        return failure(
            message,
            HTTP_422_UNPROCESSABLE,
            {"sync_from": [message]},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        locale = request_locale(request, default_locale)
        errors = _field_errors(exc)
        log.info("request_validation_failed", path=request.url.path, fields=sorted(errors))
        return failure(
            translate(VALIDATION_FAILED, locale),
            HTTP_422_UNPROCESSABLE,
            errors,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        message_id = HTTP_STATUS_MESSAGES.get(exc.status_code)
        if message_id is None:
            return failure(str(exc.detail), exc.status_code, headers=exc.headers)

        log.info("http_error_returned", status_code=exc.status_code, detail=str(exc.detail))
        locale = request_locale(request, default_locale)
        return failure(translate(message_id, locale), exc.status_code, headers=exc.headers)
