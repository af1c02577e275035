"""Request middleware for locale negotiation and the JSON body gate."""

import structlog
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from walletsync.locale.messages import UNSUPPORTED_MEDIA_TYPE, translate
from walletsync.locale.negotiator import LocaleNegotiator

log = structlog.stdlib.get_logger()

# Methods that carry no request body
BODYLESS_METHODS = frozenset({"GET", "DELETE"})
JSON_MEDIA_TYPE = "application/json"


def request_locale(request: Request, default: str) -> str:
    """Locale negotiated for this request, or ``default`` if none was set."""
    return getattr(request.state, "locale", default)


class LocaleMiddleware(BaseHTTPMiddleware):
    """Negotiates the request locale from Accept-Language.

    The result is stored on ``request.state.locale`` for this request only
    and bound into the structlog context together with the method and path.
    """

    def __init__(self, app: ASGIApp, negotiator: LocaleNegotiator):
        super().__init__(app)
        self._negotiator = negotiator

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        locale = self._negotiator.negotiate(request.headers.get("accept-language"))
        request.state.locale = locale
        with structlog.contextvars.bound_contextvars(
            locale=locale, method=request.method, path=request.url.path
        ):
            return await call_next(request)


class JsonContentTypeMiddleware(BaseHTTPMiddleware):
    """Rejects body-carrying requests whose Content-Type is not JSON."""

    def __init__(self, app: ASGIApp, default_locale: str = "en"):
        super().__init__(app)
        self._default_locale = default_locale

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method in BODYLESS_METHODS:
            return await call_next(request)

        content_type = request.headers.get("content-type", "")
        if content_type.startswith(JSON_MEDIA_TYPE):
            return await call_next(request)

        locale = request_locale(request, self._default_locale)
        log.info("unsupported_media_type_rejected", content_type=content_type)
        return JSONResponse(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            content={
                "error": "Unsupported Media Type",
                "message": translate(UNSUPPORTED_MEDIA_TYPE, locale),
            },
        )
