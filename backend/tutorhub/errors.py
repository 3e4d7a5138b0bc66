"""Application-wide error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .core.exceptions import DomainException

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Map domain exceptions that escape a route to their HTTP payload."""

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        http_exc = exc.to_http_exception()
        if http_exc.status_code >= 500:
            logger.error("Unhandled %s on %s: %s", exc.code, request.url.path, exc.message)
        return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})
