"""Translate domain exceptions into HTTP responses.

Every error body carries a human-readable ``message``; validation failures
also return the per-field ``errors`` mapping raised by the aggregate.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)


class RateLimited(ValidationError):
    """A rule violation the caller can fix by waiting."""


class ServiceUnavailable(Exception):
    """An upstream dependency could not be reached; the caller may retry."""


def _first_message(messages) -> str:
    if isinstance(messages, dict):
        for value in messages.values():
            if isinstance(value, (list, tuple)) and value:
                return str(value[0])
            if value:
                return str(value)
    return str(messages)


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    status_code = 429 if isinstance(exc, RateLimited) else 400
    return JSONResponse(
        status_code=status_code,
        content={"message": _first_message(exc.messages), "errors": exc.messages},
    )


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"message": "Not found"})


async def _service_unavailable(request: Request, exc: ServiceUnavailable) -> JSONResponse:
    logger.warning("upstream.unavailable", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=503, content={"message": str(exc) or "Service unavailable, please retry"})


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(ServiceUnavailable, _service_unavailable)
    app.add_exception_handler(StarletteHTTPException, _http_error)
