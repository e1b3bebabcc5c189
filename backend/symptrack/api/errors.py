"""Convert every error leaving the API into the ``{"message": str}`` envelope.

Request validation failures are reported as HTTP 400 with all field errors
folded into one human-readable message.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# Leading loc segments that say where the value came from, not which field.
_LOC_SOURCES = {"body", "query", "path", "header", "cookie"}


def format_validation_errors(errors: list[dict]) -> str:
    """Fold pydantic error dicts into ``Validation error: <msg> at "<path>"; ...``."""
    parts: list[str] = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in _LOC_SOURCES]
        msg = err.get("msg", "Invalid value")
        parts.append(f'{msg} at "{".".join(loc)}"' if loc else msg)
    return "Validation error: " + "; ".join(parts)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = format_validation_errors(exc.errors())
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": message},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
