"""
Exception handlers rendering every failure as `{error, message, code}` JSON.

- `SupportError` family → its own status/code; title `AI Service Error` for
  generator failures, `API Error` otherwise.
- Request body validation → 400 `Validation Error` with per-field `details`,
  or 400 `Bad Request` (`INVALID_JSON`) when the body is not valid JSON.
- Unknown routes → 404 `Not Found`.
- Anything else → 500 with a fixed message; internals never reach the client.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from support_backend.exceptions import SupportError

logger = logging.getLogger(__name__)


def make_error_response(status_code: int, error: str, message: str, code: str, details=None) -> JSONResponse:
    content = {"error": error, "message": message, "code": code}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _field_name(loc) -> str:
    parts = [str(p) for p in loc]
    # drop the leading "body" segment FastAPI adds to body fields
    if len(parts) > 1 and parts[0] == "body":
        parts = parts[1:]
    return ".".join(parts)


def register_exception_handlers(app: FastAPI, show_tracebacks: bool = True) -> None:
    """
    Attach the handlers to `app`.

    Args:
        app: Application to configure.
        show_tracebacks: Log stack traces of handled errors (disabled in production).
    """

    @app.exception_handler(SupportError)
    async def support_error_handler(request: Request, exc: SupportError):
        logger.error("%s: %s", type(exc).__name__, exc.message, exc_info=exc if show_tracebacks else None)
        return make_error_response(
            status_code=exc.status_code,
            error=exc.error,
            message=exc.message,
            code=exc.code,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if any(err.get("type") == "json_invalid" for err in errors):
            logger.error("RequestValidationError: invalid JSON body on %s %s", request.method, request.url.path)
            return make_error_response(
                status_code=400,
                error="Bad Request",
                message="Invalid JSON in request body",
                code="INVALID_JSON",
            )

        details = [{"field": _field_name(err.get("loc", ())), "message": err.get("msg", "")} for err in errors]
        logger.error("RequestValidationError: %s", "; ".join(f"{d['field']}: {d['message']}" for d in details))
        return make_error_response(
            status_code=400,
            error="Validation Error",
            message="Invalid request data",
            code="VALIDATION_ERROR",
            details=details,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return make_error_response(
                status_code=404,
                error="Not Found",
                message=f"Route {request.method} {request.url.path} not found",
                code="NOT_FOUND",
            )
        msg = exc.detail if isinstance(exc.detail, str) else "HTTP error"
        return make_error_response(
            status_code=exc.status_code,
            error="API Error",
            message=msg,
            code="HTTP_ERROR",
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error("%s: %s", type(exc).__name__, exc, exc_info=exc if show_tracebacks else None)
        return make_error_response(
            status_code=500,
            error="Internal Server Error",
            message="An unexpected error occurred. Please try again later.",
            code="INTERNAL_ERROR",
        )
