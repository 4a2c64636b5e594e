"""Error envelope and app-level exception handlers.

Routes translate domain exceptions into HTTPException through api_error(),
so every failure body looks like:

    {"detail": {"code": "USER_EXISTS", "message": "..."}}

Validation failures add a "fields" list. Anything that escapes a route
becomes a 500 SERVER_ERROR with a generic message; the real cause goes to
the log only.
"""

from typing import Optional

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from todoserver.services.validation import ValidationError

logger = structlog.get_logger()


def api_error(
    status_code: int,
    code: str,
    message: str,
    fields: Optional[list[str]] = None,
) -> HTTPException:
    detail = {"code": code, "message": message}
    if fields:
        detail["fields"] = fields
    return HTTPException(status_code=status_code, detail=detail)


def validation_error(e: ValidationError) -> HTTPException:
    return api_error(
        400,
        "VALIDATION_ERROR",
        "Please check your input and try again.",
        fields=e.fields,
    )


def not_found(message: str = "Task not found") -> HTTPException:
    return api_error(404, "NOT_FOUND", message)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report unparseable bodies/queries as 400 instead of FastAPI's 422."""
    fields = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        fields.append(".".join(loc) or "body")
    return JSONResponse(
        status_code=400,
        content={
            "detail": {
                "code": "VALIDATION_ERROR",
                "message": "Please check your input and try again.",
                "fields": fields,
            }
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "http.unhandled_error",
        path=request.url.path,
        method=request.method,
        error=type(exc).__name__,
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": {
                "code": "SERVER_ERROR",
                "message": "Server error. Please try again later.",
            }
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
