"""Exception handlers mapping domain failures to HTTP responses.

Every failure body has the same envelope::

    {"success": false, "message": "...", "errors": {...}}

Business-rule and field validation errors become 400, missing aggregates
404, stale concurrent writes 409. Anything else is logged with its
traceback and reported as a generic 500.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, InvalidDataError, ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)


def _first_message(errors) -> str:
    if isinstance(errors, dict):
        for messages in errors.values():
            if isinstance(messages, list | tuple) and messages:
                return str(messages[0])
            if messages:
                return str(messages)
    return "Invalid request"


def _failure(status_code: int, message: str, errors=None) -> JSONResponse:
    content = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.setdefault(".".join(location) or "body", []).append(error.get("msg"))
    return _failure(400, _first_message(errors), errors)


async def _domain_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    errors = getattr(exc, "messages", None)
    message = getattr(exc, "message", None) or _first_message(errors)
    return _failure(400, message, errors)


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    messages = getattr(exc, "messages", None)
    message = messages if isinstance(messages, str) and messages else "Resource not found"
    return _failure(404, message)


async def _version_conflict(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("Concurrent modification rejected", path=request.url.path, detail=str(exc))
    return _failure(409, "The resource was modified concurrently, please retry")


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _failure(exc.status_code, str(exc.detail))


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, method=request.method)
    return _failure(500, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(ValidationError, _domain_validation_error)
    app.add_exception_handler(InvalidDataError, _domain_validation_error)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(ExpectedVersionError, _version_conflict)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unexpected_error)
