"""
Error Handlers - Map every failure to a JSON error body.

Body shape: {"error": str, "details"?: [str]}
"""
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from modules.users.services.errors import ErrorKind, ServiceError
from shared.services.logger import get_logger


logger = get_logger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.MISSING_FIELD: 400,
    ErrorKind.DUPLICATE_EMAIL: 400,
    ErrorKind.VALIDATION_FAILURE: 400,
    ErrorKind.INVALID_IDENTIFIER: 400,
    ErrorKind.NOT_FOUND: 404,
}


def error_body(message: str, details: Optional[list[str]] = None) -> dict:
    body = {"error": message}
    if details:
        body["details"] = details
    return body


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    status_code = STATUS_BY_KIND[exc.kind]
    logger.warning(
        f"{request.method} {request.url.path} -> {status_code} "
        f"{exc.kind.value}: {exc.message} {exc.details or ''}".rstrip()
    )
    return JSONResponse(status_code=status_code, content=error_body(exc.message, exc.details))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        details.append(f"{location}: {error['msg']}" if location else error["msg"])
    logger.warning(f"{request.method} {request.url.path} -> 400 request validation: {details}")
    return JSONResponse(status_code=400, content=error_body("Validation Error", details))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown paths and unsupported methods both read as a missing route
    if exc.status_code in (404, 405):
        logger.warning(f"{request.method} {request.url.path} -> 404 route not found")
        return JSONResponse(status_code=404, content=error_body("Route not found"))

    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code} {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} -> 500: {exc}")
    return JSONResponse(status_code=500, content=error_body("Internal server error"))


def register_error_handlers(app: FastAPI) -> None:
    """Install the error handlers on the app."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, internal_error_handler)
