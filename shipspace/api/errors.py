import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shipspace.core.errors import (
    AuthError,
    ConflictError,
    MarketplaceError,
    NotFoundError,
    TransientError,
    ValidationError,
)
from shipspace.schemas.common import ErrorResponse

log = logging.getLogger(__name__)


def status_for(exc: MarketplaceError) -> int:
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, AuthError):
        return 403 if exc.authenticated else 401
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, ConflictError):
        return 409
    if isinstance(exc, TransientError):
        return 503
    return 500


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        log.warning("%s %s failed: %s", request.method, request.url.path, exc.message)

    body = ErrorResponse(code=exc.kind, message=exc.message, details=exc.details).model_dump()
    headers = {}
    if exc.retryable:
        headers["Retry-After"] = "1"
    if status == 401:
        # matches the X-API-Key header scheme in services.auth
        headers["WWW-Authenticate"] = "APIKey"
    return JSONResponse(status_code=status, content=jsonable_encoder(body), headers=headers or None)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # body/query rejected before reaching the core: same envelope as ValidationError
    details = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in exc.errors()
    ]
    body = ErrorResponse(
        code=ValidationError.kind,
        message="Request is missing required fields or has invalid values",
        details=details,
    ).model_dump()
    return JSONResponse(status_code=422, content=jsonable_encoder(body))


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
