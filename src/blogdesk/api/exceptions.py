from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from blogdesk.commons.exceptions import (
    BaseServiceConflictException,
    BaseServiceException,
    BaseServiceForbiddenException,
    BaseServiceNotFoundException,
    BaseServiceRateLimitedException,
    BaseServiceUnauthorizedException,
    BaseServiceValidationException,
)
from blogdesk.commons.logging import logger

_STATUS_BY_EXCEPTION: tuple[tuple[type[BaseServiceException], int], ...] = (
    (BaseServiceValidationException, status.HTTP_400_BAD_REQUEST),
    (BaseServiceUnauthorizedException, status.HTTP_401_UNAUTHORIZED),
    (BaseServiceForbiddenException, status.HTTP_403_FORBIDDEN),
    (BaseServiceNotFoundException, status.HTTP_404_NOT_FOUND),
    (BaseServiceConflictException, status.HTTP_409_CONFLICT),
    (BaseServiceRateLimitedException, status.HTTP_429_TOO_MANY_REQUESTS),
)


def status_for(exc: BaseServiceException) -> int:
    for exc_type, code in _STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def request_errors(exc: RequestValidationError) -> list[str]:
    """Field path and message per error; submitted values are never echoed."""
    errors: list[str] = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        msg = str(err.get("msg", "Invalid value"))
        errors.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return errors


def configure_global_exception_handlers(app: FastAPI) -> FastAPI:
    @app.exception_handler(BaseServiceException)
    async def service_exception_handler(
        request: Request, exc: BaseServiceException
    ) -> JSONResponse:
        code = status_for(exc)
        content: dict[str, Any] = {"error": exc.message, "details": exc.details}
        headers: dict[str, str] = {}
        if isinstance(exc, BaseServiceValidationException):
            content["errors"] = exc.errors
        if isinstance(exc, BaseServiceRateLimitedException):
            headers["Retry-After"] = str(exc.retry_after_s)
        return JSONResponse(status_code=code, content=content, headers=headers or None)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = request_errors(exc)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "validation_failed",
                "details": "; ".join(errors),
                "errors": errors,
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        # Storage and programming errors: log everything, leak nothing.
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "internal_error", "details": None},
        )

    return app
