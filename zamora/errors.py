"""Domain error taxonomy and the JSON error responses built from it.

Services raise these; ``zamora.main`` turns them (and FastAPI's own
``HTTPException`` / validation errors) into ``{"error": ..., "code": ...}``
bodies with the matching status code.
"""

import logging

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from zamora.config import settings

logger = logging.getLogger(__name__)


class ZamoraError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, *, code: str | None = None, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details


class ValidationError(ZamoraError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class AuthenticationError(ZamoraError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTHENTICATION_ERROR"

    def __init__(self, message: str = "Authentication required", **kwargs) -> None:
        super().__init__(message, **kwargs)


class AuthorizationError(ZamoraError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "AUTHORIZATION_ERROR"

    def __init__(self, message: str = "Access denied", **kwargs) -> None:
        super().__init__(message, **kwargs)


class NotFoundError(ZamoraError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, message: str = "Resource not found", **kwargs) -> None:
        super().__init__(message, **kwargs)


class ConflictError(ZamoraError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


# ---------------------------------------------------------------------------
# Exception handlers (registered in zamora.main)
# ---------------------------------------------------------------------------


def _format_validation_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    formatted: dict[str, list[str]] = {}
    for err in exc.errors():
        # Drop the leading "body"/"query"/"path" segment
        loc = [str(part) for part in err.get("loc", ())[1:]] or ["request"]
        formatted.setdefault(".".join(loc), []).append(err.get("msg", "Invalid value"))
    return formatted


async def zamora_error_handler(request: Request, exc: ZamoraError) -> JSONResponse:
    content: dict = {"error": exc.message, "code": exc.code}
    if exc.details:
        content["details"] = jsonable_encoder(exc.details)
    return JSONResponse(status_code=exc.status_code, content=content)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict):
        content = {"error": exc.detail.get("message", "Request failed"), **exc.detail}
    else:
        content = {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation failed",
            "code": "VALIDATION_ERROR",
            "details": _format_validation_errors(exc),
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if settings.debug else "An unexpected error occurred"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": message, "code": "INTERNAL_ERROR"},
    )
