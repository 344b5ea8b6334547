# backend/app/core/errors.py
"""
API error taxonomy and the exception handlers that render it.

Every error leaves the service as JSON:
    {"success": false, "error": "<short reason>", "message": "<detail>"}
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, error: Optional[str] = None):
        self.error = error or self.error
        self.message = message
        super().__init__(status_code=self.status_code, detail=self.error)

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": False, "error": self.error}
        if self.message:
            body["message"] = self.message
        return body


class Unauthenticated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Access denied. No token provided"


class InvalidToken(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Invalid token"


class InvalidCredentials(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Invalid email or password"


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Not authorized"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not found"


class MalformedId(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid id format"


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation failed"


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"


class InfrastructureError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal server error"


class AuthInfrastructureError(InfrastructureError):
    error = "Authentication error"


# ─────────────────────────────────────────────────────────────────────────────
# Handlers
# ─────────────────────────────────────────────────────────────────────────────

async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for err in exc.errors():
        # loc looks like ("body", "message") or ("query", "page")
        field = ".".join(str(part) for part in err.get("loc", ())[1:]) or "body"
        details.append({"field": field, "message": err.get("msg", "Invalid value")})

    error = ValidationError("; ".join(f"{d['field']}: {d['message']}" for d in details))
    body = error.to_body()
    body["details"] = details
    return JSONResponse(status_code=error.status_code, content=body)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI, *, expose_details: bool) -> None:
    """Attach the JSON error handlers to `app`.

    `expose_details` controls whether raw driver messages reach the client.
    """

    async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Store failure on %s %s", request.method, request.url.path)
        message = str(exc) if expose_details else None
        error = InfrastructureError(message)
        return JSONResponse(status_code=error.status_code, content=error.to_body())

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
