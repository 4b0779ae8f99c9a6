"""Exception handlers that give every service the same JSON error shape.

Service code raises a ``ServiceError`` subclass. The handler turns it into
``{"error": message}`` with the error's status code. Anything unhandled
becomes a 500 with the same shape.
"""

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)


class ServiceError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def cors_error_headers(request: Request) -> dict[str, str]:
    """
    CORS headers for a response built outside CORSMiddleware.

    Unhandled exceptions are answered by the outermost server error
    middleware, so browsers would otherwise not be allowed to read the 500.
    """
    origin = request.headers.get("origin")
    if not origin:
        return {}
    allowed = get_settings().CORS_ORIGINS
    if "*" in allowed:
        return {"Access-Control-Allow-Origin": "*"}
    if origin in allowed:
        return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    return {}


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    body: dict[str, Any] = {"error": "Internal server error"}
    if get_settings().ENVIRONMENT != "production":
        body["details"] = str(exc)
    return JSONResponse(status_code=500, content=body, headers=cors_error_headers(request))


def add_exception_handlers(app: FastAPI) -> None:
    """Register the shared exception handlers on an app."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
