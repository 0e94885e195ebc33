"""
Error handling that converts exceptions to HTTP responses.
Every error leaves the API as {"error": "<message>"}.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from promptdesk.core.exceptions import PromptDeskException
import logging

logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware to convert exceptions to appropriate HTTP responses."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)

        except PromptDeskException as e:
            log = logger.error if e.status_code >= 500 else logger.info
            log(
                f"Application error: {e.message}",
                extra={
                    "context": {
                        "status_code": e.status_code,
                        "path": request.url.path,
                        "method": request.method,
                    }
                }
            )
            return JSONResponse(status_code=e.status_code, content={"error": e.message})

        except Exception as e:
            logger.error(
                f"Unexpected error: {str(e)}",
                exc_info=True,
                extra={
                    "context": {
                        "path": request.url.path,
                        "method": request.method,
                    }
                }
            )
            return JSONResponse(status_code=500, content={"error": "Internal server error", "detail": str(e)})


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = [str(item) for item in error.get("loc", ()) if item not in ("body", "query", "path")]
        field = ".".join(location)
        message = error.get("msg", "invalid value")
        parts.append(f"{field}: {message}" if field else message)
    return "; ".join(parts) or "Invalid request"


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _describe_validation_errors(exc)
    logger.info(f"Rejected request {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Render framework-level errors in the same envelope as application errors."""
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
