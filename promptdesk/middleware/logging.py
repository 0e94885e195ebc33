"""
Request logging middleware.

Tags each request with an id (taken from ``X-Request-ID`` when the client
sends one) and logs how it was answered.
"""
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from promptdesk.core.logging import generate_request_id, log_event, set_request_id

REQUEST_ID_HEADER = "X-Request-ID"

# Polled by the desktop shell or served as static files; only failures are logged
_QUIET_PREFIXES = ("/api/health", "/uploads/")


def _log(level: str, event: str, message: str, context: dict, exc_info=None) -> None:
    log_event(
        level=level,
        logger=__name__,
        function="dispatch",
        operation="http_request",
        event=event,
        message=message,
        context=context,
        exc_info=exc_info,
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assigns request ids and logs one line per request and response."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        set_request_id(request_id)

        started = time.perf_counter()
        route = f"{request.method} {request.url.path}"
        quiet = request.url.path.startswith(_QUIET_PREFIXES)

        if not quiet:
            _log("INFO", "request_received", f"--> {route}", {
                "query": dict(request.query_params),
                "client": request.client.host if request.client else None,
                "content_type": request.headers.get("content-type"),
            })

        try:
            response = await call_next(request)
        except Exception as e:
            # Application errors below 500 are turned into responses by ErrorHandlingMiddleware
            expected = getattr(e, "status_code", 500) < 500
            _log(
                "WARNING" if expected else "ERROR",
                "request_error",
                f"<-- {route} raised {type(e).__name__}: {e}",
                {"duration_ms": round((time.perf_counter() - started) * 1000, 1)},
                exc_info=None if expected else e,
            )
            raise

        if not quiet:
            _log("INFO", "response_sent", f"<-- {route} {response.status_code}", {
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            })

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
