"""Exception handlers and request-id/access-log middleware for the API.

Every error leaves the API in one envelope::

    {"error": {"code": "...", "message": "...", "field": "..."}, "request_id": "..."}

and every response carries the ``X-Request-Id`` header, including 500s that
Starlette renders from outside the middleware stack.
"""

from __future__ import annotations

from time import perf_counter
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from fastapi import status
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers, MutableHeaders
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.errors import KanbanError
from app.core.logging import get_logger

if TYPE_CHECKING:
    from fastapi import FastAPI
    from starlette.requests import Request
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "X-Request-Id"
HEALTH_PATHS = frozenset({"/health", "/healthz", "/readyz"})
_MAX_REQUEST_ID_LENGTH = 128
_HTTP_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "BAD_REQUEST",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_409_CONFLICT: "CONFLICT",
    422: "VALIDATION_ERROR",
}

logger = get_logger(__name__)


def _get_request_id(request: Request) -> str | None:
    request_id = getattr(request.state, "request_id", None)
    if isinstance(request_id, str) and request_id:
        return request_id
    return None


def _resolve_request_id(scope: Scope) -> str:
    supplied = Headers(scope=scope).get(REQUEST_ID_HEADER, "").strip()
    if supplied and len(supplied) <= _MAX_REQUEST_ID_LENGTH:
        return supplied
    return uuid4().hex


def _json_safe(value: object) -> Any:
    """Convert validation error fragments into JSON-serializable values."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, dict):
        return {str(key): _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_json_safe(item) for item in value]
    return str(value)


def _error_payload(
    *,
    code: str,
    message: str,
    request_id: str | None,
    field: str | None = None,
    details: object | None = None,
) -> dict[str, object]:
    error: dict[str, object] = {"code": code, "message": message}
    if field is not None:
        error["field"] = field
    if details is not None:
        error["details"] = details
    payload: dict[str, object] = {"error": error}
    if request_id is not None:
        payload["request_id"] = request_id
    return payload


def _error_response(
    request: Request,
    *,
    status_code: int,
    code: str,
    message: str,
    field: str | None = None,
    details: object | None = None,
) -> JSONResponse:
    request_id = _get_request_id(request)
    headers = {REQUEST_ID_HEADER: request_id} if request_id else None
    return JSONResponse(
        status_code=status_code,
        content=_error_payload(
            code=code,
            message=message,
            request_id=request_id,
            field=field,
            details=details,
        ),
        headers=headers,
    )


def _validation_field(errors: list[Any]) -> str | None:
    if not errors:
        return None
    loc = errors[0].get("loc") if isinstance(errors[0], dict) else None
    if not isinstance(loc, (list, tuple)):
        return None
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or None


async def _kanban_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, KanbanError):
        msg = "Expected KanbanError"
        raise TypeError(msg)
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "http.error.storage",
            exc_info=(type(exc), exc, exc.__traceback__),
            extra={"path": request.url.path, "code": exc.code},
        )
    return _error_response(
        request,
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        field=getattr(exc, "field", None),
    )


async def _request_validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    if not isinstance(exc, RequestValidationError):
        msg = "Expected RequestValidationError"
        raise TypeError(msg)
    errors = list(exc.errors())
    message = str(errors[0].get("msg", "Invalid request")) if errors else "Invalid request"
    return _error_response(
        request,
        status_code=status.HTTP_400_BAD_REQUEST,
        code="VALIDATION_ERROR",
        message=message,
        field=_validation_field(errors),
        details=_json_safe(errors),
    )


async def _response_validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    if not isinstance(exc, ResponseValidationError):
        msg = "Expected ResponseValidationError"
        raise TypeError(msg)
    logger.error(
        "http.response.invalid",
        extra={"path": request.url.path, "errors": _json_safe(list(exc.errors()))},
    )
    return _error_response(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="INTERNAL_ERROR",
        message="Internal Server Error",
    )


async def _http_exception_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    if not isinstance(exc, StarletteHTTPException):
        msg = "Expected StarletteHTTPException"
        raise TypeError(msg)
    response = _error_response(
        request,
        status_code=exc.status_code,
        code=_HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
        message=str(exc.detail),
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "http.error.unhandled",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"path": request.url.path},
    )
    return _error_response(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="INTERNAL_ERROR",
        message="Internal Server Error",
    )


class RequestContextMiddleware:
    """Assign a request id, echo it on the response and emit one access log line."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _resolve_request_id(scope)
        scope.setdefault("state", {})["request_id"] = request_id
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        async def send_with_request_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = MutableHeaders(scope=message)
                if REQUEST_ID_HEADER not in headers:
                    headers.append(REQUEST_ID_HEADER, request_id)
            await send(message)

        started = perf_counter()
        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            elapsed_ms = (perf_counter() - started) * 1000
            self._log_request(scope, request_id, status_code, elapsed_ms)

    @staticmethod
    def _log_request(
        scope: Scope,
        request_id: str,
        status_code: int,
        elapsed_ms: float,
    ) -> None:
        path = scope.get("path", "")
        if path in HEALTH_PATHS and not settings.request_log_include_health:
            return
        extra = {
            "request_id": request_id,
            "method": scope.get("method", ""),
            "path": path,
            "status_code": status_code,
            "duration_ms": round(elapsed_ms, 2),
        }
        slow_ms = settings.request_log_slow_ms
        if slow_ms and elapsed_ms >= slow_ms:
            logger.warning("http.request.slow", extra={**extra, "slow_threshold_ms": slow_ms})
            return
        logger.info("http.request.completed", extra=extra)


def install_error_handling(app: FastAPI) -> None:
    """Register the error envelope handlers and the request context middleware."""
    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(KanbanError, _kanban_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_exception_handler)
    app.add_exception_handler(ResponseValidationError, _response_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
