"""
Request logging middleware and error handlers for the QueComi API
"""

import time
import logging
from datetime import datetime, timezone
from uuid import uuid4
from decimal import Decimal

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.exceptions import QueComiError

logger = logging.getLogger("quecomi.middleware")


def make_serializable(obj):
    """Convert validation error payloads to JSON-serializable values"""
    if isinstance(obj, Decimal):
        return float(obj)
    elif isinstance(obj, dict):
        return {k: make_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_serializable(item) for item in obj]
    elif isinstance(obj, Exception):
        return str(obj)
    return obj


def _error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    error = {"code": code, "message": message}
    if details:
        error["details"] = details
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


def _service_error_response(exc: QueComiError, default_code: str) -> JSONResponse:
    payload = make_serializable(exc.to_dict())
    return _error_response(
        exc.http_status,
        payload.get("code", default_code),
        payload["message"],
        payload.get("details"),
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every HTTP request with a request id and its processing time"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid4())
        request.state.request_id = request_id

        logger.info(
            f"request_started request_id={request_id} "
            f"method={request.method} path={request.url.path}"
        )
        start_time = time.perf_counter()

        try:
            response: Response = await call_next(request)
        except Exception:
            process_time = time.perf_counter() - start_time
            logger.error(
                f"request_failed request_id={request_id} method={request.method} "
                f"path={request.url.path} process_time={process_time:.4f}s",
                exc_info=True,
            )
            raise

        process_time = time.perf_counter() - start_time
        logger.info(
            f"request_completed request_id={request_id} method={request.method} "
            f"path={request.url.path} status={response.status_code} "
            f"process_time={process_time:.4f}s"
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic request validation errors"""
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return _error_response(
        422,
        "VALIDATION_ERROR",
        "Request validation failed",
        make_serializable(exc.errors()),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}")
    return _error_response(exc.status_code, f"HTTP_{exc.status_code}", exc.detail)


async def service_validation_exception_handler(request: Request, exc: QueComiError):
    """Handle service validation errors"""
    logger.warning(f"Service validation error on {request.url.path}: {exc}")
    return _service_error_response(exc, "SERVICE_VALIDATION_ERROR")


async def not_found_exception_handler(request: Request, exc: QueComiError):
    """Handle not found errors"""
    logger.warning(f"Resource not found on {request.url.path}: {exc}")
    return _service_error_response(exc, "NOT_FOUND")


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {request.url.path}: {exc}")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred",
    )
