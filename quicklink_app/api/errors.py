"""
Exception handlers.

Every error response uses the same envelope:

    {"error": {"code", "message", "timestamp", "requestId", "details"?, "stack"?}}
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from quicklink_app.config import Settings
from quicklink_app.exceptions import AppError, ValidationError

logger = logging.getLogger(__name__)


def get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or "unknown"


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Optional[List[Dict[str, Any]]] = None,
    stack: Optional[str] = None,
) -> JSONResponse:
    error = {
        "code": code,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "requestId": get_request_id(request),
    }
    if details:
        error["details"] = details
    if stack:
        error["stack"] = stack
    
    return JSONResponse(status_code=status_code, content={"error": error})


def validation_details(exc: RequestValidationError) -> List[Dict[str, Any]]:
    """Field-level details; the leading body/path/query part of loc is dropped"""
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "path", "query", "header"):
            loc = loc[1:]
        message = str(error.get("msg", "")).replace("Value error, ", "", 1)
        details.append({
            "field": ".".join(loc) or "unknown",
            "message": message,
            "type": error.get("type"),
        })
    return details


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Attach the application's exception handlers to app"""
    
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        logger.warning(f"[{get_request_id(request)}] {exc.code}: {exc.message}")
        details = exc.details if isinstance(exc, ValidationError) else None
        return error_response(request, exc.status_code, exc.code, exc.message, details)
    
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = validation_details(exc)
        logger.warning(f"[{get_request_id(request)}] Validation failed: {details}")
        return error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            "VALIDATION_ERROR",
            "Validation failed",
            details,
        )
    
    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            f"[{get_request_id(request)}] Unhandled exception on "
            f"{request.method} {request.url.path}: {exc}",
            exc_info=True,
        )
        stack = None
        if not settings.is_production:
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_ERROR",
            "Something went wrong on our end",
            stack=stack,
        )
