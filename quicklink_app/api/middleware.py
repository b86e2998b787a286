"""Request correlation and logging middleware."""

import logging
import secrets
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)

SLOW_REQUEST_MS = 1000


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assigns a request id and logs each request with its outcome."""
    
    async def dispatch(self, request: Request, call_next: Callable):
        request_id = secrets.token_hex(8)
        request.state.request_id = request_id
        start_time = time.time()
        
        client_ip = request.client.host if request.client else "unknown"
        logger.info(f"[{request_id}] {request.method} {request.url.path} from {client_ip}")
        
        response = await call_next(request)
        
        duration_ms = (time.time() - start_time) * 1000
        message = f"[{request_id}] {response.status_code} in {duration_ms:.0f}ms"
        if response.status_code >= 500:
            logger.error(f"{message} - Server Error")
        elif response.status_code >= 400:
            logger.warning(f"{message} - Client Error")
        else:
            logger.info(message)
        
        if duration_ms > SLOW_REQUEST_MS:
            logger.warning(f"[{request_id}] Slow request detected: {duration_ms:.0f}ms")
        
        response.headers["X-Request-ID"] = request_id
        return response
