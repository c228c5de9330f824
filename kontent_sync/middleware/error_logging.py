"""
Middleware per il logging centralizzato degli errori
"""
import logging
import time
import traceback
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware per il logging centralizzato degli errori e delle richieste
    """

    def __init__(self, app, log_requests: bool = True):
        super().__init__(app)
        self.log_requests = log_requests

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Intercetta le richieste e le risposte per il logging"""
        start_time = time.time()
        request_id = id(request)

        if self.log_requests:
            logger.info(
                f"Request started: {request.method} {request.url.path}",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "client_ip": request.client.host if request.client else None,
                }
            )

        try:
            # Esegui la richiesta
            response = await call_next(request)
        except Exception as exc:
            process_time = time.time() - start_time
            logger.error(
                f"Request failed: {request.method} {request.url.path} - {type(exc).__name__}: {str(exc)}",
                extra={
                    "request_id": request_id,
                    "error_type": type(exc).__name__,
                    "process_time": process_time,
                    "traceback": traceback.format_exc(),
                },
                exc_info=True
            )
            raise

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-Request-ID"] = str(request_id)
        return response


class PerformanceLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware per il monitoraggio delle richieste lente
    """

    def __init__(self, app, slow_request_threshold: float = 30.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        if process_time > self.slow_request_threshold:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path} ({process_time:.1f}s)",
                extra={
                    "path": request.url.path,
                    "process_time": process_time,
                    "threshold": self.slow_request_threshold,
                    "status_code": response.status_code,
                }
            )

        return response
