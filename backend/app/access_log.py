"""Middleware for request access logging."""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("uvicorn.error")


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of API requests."""

    # Health checks would drown out real traffic
    SKIP_ENDPOINTS = {
        "/api/ping",
        "/favicon.ico",
    }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if path in self.SKIP_ENDPOINTS or not path.startswith("/api/"):
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - start_time) * 1000)

        logger.info(
            "ACCESS|%s|%s|%s|%sms|%s",
            request.method,
            path,
            response.status_code,
            duration_ms,
            self._get_client_ip(request) or "-",
        )
        return response

    def _get_client_ip(self, request: Request) -> Optional[str]:
        return client_address(request.headers.get("x-forwarded-for"), request.client.host if request.client else None)


def client_address(forwarded_for: Optional[str], peer_host: Optional[str]) -> Optional[str]:
    """First hop of X-Forwarded-For when a proxy set it, else the socket peer."""
    if forwarded_for:
        first_hop = forwarded_for.split(",", 1)[0].strip()
        if first_hop:
            return first_hop
    return peer_host
