"""
Global middleware.

The request log names the matched route and the authenticated user, so
token failures and page visits can be traced per account.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

ANONYMOUS = "-"


def _route_path(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def register_middleware(app: FastAPI) -> None:
    """Attach any app-level middleware."""

    @app.middleware("http")
    async def request_log(request: Request, call_next):
        # created up front so the auth dependency writes into the same state
        state = request.state
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start

        user_id = getattr(state, "user_id", None) or ANONYMOUS
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.info(
            "%s %s -> %d user=%s (%.3fs)",
            request.method,
            _route_path(request),
            response.status_code,
            user_id,
            elapsed,
        )
        return response
