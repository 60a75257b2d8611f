from __future__ import annotations

import json
import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from core.logging import short_uuid, trace_scope

_LOG = logging.getLogger("rpc.access")


def _detect_jsonrpc_method(b: bytes) -> Optional[str]:
    if not b:
        return None
    # Best-effort parse, tolerate non-JSON bodies
    try:
        obj = json.loads(b.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        return None
    if isinstance(obj, dict):
        m = obj.get("method")
        return str(m) if isinstance(m, str) else None
    if isinstance(obj, list) and obj and isinstance(obj[0], dict):
        m = obj[0].get("method")
        return str(m) if isinstance(m, str) else None
    return None


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Access logging with tracing IDs.

    - One record per HTTP request; fields go through `extra` so the JSON
      formatter in core.logging emits them as keys.
    - Binds `trace_id` for the duration of the request (incoming
      X-Request-ID is reused) and echoes it as the `X-Request-ID` header.
    """

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        req_id = request.headers.get("x-request-id") or short_uuid()
        start = time.perf_counter()
        body = await request.body()
        jsonrpc_method = _detect_jsonrpc_method(body)

        with trace_scope(req_id):
            status = 500
            try:
                response = await call_next(request)
                status = response.status_code
                response.headers["X-Request-ID"] = req_id
                return response
            finally:
                duration_ms = round((time.perf_counter() - start) * 1000.0, 3)
                level = logging.INFO if status < 400 else logging.WARNING
                _LOG.log(
                    level,
                    "%s %s → %d (%.1f ms)",
                    request.method,
                    request.url.path,
                    status,
                    duration_ms,
                    extra={"jsonrpc_method": jsonrpc_method, "duration_ms": duration_ms},
                )


__all__ = ["LoggingMiddleware"]
