"""
Proofgate RPC - middleware wiring.

`apply_middleware(app, cfg)` installs access logging and CORS onto a FastAPI
application. Logging goes first so it captures timings and status for
everything downstream.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.middleware.cors import CORSMiddleware

from .logging import LoggingMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI  # pragma: no cover

    from rpc.config import Config


def apply_middleware(app: "FastAPI", cfg: "Config") -> None:
    # Starlette wraps in reverse order of addition: add CORS first so the
    # logging middleware is outermost.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cfg.cors_allow_origins),
        allow_credentials=False,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["content-type", "x-request-id"],
        max_age=3600,
    )
    app.add_middleware(LoggingMiddleware)


__all__ = ["apply_middleware", "LoggingMiddleware"]
