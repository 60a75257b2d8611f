"""
rpc.server - FastAPI app serving the dev ledger over JSON-RPC.

Endpoints:
  POST /rpc      JSON-RPC 2.0 (single & batch)
  GET  /healthz  {"ok": true, "chainId": ..., "height": ..., "version": ...}

Run with `proofgate node` or `python -m rpc.server`.
"""
from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from core.version import __version__
from execution.ledger import Ledger

from . import deps
from . import errors as rpc_errors
from .config import Config, load_config
from .jsonrpc import dispatch
from .methods import ensure_loaded
from .middleware import apply_middleware

log = logging.getLogger(__name__)


def create_app(cfg: Config | None = None, ledger: Ledger | None = None) -> FastAPI:
    """
    Build the FastAPI app around `ledger` (a fresh one for `cfg.chain_id`
    when omitted). The node context lives on `app.state.node` from the
    start, so the app is usable through TestClient without lifespan events,
    and is bound for every /rpc request.
    """
    cfg = cfg or load_config()
    ctx = deps.build_context(cfg, ledger)
    ensure_loaded()

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        log.info(
            "node starting",
            extra={"chain_id": cfg.chain_id, "host": cfg.host, "port": cfg.port},
        )
        await deps.startup(ctx)
        try:
            yield
        finally:
            await deps.shutdown(ctx)
            log.info("node stopped")

    app = FastAPI(
        title="proofgate node",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.node = ctx
    apply_middleware(app, cfg)

    @app.get("/healthz")
    async def healthz() -> JSONResponse:
        head = ctx.ledger.head
        return JSONResponse(
            {
                "ok": True,
                "chainId": ctx.ledger.chain_id,
                "height": head.height,
                "version": __version__,
            }
        )

    @app.post("/rpc")
    async def rpc_endpoint(request: Request) -> Response:
        try:
            payload = json.loads(await request.body())
        except ValueError as e:
            err = rpc_errors.ParseError(f"invalid JSON body: {e}")
            return JSONResponse(rpc_errors.error_response(None, err))

        with deps.bound(request.app.state.node):
            result = await dispatch(payload)
        if result is None:
            return Response(status_code=204)
        return JSONResponse(result)

    return app


def main(cfg: Config | None = None) -> None:
    from core.logging import configure

    cfg = cfg or load_config()
    configure(level=cfg.log_level)
    app = create_app(cfg)
    import uvicorn

    uvicorn.run(app, host=cfg.host, port=cfg.port, log_level=cfg.log_level.lower(), workers=1)


if __name__ == "__main__":
    main()


__all__ = ["create_app", "main"]
