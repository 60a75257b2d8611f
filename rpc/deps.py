from __future__ import annotations

"""
rpc.deps
========
Wires the RPC layer to the running dev ledger:

- Builds the Ledger for the configured chain id / mining mode
- Keeps it in a NodeContext owned by one app (`app.state.node`)
- Binds that context for the duration of each request so method handlers
  can read it with `get_ctx()`
- Provides startup/shutdown hooks (background block production)

Several apps can live in one process; each request only ever sees the
context of the app that received it.

Typical usage
-------------
from rpc.deps import bound, build_context, get_ctx

ctx = build_context(Config())
with bound(ctx):
    ledger = get_ctx().ledger
"""

import asyncio
import contextlib
import contextvars
import logging
import typing as t
from dataclasses import dataclass, field

import contracts  # noqa: F401  (registers deployable contract codes)
from execution.ledger import Ledger

from .config import Config

log = logging.getLogger(__name__)


@dataclass
class NodeContext:
    cfg: Config
    ledger: Ledger
    _miner: t.Optional[asyncio.Task] = field(default=None, repr=False)

    def head(self) -> dict[str, t.Any]:
        return self.ledger.head.to_dict()


_CURRENT: contextvars.ContextVar[NodeContext] = contextvars.ContextVar("proofgate_node_ctx")


def build_context(cfg: Config, ledger: Ledger | None = None) -> NodeContext:
    if ledger is None:
        ledger = Ledger(chain_id=cfg.chain_id, automine=cfg.automine)
    elif ledger.chain_id != cfg.chain_id:
        raise ValueError(f"ledger chain id {ledger.chain_id} != configured {cfg.chain_id}")
    return NodeContext(cfg=cfg, ledger=ledger)


@contextlib.contextmanager
def bound(ctx: NodeContext) -> t.Iterator[NodeContext]:
    """Make `ctx` the one `get_ctx()` returns inside the block."""
    token = _CURRENT.set(ctx)
    try:
        yield ctx
    finally:
        _CURRENT.reset(token)


def get_ctx() -> NodeContext:
    try:
        return _CURRENT.get()
    except LookupError:
        raise RuntimeError("no node context bound; handlers only run inside an app request") from None


# ---- Lifecycle --------------------------------------------------------------

async def _mine_forever(ctx: NodeContext) -> None:
    interval = ctx.cfg.block_time
    log.info("background miner started (block_time=%.2fs)", interval)
    while True:
        await asyncio.sleep(interval)
        await asyncio.to_thread(ctx.ledger.mine)


async def startup(ctx: NodeContext) -> None:
    if ctx.cfg.background_mining and ctx._miner is None:
        ctx._miner = asyncio.create_task(_mine_forever(ctx))


async def shutdown(ctx: NodeContext) -> None:
    task, ctx._miner = ctx._miner, None
    if task is not None:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        log.info("background miner stopped")


__all__ = ["NodeContext", "build_context", "bound", "get_ctx", "startup", "shutdown"]
