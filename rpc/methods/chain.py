from __future__ import annotations

import typing as t

from rpc import deps
from rpc.methods import method
from rpc.types import parse_quantity


@method("chain.getChainId")
def get_chain_id() -> int:
    """Return the chain id served by this node."""
    return deps.get_ctx().ledger.chain_id


@method("chain.getHead")
def get_head() -> dict[str, t.Any]:
    """Return the latest sealed block."""
    return deps.get_ctx().head()


@method("chain.getBlockByNumber")
def get_block_by_number(number: t.Any = "latest") -> dict[str, t.Any] | None:
    """Return the block at `number` ("latest", an int, or a hex quantity), or null."""
    ledger = deps.get_ctx().ledger
    if number == "latest":
        return ledger.head.to_dict()
    if number == "earliest":
        height = 0
    else:
        height = parse_quantity(number)
    block = ledger.get_block(height)
    return block.to_dict() if block is not None else None


__all__ = ["get_chain_id", "get_head", "get_block_by_number"]
