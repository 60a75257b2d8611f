from __future__ import annotations

import logging
import typing as t

from rpc import deps
from rpc import errors as rpc_errors
from rpc.methods import method
from rpc.types import parse_address, parse_hex

log = logging.getLogger(__name__)

_BLOCK_TAGS = ("latest", "pending")


@method("state.getNonce")
def get_nonce(address: str, tag: str = "latest") -> int:
    """
    Nonce of `address`. "latest" counts mined transactions; "pending" also
    counts transactions waiting in the pool (use it to build the next tx).
    """
    if tag not in _BLOCK_TAGS:
        raise rpc_errors.InvalidParams(f"tag must be one of {_BLOCK_TAGS}")
    ledger = deps.get_ctx().ledger
    addr = parse_address(address)
    return ledger.pending_nonce(addr) if tag == "pending" else ledger.nonce(addr)


@method("state.getCode")
def get_code(address: str) -> dict[str, t.Any] | None:
    """Deployed code at `address` as {name, initArgs}, or null."""
    code = deps.get_ctx().ledger.code_at(parse_address(address))
    if code is None:
        return None
    return {"name": code.name, "initArgs": "0x" + code.init_args.hex()}


@method("state.call")
def call(tx: dict[str, t.Any]) -> str:
    """
    Execute `tx` = {to, data, from?} read-only against current state.

    Returns the 0x-hex return data. A revert is reported as error code 3
    ("execution reverted") with the 0x-hex revert payload as `data`.
    """
    if not isinstance(tx, dict):
        raise rpc_errors.InvalidParams("call object must be {to, data, from?}")
    if "to" not in tx:
        raise rpc_errors.InvalidParams("call object is missing 'to'")
    to = parse_address(tx["to"], name="to")
    data = parse_hex(tx.get("data", "0x"), name="data")
    sender = parse_address(tx["from"], name="from") if tx.get("from") else None

    result = deps.get_ctx().ledger.call(to, data, sender=sender)
    if not result.is_success:
        log.debug("state.call reverted: to=0x%s data=0x%s", to.hex(), result.revert_data.hex())
        raise rpc_errors.ExecutionReverted(result.revert_data)
    return "0x" + result.return_data.hex()


__all__ = ["get_nonce", "get_code", "call"]
