"""
proofgate_sdk.tx.send
=====================

Build, sign and submit dev-ledger transactions via JSON-RPC and await receipts.

Primary entry points
--------------------
- get_nonce(rpc, address) -> int
    Next usable nonce (`state.getNonce` with the "pending" tag).

- build_and_sign(signer, chain_id, nonce, to=..., data=..., code=...) -> SignedTx
    DEPLOY when `code` is given, CALL otherwise.

- submit_raw(rpc, raw_tx: bytes) -> str
    Sends the CBOR envelope via `tx.sendRawTransaction`; returns the 0x hash.

- send_signed(rpc, stx) -> str
    submit_raw, but a DUPLICATE_TX rejection naming this very hash counts as
    accepted: the RPC client resends after a lost response and the node
    answers the resend with DUPLICATE_TX.

- wait_for_receipt(rpc, tx_hash, *, timeout_s=60, poll_interval_s=0.25) -> dict
    Polls `tx.getTransactionReceipt`, sleeping with a growing interval between
    polls, until a receipt arrives or the timeout elapses
    (ConfirmationTimeout).

Other node rejections surface unchanged as `RpcError` (codes -32010..-32019)
and transport faults as `NetworkFailure`.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, Protocol

from core.types.tx import SignedTx, Tx, TxKind
from core.utils.bytes import to_hex

from ..errors import ConfirmationTimeout, JsonRpcCode, RpcError, TxError
from ..wallet.signer import Signer

log = logging.getLogger(__name__)


class _RpcClient(Protocol):
    def call(self, method: str, params: Optional[dict | list] = None) -> Any: ...


# -----------------------------------------------------------------------------
# Build & sign
# -----------------------------------------------------------------------------


def get_nonce(rpc: _RpcClient, address: bytes | str) -> int:
    addr = address if isinstance(address, str) else to_hex(address)
    return int(rpc.call("state.getNonce", [addr, "pending"]))


def build_and_sign(
    signer: Signer,
    *,
    chain_id: int,
    nonce: int,
    to: Optional[bytes] = None,
    data: bytes = b"",
    code: Optional[str] = None,
) -> SignedTx:
    tx = Tx(
        kind=TxKind.DEPLOY if code else TxKind.CALL,
        chain_id=chain_id,
        nonce=nonce,
        sender=signer.address,
        to=to,
        data=bytes(data),
        code=code,
    )
    return signer.sign_tx(tx)


# -----------------------------------------------------------------------------
# Core RPC calls
# -----------------------------------------------------------------------------


def submit_raw(rpc: _RpcClient, raw_tx: bytes) -> str:
    """Submit a raw CBOR transaction; returns its 0x-prefixed hash."""
    if not isinstance(raw_tx, (bytes, bytearray)):
        raise TypeError("raw_tx must be bytes")
    result = rpc.call("tx.sendRawTransaction", [to_hex(bytes(raw_tx))])
    if not isinstance(result, str):
        raise TxError(f"unexpected RPC result for sendRawTransaction: {type(result)!r}")
    return result if result.startswith("0x") else "0x" + result


def _is_own_duplicate(err: RpcError, tx_hash: str) -> bool:
    if err.code != JsonRpcCode.DUPLICATE_TX or not isinstance(err.data, dict):
        return False
    known = err.data.get("hash")
    return isinstance(known, str) and known.lower() == tx_hash


def send_signed(rpc: _RpcClient, stx: SignedTx) -> str:
    """Submit `stx`; a node that already holds this exact tx counts as accepted."""
    tx_hash = to_hex(stx.hash)
    try:
        return submit_raw(rpc, stx.raw)
    except RpcError as e:
        if not _is_own_duplicate(e, tx_hash):
            raise
        log.warning("tx %s already known to the node (response to an earlier send was lost)", tx_hash)
        return tx_hash


def get_transaction_receipt(rpc: _RpcClient, tx_hash: str) -> Optional[Dict[str, Any]]:
    """Receipt dict if mined, else None."""
    res = rpc.call("tx.getTransactionReceipt", [tx_hash])
    if res is None:
        return None
    if not isinstance(res, dict):
        raise TxError(f"unexpected receipt payload: {type(res)!r}", tx_hash=tx_hash)
    return res


# -----------------------------------------------------------------------------
# Polling waiter
# -----------------------------------------------------------------------------


def wait_for_receipt(
    rpc: _RpcClient,
    tx_hash: str,
    *,
    timeout_s: float = 60.0,
    poll_interval_s: float = 0.25,
    max_interval_s: float = 2.5,
    backoff: float = 1.25,
) -> Dict[str, Any]:
    """
    Poll for a receipt until it arrives or `timeout_s` elapses.

    Raises ConfirmationTimeout on timeout; RpcError / NetworkFailure propagate.
    """
    deadline = time.monotonic() + float(timeout_s)
    interval = float(poll_interval_s)

    while True:
        rec = get_transaction_receipt(rpc, tx_hash)
        if rec is not None:
            return rec

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise ConfirmationTimeout(tx_hash=tx_hash, timeout_s=float(timeout_s))

        log.debug("receipt for %s not yet available; sleeping %.2fs", tx_hash, interval)
        time.sleep(min(interval, remaining))
        interval = min(interval * float(backoff), float(max_interval_s))


def send_and_wait(
    rpc: _RpcClient,
    stx: SignedTx,
    *,
    timeout_s: float = 60.0,
    poll_interval_s: float = 0.25,
) -> Dict[str, Any]:
    """Submit a signed tx and block until its receipt is available."""
    tx_hash = send_signed(rpc, stx)
    log.info("submitted %s tx %s (nonce %d)", stx.tx.kind.name, tx_hash, stx.tx.nonce)
    return wait_for_receipt(rpc, tx_hash, timeout_s=timeout_s, poll_interval_s=poll_interval_s)


__all__ = [
    "get_nonce",
    "build_and_sign",
    "submit_raw",
    "send_signed",
    "get_transaction_receipt",
    "wait_for_receipt",
    "send_and_wait",
]
