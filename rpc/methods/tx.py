from __future__ import annotations

import logging
import typing as t

from rpc import deps
from rpc.methods import method
from rpc.types import parse_hash, parse_hex

log = logging.getLogger(__name__)


@method("tx.sendRawTransaction")
def send_raw_transaction(raw: str) -> str:
    """
    Admit a CBOR-encoded SignedTx (0x-hex) and return its hash.

    Rejections (bad signature, chain id, nonce, unknown code, malformed
    envelope) surface as JSON-RPC errors in the -32010..-32019 range; the
    transaction is never included.
    """
    tx_hash = deps.get_ctx().ledger.send_raw(parse_hex(raw, name="raw"))
    return "0x" + tx_hash.hex()


@method("tx.getTransactionReceipt")
def get_transaction_receipt(tx_hash: str) -> dict[str, t.Any] | None:
    """Receipt of a mined transaction, or null while it is pending/unknown."""
    return deps.get_ctx().ledger.receipt(parse_hash(tx_hash, name="tx_hash"))


__all__ = ["send_raw_transaction", "get_transaction_receipt"]
