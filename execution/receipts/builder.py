"""
execution.receipts.builder - build a JSON receipt from an ApplyResult.

    build_receipt(stx, result, block_number=..., block_hash=..., index=...) -> dict

Receipt fields mirror the Ethereum JSON-RPC shape with a string status:

    transactionHash, blockNumber, blockHash, transactionIndex, from, to,
    contractAddress, status ("success" | "revert"), gasUsed, logs, revertData
"""

from __future__ import annotations

from typing import Any, Dict

from core.types.tx import SignedTx
from core.utils.bytes import to_hex
from execution.types.result import ApplyResult


def build_receipt(
    stx: SignedTx,
    result: ApplyResult,
    *,
    block_number: int,
    block_hash: bytes,
    index: int,
) -> Dict[str, Any]:
    logs = []
    for i, lg in enumerate(result.logs):
        d = lg.to_dict()
        d.update(
            {
                "logIndex": i,
                "transactionHash": to_hex(stx.hash),
                "blockNumber": block_number,
            }
        )
        logs.append(d)
    return {
        "transactionHash": to_hex(stx.hash),
        "blockNumber": int(block_number),
        "blockHash": to_hex(block_hash),
        "transactionIndex": int(index),
        "from": to_hex(stx.tx.sender),
        "to": to_hex(stx.tx.to) if stx.tx.to else None,
        "contractAddress": to_hex(result.contract_address) if result.contract_address else None,
        "status": str(result.status),
        "gasUsed": int(result.gas_used),
        "logs": logs,
        "revertData": None if result.is_success else to_hex(result.revert_data),
    }


__all__ = ["build_receipt"]
