# contracts/mock_verifier/abi.py
#
# ABI of the on-ledger receipt verifier (RISC Zero IRiscZeroVerifier shape).

from __future__ import annotations

from typing import Any, Dict, List

VERIFIER_ABI: List[Dict[str, Any]] = [
    {
        "type": "constructor",
        "inputs": [{"name": "selector", "type": "bytes4"}],
    },
    {
        "type": "function",
        "name": "verify",
        "stateMutability": "view",
        "inputs": [
            {"name": "seal", "type": "bytes"},
            {"name": "imageId", "type": "bytes32"},
            {"name": "journalDigest", "type": "bytes32"},
        ],
        "outputs": [],
    },
    {"type": "error", "name": "VerificationFailed", "inputs": []},
]

__all__ = ["VERIFIER_ABI"]
