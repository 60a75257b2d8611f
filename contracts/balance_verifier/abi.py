# contracts/balance_verifier/abi.py
#
# Ethereum-style JSON ABI of the BalanceVerifier contract. The SDK uses the
# same table to build call data and to decode revert payloads, so the
# on-ledger contract and its clients cannot drift apart.

from __future__ import annotations

from typing import Any, Dict, List, Tuple

BALANCE_VERIFIER_ABI: List[Dict[str, Any]] = [
    {
        "type": "constructor",
        "inputs": [
            {"name": "verifier", "type": "address"},
            {"name": "imageId", "type": "bytes32"},
            {"name": "notaryKeyFingerprint", "type": "bytes32"},
            {"name": "queriesHash", "type": "bytes32"},
            {"name": "expectedUrl", "type": "string"},
        ],
    },
    {
        "type": "function",
        "name": "submitBalance",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "journalData", "type": "bytes"},
            {"name": "seal", "type": "bytes"},
        ],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "balance",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "type": "event",
        "name": "BalanceVerified",
        "inputs": [
            {"name": "balance", "type": "string", "indexed": False},
            {"name": "url", "type": "string", "indexed": False},
            {"name": "timestamp", "type": "uint256", "indexed": False},
            {"name": "blockNumber", "type": "uint256", "indexed": False},
        ],
    },
    {"type": "error", "name": "InvalidNotaryKeyFingerprint", "inputs": []},
    {"type": "error", "name": "InvalidQueriesHash", "inputs": []},
    {"type": "error", "name": "InvalidUrl", "inputs": []},
    {"type": "error", "name": "InvalidBalance", "inputs": []},
    {"type": "error", "name": "ZKProofVerificationFailed", "inputs": []},
]

# Rejection kinds, in the order the validator checks them.
VALIDATOR_ERRORS: Tuple[str, ...] = (
    "InvalidNotaryKeyFingerprint",
    "InvalidUrl",
    "InvalidQueriesHash",
    "InvalidBalance",
    "ZKProofVerificationFailed",
)

__all__ = ["BALANCE_VERIFIER_ABI", "VALIDATOR_ERRORS"]
