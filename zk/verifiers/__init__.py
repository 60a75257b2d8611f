# zk/verifiers/__init__.py
"""
Proofgate ZK Verifiers - receipt verification facade

The validator contract treats cryptographic verification as an opaque
primitive with a single entry point:

    verifier.verify(seal, image_id, journal_digest) -> None   # raises on rejection

where
- `seal`            opaque bytes produced by the zkVM prover,
- `image_id`        32-byte commitment to the guest program,
- `journal_digest`  sha256 of the raw journal bytes.

Adapters
--------
- `zk.verifiers.risc0.MockReceiptVerifier` - RISC Zero mock-verifier
  semantics for development: accepts exactly `selector || claim_digest`.

Any object with a compatible `verify` method satisfies `ReceiptVerifier`, so
production backends can be plugged in without touching the contracts.

Usage
-----
>>> from zk.verifiers import MockReceiptVerifier, journal_digest, mock_seal
>>> v = MockReceiptVerifier()
>>> d = journal_digest(b"...journal bytes...")
>>> v.verify(mock_seal(b"\\x01" * 32, d), b"\\x01" * 32, d)
"""

from __future__ import annotations

from .risc0 import (
    DEFAULT_MOCK_SELECTOR,
    MockReceiptVerifier,
    ReceiptVerifier,
    VerificationError,
    claim_digest,
    journal_digest,
    mock_seal,
)

__all__ = [
    "DEFAULT_MOCK_SELECTOR",
    "MockReceiptVerifier",
    "ReceiptVerifier",
    "VerificationError",
    "claim_digest",
    "journal_digest",
    "mock_seal",
]
