# zk/verifiers/risc0.py
"""
RISC Zero receipt verification (mock backend).

A real RISC Zero verifier checks a succinct STARK/Groth16 seal against the
receipt claim `(image_id, journal_digest)`. The mock verifier used on dev
networks keeps the same interface but accepts a seal of the form

    seal = selector (4 bytes) || claim_digest (32 bytes)
    claim_digest = sha256(b"risc0.ReceiptClaim" || image_id || journal_digest)

so tests and local deployments can fabricate valid seals with `mock_seal`
without running a prover. The selector defaults to 0xFFFFFFFF, the value
used by mock deployments.
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from core.utils.hash import sha256

DEFAULT_MOCK_SELECTOR = b"\xff\xff\xff\xff"
_CLAIM_TAG = b"risc0.ReceiptClaim"


class VerificationError(RuntimeError):
    """Seal does not attest to (image_id, journal_digest)."""


@runtime_checkable
class ReceiptVerifier(Protocol):
    def verify(self, seal: bytes, image_id: bytes, journal_digest: bytes) -> None: ...


def journal_digest(journal_bytes: bytes) -> bytes:
    """Digest the seal is bound to: sha256 over the *raw* journal bytes."""
    return sha256(bytes(journal_bytes))


def claim_digest(image_id: bytes, journal_digest: bytes) -> bytes:
    if len(image_id) != 32 or len(journal_digest) != 32:
        raise ValueError("image_id and journal_digest must be 32 bytes")
    return sha256(_CLAIM_TAG + bytes(image_id) + bytes(journal_digest))


def mock_seal(
    image_id: bytes, journal_digest: bytes, selector: bytes = DEFAULT_MOCK_SELECTOR
) -> bytes:
    return bytes(selector) + claim_digest(image_id, journal_digest)


@dataclass(frozen=True)
class MockReceiptVerifier:
    selector: bytes = DEFAULT_MOCK_SELECTOR

    def __post_init__(self) -> None:
        if len(self.selector) != 4:
            raise ValueError("mock verifier selector must be 4 bytes")

    def verify(self, seal: bytes, image_id: bytes, journal_digest: bytes) -> None:
        seal = bytes(seal)
        if len(seal) != 36:
            raise VerificationError(f"mock seal must be 36 bytes, got {len(seal)}")
        if seal[:4] != self.selector:
            raise VerificationError(
                f"selector mismatch: 0x{seal[:4].hex()} != 0x{self.selector.hex()}"
            )
        expected = claim_digest(image_id, journal_digest)
        if not hmac.compare_digest(seal[4:], expected):
            raise VerificationError("claim digest mismatch")


__all__ = [
    "DEFAULT_MOCK_SELECTOR",
    "VerificationError",
    "ReceiptVerifier",
    "MockReceiptVerifier",
    "journal_digest",
    "claim_digest",
    "mock_seal",
]
