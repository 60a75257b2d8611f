"""
core.utils.hash
===============

Thin wrappers for the digests used across proofgate (all return `bytes`):

- sha256(data)     journal digests, mock-verifier claim digests
- sha3_256(data)   transaction ids, block hashes
- keccak256(data)  ABI selectors, event topics, addresses (via pycryptodome)
"""

from __future__ import annotations

import hashlib

from Crypto.Hash import keccak as _keccak

from .bytes import BytesLike
from .bytes import b as _b

ZERO32 = b"\x00" * 32


def sha256(data: BytesLike) -> bytes:
    return hashlib.sha256(_b(data)).digest()


def sha3_256(data: BytesLike) -> bytes:
    """SHA3-256 digest (FIPS-202)."""
    return hashlib.sha3_256(_b(data)).digest()


def keccak256(data: BytesLike) -> bytes:
    """Keccak-256 (pre-standard SHA-3 padding, as used by Ethereum ABIs)."""
    h = _keccak.new(digest_bits=256)
    h.update(_b(data))
    return h.digest()


__all__ = ["ZERO32", "sha256", "sha3_256", "keccak256"]
