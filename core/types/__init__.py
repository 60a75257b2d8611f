"""
Proofgate core.types
====================

Canonical dataclasses for the objects that cross component boundaries:

- journal: Journal (the six-field web-proof journal) and its ABI codec
- tx:      Tx / SignedTx (deploy/call), sign-bytes, tx hashes, addresses
"""

from __future__ import annotations

from .journal import Journal, JournalDecodeError, decode_journal, encode_journal
from .tx import SignedTx, Tx, TxKind, address_from_public_key

__all__ = [
    "Journal",
    "JournalDecodeError",
    "decode_journal",
    "encode_journal",
    "Tx",
    "TxKind",
    "SignedTx",
    "address_from_public_key",
]
