"""
Journal
=======

The public output of the web-proof guest program: what was fetched, from
where, when, under which extraction query, and the extracted value.

Wire layout (Ethereum ABI, tuple of six):

    (bytes32 notaryKeyFingerprint,
     string  method,
     string  url,
     uint256 timestamp,
     bytes32 queriesHash,
     string  balance)

The seal binds the *raw encoded bytes*, never a re-encoding of the decoded
value, so callers keep the bytes they received alongside the decoded Journal.
Decoding is strict: anything that is not the canonical encoding of the tuple
(truncated, trailing bytes, bad offsets, invalid UTF-8) fails.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from typing import Any, Dict

from core.encoding.abi import AbiCodecError, decode_values, encode_values
from core.utils.bytes import to_hex

JOURNAL_TYPES = ("bytes32", "string", "string", "uint256", "bytes32", "string")


class JournalDecodeError(ValueError):
    """Journal bytes are not a canonical encoding of the six-field tuple."""


@dataclass(frozen=True)
class Journal:
    notary_key_fingerprint: bytes
    method: str
    url: str
    timestamp: int
    queries_hash: bytes
    balance: str

    def __post_init__(self) -> None:
        for name in ("notary_key_fingerprint", "queries_hash"):
            v = getattr(self, name)
            if not isinstance(v, (bytes, bytearray)) or len(v) != 32:
                raise ValueError(f"Journal.{name} must be 32 bytes")
        if not (0 <= int(self.timestamp) < 2**256):
            raise ValueError("Journal.timestamp must fit in uint256")

    def timestamp_iso(self) -> str:
        """Timestamp as ISO-8601 UTC, or the raw integer when out of datetime range."""
        try:
            return _dt.datetime.fromtimestamp(int(self.timestamp), _dt.timezone.utc).isoformat()
        except (OverflowError, OSError, ValueError):
            return str(self.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "notaryKeyFingerprint": to_hex(self.notary_key_fingerprint),
            "method": self.method,
            "url": self.url,
            "timestamp": int(self.timestamp),
            "queriesHash": to_hex(self.queries_hash),
            "balance": self.balance,
        }


def encode_journal(journal: Journal) -> bytes:
    return encode_values(
        JOURNAL_TYPES,
        [
            bytes(journal.notary_key_fingerprint),
            journal.method,
            journal.url,
            int(journal.timestamp),
            bytes(journal.queries_hash),
            journal.balance,
        ],
    )


def decode_journal(data: bytes) -> Journal:
    try:
        fp, method, url, ts, qh, balance = decode_values(JOURNAL_TYPES, bytes(data))
    except AbiCodecError as e:
        raise JournalDecodeError(str(e)) from e
    return Journal(
        notary_key_fingerprint=bytes(fp),
        method=method,
        url=url,
        timestamp=int(ts),
        queries_hash=bytes(qh),
        balance=balance,
    )


__all__ = ["JOURNAL_TYPES", "Journal", "JournalDecodeError", "encode_journal", "decode_journal"]
