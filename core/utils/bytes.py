"""
core.utils.bytes
================

Helpers around byte handling shared by the contracts, ledger and SDK:

- Hex helpers: to_hex/from_hex, 0x-prefix management
- Length guards: ensure_len
- Integer conversions: int_to_be / be_to_int
- 20-byte address parsing/formatting (0x-hex, lowercase)

Examples
--------
>>> to_hex(b"\\x01\\x02")
'0x0102'
>>> from_hex('0xdeadbeef')
b'\\xde\\xad\\xbe\\xef'
>>> int_to_be(258, length=3)
b'\\x00\\x01\\x02'
"""

from __future__ import annotations

import re
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]

ADDRESS_LEN = 20
ZERO_ADDRESS = b"\x00" * ADDRESS_LEN

_HEX_RE = re.compile(r"^(0x|0X)?[0-9a-fA-F]*$")


def strip0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def is_hex(s: object) -> bool:
    """True for an even-length hex string (0x prefix optional)."""
    if not isinstance(s, str):
        return False
    return bool(_HEX_RE.match(s)) and len(strip0x(s)) % 2 == 0


def to_hex(data: BytesLike, *, prefix: bool = True) -> str:
    """Return lowercase hex string of data."""
    if isinstance(data, (bytearray, memoryview)):
        data = bytes(data)
    if not isinstance(data, bytes):
        raise TypeError("to_hex expects bytes-like")
    h = data.hex()
    return f"0x{h}" if prefix else h


def from_hex(h: str) -> bytes:
    """Parse a hex string with or without 0x prefix. Odd length is rejected."""
    if not isinstance(h, str):
        raise TypeError("from_hex expects str")
    body = strip0x(h.strip())
    if len(body) % 2 == 1:
        raise ValueError("invalid hex string: odd length")
    try:
        return bytes.fromhex(body)
    except ValueError as e:
        raise ValueError(f"invalid hex string: {e}") from e


def b(x: Union[BytesLike, str]) -> bytes:
    """Normalize bytes-like or 0x-hex input to bytes."""
    if isinstance(x, bytes):
        return x
    if isinstance(x, (bytearray, memoryview)):
        return bytes(x)
    if isinstance(x, str):
        return from_hex(x)
    raise TypeError(f"unsupported type for b(): {type(x)!r}")


def ensure_len(data: Union[BytesLike, str], n: int, *, name: str = "bytes") -> bytes:
    data_b = b(data)
    if len(data_b) != n:
        raise ValueError(f"{name} must be length {n}, got {len(data_b)}")
    return data_b


def int_to_be(x: int, *, length: int) -> bytes:
    if x < 0:
        raise ValueError("int_to_be: negative not supported")
    return x.to_bytes(length, "big")


def be_to_int(data: BytesLike) -> int:
    return int.from_bytes(bytes(data), "big")


# ---------------------
# Addresses
# ---------------------

def parse_address(value: Union[BytesLike, str], *, name: str = "address") -> bytes:
    """Accept 20 raw bytes or a 0x-hex string; return 20 raw bytes."""
    return ensure_len(value, ADDRESS_LEN, name=name)


def format_address(addr: BytesLike) -> str:
    return to_hex(ensure_len(addr, ADDRESS_LEN, name="address"))


__all__ = [
    "BytesLike",
    "ADDRESS_LEN",
    "ZERO_ADDRESS",
    "strip0x",
    "is_hex",
    "to_hex",
    "from_hex",
    "b",
    "ensure_len",
    "int_to_be",
    "be_to_int",
    "parse_address",
    "format_address",
]
