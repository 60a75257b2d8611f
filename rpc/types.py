"""
Proofgate RPC param helpers.

- Lightweight "newtypes" for hex strings, 32-byte hashes and 20-byte addresses.
- Strict parsing of JSON-RPC params (0x-prefixed, even-length hex) that raises
  InvalidParams with the offending field name.
- Zero business logic: this module never reaches into the ledger.
"""

from __future__ import annotations

from typing import Any, NewType

from core.utils.bytes import ADDRESS_LEN

from .errors import InvalidParams

HexStr = NewType("HexStr", str)          # e.g., "0xdeadbeef"
HashHex32 = NewType("HashHex32", str)    # "0x" + 64 hex chars
AddressHex = NewType("AddressHex", str)  # "0x" + 40 hex chars

HEX_PREFIX = "0x"


def parse_hex(value: Any, *, name: str = "data") -> bytes:
    """Decode a 0x-prefixed, even-length hex param ("0x" is the empty string)."""
    if not isinstance(value, str) or not value.lower().startswith(HEX_PREFIX):
        raise InvalidParams(f"{name} must be a 0x-prefixed hex string")
    body = value[2:]
    if len(body) % 2:
        raise InvalidParams(f"{name} has odd hex length")
    try:
        return bytes.fromhex(body)
    except ValueError:
        raise InvalidParams(f"{name} is not valid hex") from None


def parse_fixed(value: Any, length: int, *, name: str) -> bytes:
    raw = parse_hex(value, name=name)
    if len(raw) != length:
        raise InvalidParams(f"{name} must be {length} bytes, got {len(raw)}")
    return raw


def parse_address(value: Any, *, name: str = "address") -> bytes:
    return parse_fixed(value, ADDRESS_LEN, name=name)


def parse_hash(value: Any, *, name: str = "hash") -> bytes:
    return parse_fixed(value, 32, name=name)


def parse_quantity(value: Any, *, name: str = "number") -> int:
    """Accept a non-negative int or a 0x-hex quantity string."""
    if isinstance(value, bool):
        raise InvalidParams(f"{name} must be an integer")
    if isinstance(value, int):
        n = value
    elif isinstance(value, str) and value.lower().startswith(HEX_PREFIX):
        try:
            n = int(value, 16)
        except ValueError:
            raise InvalidParams(f"{name} is not a hex quantity") from None
    else:
        raise InvalidParams(f"{name} must be an integer or hex quantity")
    if n < 0:
        raise InvalidParams(f"{name} must be non-negative")
    return n


__all__ = [
    "HexStr",
    "HashHex32",
    "AddressHex",
    "parse_hex",
    "parse_fixed",
    "parse_address",
    "parse_hash",
    "parse_quantity",
]
