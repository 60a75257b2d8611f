"""
Canonical CBOR codec
--------------------

Deterministic CBOR (RFC 8949 §4.2) backed by cbor2 in canonical mode. Used for
transaction envelopes and their domain-separated sign-bytes, so the same
logical object always hashes to the same id.

Only the subset of types we put on the wire is accepted: None, bool, int,
bytes, str, list/tuple and dicts with str keys. Floats are rejected.
"""

from __future__ import annotations

from typing import Any

import cbor2


class CBORError(ValueError):
    pass


def _check(obj: Any, path: str = "$") -> None:
    if obj is None or isinstance(obj, (bool, int, bytes, str)):
        return
    if isinstance(obj, float):
        raise CBORError(f"{path}: floats are not allowed in canonical encodings")
    if isinstance(obj, (list, tuple)):
        for i, v in enumerate(obj):
            _check(v, f"{path}[{i}]")
        return
    if isinstance(obj, dict):
        for k, v in obj.items():
            if not isinstance(k, str):
                raise CBORError(f"{path}: map keys must be str, got {type(k).__name__}")
            _check(v, f"{path}.{k}")
        return
    raise CBORError(f"{path}: unsupported type {type(obj).__name__}")


def dumps(obj: Any) -> bytes:
    """Encode `obj` as canonical CBOR."""
    _check(obj)
    return cbor2.dumps(obj, canonical=True)


def loads(data: bytes) -> Any:
    """Decode CBOR bytes. Raises CBORError on malformed input."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("cbor loads expects bytes-like")
    try:
        return cbor2.loads(bytes(data))
    except (cbor2.CBORDecodeError, ValueError, EOFError) as e:
        raise CBORError(f"malformed CBOR: {e}") from e


__all__ = ["CBORError", "dumps", "loads"]
