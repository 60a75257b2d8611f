"""
Revert payload extraction & decoding.

A failed `state.call` comes back as a JSON-RPC error with code 3 and the
0x-hex revert payload in `data`; a reverted transaction carries the same
payload in its receipt's `revertData`. Wrappers may hide the RPC error one
level down, so `get_revert_data` also looks at the exception's cause.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from core.encoding import abi
from core.utils.bytes import from_hex, is_hex

from ..errors import JsonRpcCode, RpcError


@dataclass(frozen=True)
class RevertInfo:
    data: str
    decoded: Optional[abi.DecodedError] = None

    @property
    def kind(self) -> Optional[str]:
        return self.decoded.name if self.decoded else None

    def describe(self) -> str:
        if self.decoded is not None:
            return self.decoded.describe()
        if self.data in ("0x", ""):
            return "revert without data (malformed input?)"
        return f"unknown revert payload {self.data}"


def _data_of(err: Any) -> Optional[str]:
    if isinstance(err, RpcError) and err.code == JsonRpcCode.EXECUTION_REVERTED:
        d = err.data
        return d if is_hex(d) else None
    d = getattr(err, "data", None)
    if isinstance(d, str) and d.startswith("0x") and is_hex(d):
        return d
    return None


def get_revert_data(err: BaseException) -> Optional[str]:
    """0x-hex revert payload of `err` (or of its cause), or None if it is not a revert."""
    found = _data_of(err)
    if found is None and err.__cause__ is not None:
        found = _data_of(err.__cause__)
    return found.lower() if found is not None else None


def decode_revert(data: str, contract_abi: Iterable[abi.AbiEntry]) -> RevertInfo:
    """Match `data` against the ABI errors (plus Error/Panic); unknown payloads decode to None."""
    try:
        decoded = abi.decode_error_result(from_hex(data), contract_abi)
    except (abi.AbiCodecError, ValueError):
        decoded = None
    return RevertInfo(data=data, decoded=decoded)


__all__ = ["RevertInfo", "get_revert_data", "decode_revert"]
