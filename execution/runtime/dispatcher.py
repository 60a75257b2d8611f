"""
execution.runtime.dispatcher - route ABI call data to contract methods.

The first four bytes of call data select an `@external` method by its ABI
signature; the remainder is decoded with the function's input types and the
method's return value is ABI-encoded with its output types.

Malformed call data (unknown selector, undecodable arguments) is a bare
revert with empty revert data, like a Solidity contract without a fallback.
Methods declared `view=True` run in a read-only frame.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Tuple, Type

from core.encoding import abi

from ..errors import Revert
from .contracts import Contract

Route = Tuple[abi.AbiEntry, str, bool]

_TABLE_CACHE: Dict[Type[Contract], Dict[bytes, Route]] = {}


def dispatch_table(cls: Type[Contract]) -> Dict[bytes, Route]:
    """selector → (ABI entry, python attribute name, view flag)."""
    table = _TABLE_CACHE.get(cls)
    if table is not None:
        return table
    table = {}
    for attr in dir(cls):
        fn = getattr(cls, attr, None)
        name = getattr(fn, "__abi_name__", None)
        if name is None:
            continue
        entry = abi.find(cls.ABI, name, "function")
        table[abi.function_selector(abi.signature(entry))] = (
            entry,
            attr,
            bool(getattr(fn, "__abi_view__", False)),
        )
    _TABLE_CACHE[cls] = table
    return table


def _encode_return(entry: abi.AbiEntry, ret: Any) -> bytes:
    n = len(entry.get("outputs", []))
    if n == 0:
        return b""
    values = [ret] if n == 1 else list(ret)
    return abi.encode_outputs(entry, values)


def dispatch(contract: Contract, calldata: bytes) -> bytes:
    calldata = bytes(calldata)
    if len(calldata) < 4:
        raise Revert("call data shorter than a selector")
    route = dispatch_table(type(contract)).get(calldata[:4])
    if route is None:
        raise Revert(f"unknown selector 0x{calldata[:4].hex()}")
    entry, attr, view = route
    if view:
        contract.ctx.read_only = True
    try:
        args = abi.decode_values(abi.input_types(entry), calldata[4:])
    except abi.AbiCodecError as e:
        raise Revert(f"bad arguments for {abi.signature(entry)}: {e}") from e
    method: Callable[..., Any] = getattr(contract, attr)
    return _encode_return(entry, method(*args))


__all__ = ["dispatch", "dispatch_table"]
