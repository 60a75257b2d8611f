"""
core.encoding.abi
=================

Ethereum-ABI helpers on top of `eth-abi`.

Contracts in this tree describe their interface with a JSON ABI (a list of
`{"type": "function" | "event" | "error" | "constructor", ...}` entries, the
same shape Solidity emits). This module turns those entries into:

- 4-byte selectors          function_selector("submitBalance(bytes,bytes)")
- event topics              event_topic("BalanceVerified(string,string,uint256,uint256)")
- call data                 encode_call(entry, args) / decode_call(entry, data)
- return data               encode_outputs(entry, values) / decode_outputs(entry, data)
- custom-error payloads     encode_error(signature) / decode_error_result(data, abi)

Decoding is *strict*: a payload is accepted only if re-encoding the decoded
values reproduces it byte-for-byte, so trailing bytes and non-canonical
offsets are rejected rather than silently ignored.

Standard Solidity errors `Error(string)` and `Panic(uint256)` are always
recognised by `decode_error_result`, in addition to the ABI's own errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from eth_abi import decode as _abi_decode
from eth_abi import encode as _abi_encode
from eth_abi.exceptions import DecodingError, EncodingError

from core.utils.hash import keccak256

AbiEntry = Mapping[str, Any]
Abi = Sequence[AbiEntry]


class AbiCodecError(ValueError):
    """Raised when values cannot be ABI-encoded or a payload cannot be decoded."""


# ---------------------------------------------------------------------------
# Signatures, selectors, topics
# ---------------------------------------------------------------------------


def _canonical_type(param: Mapping[str, Any]) -> str:
    t = str(param["type"])
    if t.startswith("tuple"):
        inner = ",".join(_canonical_type(c) for c in param.get("components", []))
        return f"({inner}){t[len('tuple'):]}"
    return t


def input_types(entry: AbiEntry) -> List[str]:
    return [_canonical_type(p) for p in entry.get("inputs", [])]


def output_types(entry: AbiEntry) -> List[str]:
    return [_canonical_type(p) for p in entry.get("outputs", [])]


def signature(entry: AbiEntry) -> str:
    """Canonical signature, e.g. ``submitBalance(bytes,bytes)``."""
    return f"{entry['name']}({','.join(input_types(entry))})"


def function_selector(sig: str) -> bytes:
    return keccak256(sig.encode("ascii"))[:4]


def event_topic(sig: str) -> bytes:
    return keccak256(sig.encode("ascii"))


def find(abi: Abi, name: str, kind: str = "function") -> AbiEntry:
    for entry in abi:
        if entry.get("type") == kind and entry.get("name") == name:
            return entry
    raise AbiCodecError(f"{kind} {name!r} not found in ABI")


def constructor(abi: Abi) -> Optional[AbiEntry]:
    for entry in abi:
        if entry.get("type") == "constructor":
            return entry
    return None


# ---------------------------------------------------------------------------
# Value encoding
# ---------------------------------------------------------------------------


def encode_values(types: Sequence[str], values: Sequence[Any]) -> bytes:
    if len(types) != len(values):
        raise AbiCodecError(f"expected {len(types)} values, got {len(values)}")
    if not types:
        return b""
    try:
        return _abi_encode(list(types), list(values))
    except (EncodingError, TypeError, ValueError, OverflowError) as e:
        raise AbiCodecError(f"cannot encode {list(types)}: {e}") from e


def decode_values(types: Sequence[str], data: bytes) -> Tuple[Any, ...]:
    """Decode `data` as the tuple `types`; reject non-canonical payloads."""
    data = bytes(data)
    if not types:
        if data:
            raise AbiCodecError(f"expected empty payload, got {len(data)} bytes")
        return ()
    try:
        values = _abi_decode(list(types), data)
    except (DecodingError, ValueError, OverflowError, TypeError) as e:
        raise AbiCodecError(f"cannot decode {list(types)}: {e}") from e
    try:
        canonical = _abi_encode(list(types), list(values))
    except (EncodingError, TypeError, ValueError) as e:
        raise AbiCodecError(f"non-canonical {list(types)} payload: {e}") from e
    if canonical != data:
        raise AbiCodecError(
            f"non-canonical {list(types)} payload "
            f"({len(data)} bytes, canonical form is {len(canonical)})"
        )
    return tuple(values)


# ---------------------------------------------------------------------------
# Calls
# ---------------------------------------------------------------------------


def encode_call(entry: AbiEntry, args: Sequence[Any]) -> bytes:
    return function_selector(signature(entry)) + encode_values(input_types(entry), args)


def decode_call(entry: AbiEntry, data: bytes) -> Tuple[Any, ...]:
    data = bytes(data)
    sel = function_selector(signature(entry))
    if data[:4] != sel:
        raise AbiCodecError(
            f"selector mismatch for {signature(entry)}: 0x{data[:4].hex()} != 0x{sel.hex()}"
        )
    return decode_values(input_types(entry), data[4:])


def encode_outputs(entry: AbiEntry, values: Sequence[Any]) -> bytes:
    return encode_values(output_types(entry), values)


def decode_outputs(entry: AbiEntry, data: bytes) -> Tuple[Any, ...]:
    return decode_values(output_types(entry), data)


def encode_constructor(abi: Abi, args: Sequence[Any]) -> bytes:
    """ABI-encoded constructor arguments (empty when the ABI has no constructor)."""
    ctor = constructor(abi)
    return encode_values(input_types(ctor) if ctor else [], args)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


def encode_event(entry: AbiEntry, values: Sequence[Any]) -> Tuple[List[bytes], bytes]:
    """
    Return (topics, data) for an event: topic0 is the signature hash, indexed
    static params follow as 32-byte topics, the rest is ABI-encoded as data.
    """
    topics = [event_topic(signature(entry))]
    data_types: List[str] = []
    data_values: List[Any] = []
    for param, value in zip(entry.get("inputs", []), values):
        if param.get("indexed"):
            topics.append(encode_values([_canonical_type(param)], [value]))
        else:
            data_types.append(_canonical_type(param))
            data_values.append(value)
    return topics, encode_values(data_types, data_values)


def decode_event_data(entry: AbiEntry, data: bytes) -> Dict[str, Any]:
    params = [p for p in entry.get("inputs", []) if not p.get("indexed")]
    values = decode_values([_canonical_type(p) for p in params], data)
    return {p["name"]: v for p, v in zip(params, values)}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

STANDARD_ERRORS: Tuple[AbiEntry, ...] = (
    {"type": "error", "name": "Error", "inputs": [{"name": "message", "type": "string"}]},
    {"type": "error", "name": "Panic", "inputs": [{"name": "code", "type": "uint256"}]},
)


@dataclass(frozen=True)
class DecodedError:
    name: str
    signature: str
    selector: bytes
    args: Tuple[Any, ...] = ()

    def describe(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}({', '.join(repr(a) for a in self.args)})"


def encode_error(sig: str, types: Sequence[str] = (), args: Sequence[Any] = ()) -> bytes:
    """Revert payload for a custom error: selector || abi.encode(args)."""
    return function_selector(sig) + (encode_values(types, args) if types else b"")


def error_table(abi: Iterable[AbiEntry]) -> Dict[bytes, AbiEntry]:
    table: Dict[bytes, AbiEntry] = {}
    for entry in list(abi) + list(STANDARD_ERRORS):
        if entry.get("type") == "error":
            table.setdefault(function_selector(signature(entry)), entry)
    return table


def decode_error_result(data: bytes, abi: Iterable[AbiEntry]) -> DecodedError:
    """
    Match a revert payload against the ABI's errors (plus Error/Panic).
    Raises AbiCodecError if the selector is unknown or the arguments malformed.
    """
    data = bytes(data)
    if len(data) < 4:
        raise AbiCodecError(f"revert payload too short ({len(data)} bytes)")
    entry = error_table(abi).get(data[:4])
    if entry is None:
        raise AbiCodecError(f"unknown error selector 0x{data[:4].hex()}")
    args = decode_values(input_types(entry), data[4:])
    return DecodedError(
        name=str(entry["name"]),
        signature=signature(entry),
        selector=data[:4],
        args=args,
    )


__all__ = [
    "Abi",
    "AbiEntry",
    "AbiCodecError",
    "DecodedError",
    "STANDARD_ERRORS",
    "input_types",
    "output_types",
    "signature",
    "function_selector",
    "event_topic",
    "find",
    "constructor",
    "encode_values",
    "decode_values",
    "encode_call",
    "decode_call",
    "encode_outputs",
    "decode_outputs",
    "encode_constructor",
    "encode_event",
    "decode_event_data",
    "encode_error",
    "error_table",
    "decode_error_result",
]
