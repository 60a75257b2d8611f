"""
ABI helper tests: selectors, strict decoding, custom-error decoding.
"""
from __future__ import annotations

import pytest

from core.encoding import abi
from core.utils.hash import keccak256

ERRORS = [
    {"type": "error", "name": "InvalidUrl", "inputs": []},
    {"type": "error", "name": "Bounded", "inputs": [{"name": "limit", "type": "uint256"}]},
]


def test_known_selectors():
    # well-known Ethereum selectors
    assert abi.function_selector("transfer(address,uint256)").hex() == "a9059cbb"
    assert abi.function_selector("Error(string)").hex() == "08c379a0"
    assert abi.function_selector("Panic(uint256)").hex() == "4e487b71"


def test_keccak_empty_vector():
    assert keccak256(b"").hex() == (
        "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
    )


def test_signature_from_entry():
    entry = {
        "type": "function",
        "name": "submitBalance",
        "inputs": [{"name": "journalData", "type": "bytes"}, {"name": "seal", "type": "bytes"}],
    }
    assert abi.signature(entry) == "submitBalance(bytes,bytes)"


def test_decode_values_rejects_trailing_bytes():
    raw = abi.encode_values(["string"], ["hi"])
    assert abi.decode_values(["string"], raw) == ("hi",)
    with pytest.raises(abi.AbiCodecError):
        abi.decode_values(["string"], raw + b"\x00")


def test_decode_custom_error_without_args():
    payload = abi.encode_error("InvalidUrl()")
    decoded = abi.decode_error_result(payload, ERRORS)
    assert decoded.name == "InvalidUrl"
    assert decoded.args == ()
    assert decoded.describe() == "InvalidUrl"


def test_decode_custom_error_with_args():
    payload = abi.encode_error("Bounded(uint256)", ["uint256"], [7])
    decoded = abi.decode_error_result(payload, ERRORS)
    assert decoded.args == (7,)


def test_standard_errors_always_recognised():
    payload = abi.encode_error("Error(string)", ["string"], ["nope"])
    assert abi.decode_error_result(payload, []).args == ("nope",)
    payload = abi.encode_error("Panic(uint256)", ["uint256"], [0x11])
    assert abi.decode_error_result(payload, []).name == "Panic"


@pytest.mark.parametrize("payload", [b"", b"\x01\x02", b"\xaa\xbb\xcc\xdd"])
def test_unknown_or_short_payloads_fail(payload):
    with pytest.raises(abi.AbiCodecError):
        abi.decode_error_result(payload, ERRORS)


def test_event_encoding_topic0():
    entry = {
        "type": "event",
        "name": "Ping",
        "inputs": [
            {"name": "who", "type": "address", "indexed": True},
            {"name": "note", "type": "string", "indexed": False},
        ],
    }
    who = "0x" + "ab" * 20
    topics, data = abi.encode_event(entry, [who, "hello"])
    assert topics[0] == keccak256(b"Ping(address,string)")
    assert topics[1][-20:] == bytes.fromhex("ab" * 20)
    assert abi.decode_event_data(entry, data) == {"note": "hello"}
