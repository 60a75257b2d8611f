from __future__ import annotations

import pytest

from contracts.balance_verifier import BALANCE_VERIFIER_ABI, VALIDATOR_ERRORS
from core.encoding import abi
from proofgate_sdk.contracts.revert import decode_revert, get_revert_data
from proofgate_sdk.errors import JsonRpcCode, ProofgateSdkError, RpcError, UnrecognizedRevert, ValidationRejected
from proofgate_sdk.submit import classify_revert


def _reverted(data: str) -> RpcError:
    return RpcError(method="state.call", code=JsonRpcCode.EXECUTION_REVERTED, message="execution reverted", data=data)


def _selector(name: str) -> str:
    return "0x" + abi.function_selector(f"{name}()").hex()


def test_revert_data_from_error():
    assert get_revert_data(_reverted("0xDEADBEEF")) == "0xdeadbeef"


def test_revert_data_from_cause():
    try:
        try:
            raise _reverted("0x01020304")
        except RpcError as inner:
            raise ProofgateSdkError("wrapped") from inner
    except ProofgateSdkError as outer:
        assert get_revert_data(outer) == "0x01020304"


def test_non_revert_errors_have_no_revert_data():
    nonce_err = RpcError(method="tx.sendRawTransaction", code=JsonRpcCode.NONCE_TOO_LOW, message="nonce", data={"hash": "0x"})
    assert get_revert_data(nonce_err) is None
    assert get_revert_data(ValueError("boom")) is None


@pytest.mark.parametrize("name", VALIDATOR_ERRORS)
def test_validator_errors_decode_by_name(name):
    info = decode_revert(_selector(name), BALANCE_VERIFIER_ABI)
    assert info.kind == name
    assert info.describe() == name


def test_standard_error_string_decodes():
    data = "0x" + abi.encode_error("Error(string)", ["string"], ["nope"]).hex()
    info = decode_revert(data, BALANCE_VERIFIER_ABI)
    assert info.kind == "Error"
    assert "nope" in info.describe()


def test_empty_and_unknown_payloads():
    assert decode_revert("0x", BALANCE_VERIFIER_ABI).kind is None
    assert "without data" in decode_revert("0x", BALANCE_VERIFIER_ABI).describe()
    unknown = decode_revert("0x12345678", BALANCE_VERIFIER_ABI)
    assert unknown.kind is None
    assert "0x12345678" in unknown.describe()


def test_classify_revert_by_stage():
    err = classify_revert(_selector("InvalidBalance"), "submit", tx_hash="0xaa")
    assert isinstance(err, ValidationRejected)
    assert (err.kind, err.stage, err.tx_hash) == ("InvalidBalance", "submit", "0xaa")

    other = classify_revert("0x", "simulate")
    assert isinstance(other, UnrecognizedRevert)
    assert (other.revert_data, other.stage) == ("0x", "simulate")

    panic = classify_revert("0x" + abi.encode_error("Panic(uint256)", ["uint256"], [0x11]).hex(), "simulate")
    assert isinstance(panic, UnrecognizedRevert)
    assert panic.message.startswith("Panic")
