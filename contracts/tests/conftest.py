"""
contracts.tests.conftest
========================

Deployment fixtures for contract tests.

- mock_verifier      : address of a RiscZeroMockVerifier (selector 0xFFFFFFFF)
- accept_all_verifier: address of a verifier that accepts every seal
- exploding_verifier : address of a verifier whose backend raises a plain RuntimeError
- deploy_validator   : deploy a BalanceVerifier against a verifier address
- validator          : BalanceVerifier wired to the mock verifier
- submit / read_balance helpers bound to the ledger

Usage:
    def test_flow(validator, make_journal, mock_seal_for, submit, read_balance):
        _, raw = make_journal()
        r = submit(validator, raw, mock_seal_for(raw))
        assert r["status"] == "success"
        assert read_balance(validator) == "123.45"
"""
from __future__ import annotations

from typing import Any, Callable, Dict

import pytest

import contracts  # noqa: F401  (registers contract codes)
from contracts.balance_verifier import BALANCE_VERIFIER_ABI
from contracts.mock_verifier import MOCK_SELECTOR, VERIFIER_ABI
from core.encoding import abi
from execution.runtime.contracts import Contract, external, register_contract
from zk.verifiers.risc0 import journal_digest, mock_seal

SUBMIT = abi.find(BALANCE_VERIFIER_ABI, "submitBalance")
BALANCE = abi.find(BALANCE_VERIFIER_ABI, "balance")


@register_contract("test.AcceptAllVerifier")
class AcceptAllVerifier(Contract):
    ABI = [e for e in VERIFIER_ABI if e["type"] != "constructor"]

    @external("verify", view=True)
    def verify(self, seal: bytes, image_id: bytes, journal_digest: bytes) -> None:
        return None


@register_contract("test.ExplodingVerifier")
class ExplodingVerifier(Contract):
    ABI = [e for e in VERIFIER_ABI if e["type"] != "constructor"]

    @external("verify", view=True)
    def verify(self, seal: bytes, image_id: bytes, journal_digest: bytes) -> None:
        raise RuntimeError("backend crashed")


def _address(receipt: Dict[str, Any]) -> bytes:
    assert receipt["status"] == "success", receipt
    return bytes.fromhex(receipt["contractAddress"][2:])


@pytest.fixture
def mock_verifier(signer, send_tx) -> bytes:
    ctor = abi.encode_constructor(VERIFIER_ABI, [MOCK_SELECTOR])
    return _address(send_tx(signer, code="RiscZeroMockVerifier", data=ctor))


@pytest.fixture
def accept_all_verifier(signer, send_tx) -> bytes:
    return _address(send_tx(signer, code="test.AcceptAllVerifier"))


@pytest.fixture
def exploding_verifier(signer, send_tx) -> bytes:
    return _address(send_tx(signer, code="test.ExplodingVerifier"))


@pytest.fixture
def deploy_validator(signer, send_tx, deployment_params) -> Callable[..., bytes]:
    def _deploy(verifier: bytes, **overrides: Any) -> bytes:
        p = dict(deployment_params)
        p.update(overrides)
        ctor = abi.encode_constructor(
            BALANCE_VERIFIER_ABI,
            [
                verifier,
                p["image_id"],
                p["notary_key_fingerprint"],
                p["queries_hash"],
                p["expected_url"],
            ],
        )
        return _address(send_tx(signer, code="BalanceVerifier", data=ctor))

    return _deploy


@pytest.fixture
def validator(deploy_validator, mock_verifier) -> bytes:
    return deploy_validator(mock_verifier)


@pytest.fixture
def mock_seal_for(deployment_params) -> Callable[[bytes], bytes]:
    def _seal(journal_raw: bytes) -> bytes:
        return mock_seal(deployment_params["image_id"], journal_digest(journal_raw))

    return _seal


@pytest.fixture
def submit(signer, send_tx) -> Callable[[bytes, bytes, bytes], Dict[str, Any]]:
    def _submit(address: bytes, journal_raw: bytes, seal: bytes) -> Dict[str, Any]:
        return send_tx(signer, to=address, data=abi.encode_call(SUBMIT, [journal_raw, seal]))

    return _submit


@pytest.fixture
def read_balance(ledger) -> Callable[[bytes], str]:
    def _read(address: bytes) -> str:
        res = ledger.call(address, abi.encode_call(BALANCE, []))
        assert res.is_success
        return abi.decode_outputs(BALANCE, res.return_data)[0]

    return _read
