"""
Shared pytest fixtures for the whole tree.

- signer / other_signer : deterministic Ed25519 signers
- ledger                : fresh automining dev ledger (chain 1337)
- send_tx               : sign + submit a DEPLOY/CALL, return its receipt
- deployment_params     : the validator's expected values used across tests
- make_journal          : build (journal, raw bytes) with overrides
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Tuple

import pytest

from core.types.journal import Journal, encode_journal
from core.types.tx import Tx, TxKind
from execution.ledger import Ledger
from proofgate_sdk.wallet.signer import Signer

logging.getLogger("execution").setLevel(logging.DEBUG)

EXPECTED_URL = "https://api.example.com/v1/balance"


@pytest.fixture
def signer() -> Signer:
    return Signer.from_seed(b"\x01" * 32)


@pytest.fixture
def other_signer() -> Signer:
    return Signer.from_seed(b"\x02" * 32)


@pytest.fixture
def ledger() -> Ledger:
    return Ledger(chain_id=1337)


@pytest.fixture
def send_tx(ledger: Ledger) -> Callable[..., Dict[str, Any]]:
    """
    send_tx(signer, to=..., data=...)            → CALL receipt
    send_tx(signer, code="Name", data=ctor_args) → DEPLOY receipt
    """

    def _send(
        who: Signer,
        *,
        to: Optional[bytes] = None,
        data: bytes = b"",
        code: Optional[str] = None,
        nonce: Optional[int] = None,
    ) -> Dict[str, Any]:
        tx = Tx(
            kind=TxKind.DEPLOY if code else TxKind.CALL,
            chain_id=ledger.chain_id,
            nonce=ledger.pending_nonce(who.address) if nonce is None else nonce,
            sender=who.address,
            to=to,
            data=data,
            code=code,
        )
        tx_hash = ledger.send_raw(who.sign_tx(tx).raw)
        receipt = ledger.receipt(tx_hash)
        assert receipt is not None, "automining ledger must include immediately"
        return receipt

    return _send


@pytest.fixture
def deployment_params() -> Dict[str, Any]:
    return {
        "image_id": bytes.fromhex("ab" * 32),
        "notary_key_fingerprint": bytes.fromhex("11" * 32),
        "queries_hash": bytes.fromhex("22" * 32),
        "expected_url": EXPECTED_URL,
    }


@pytest.fixture
def make_journal(deployment_params) -> Callable[..., Tuple[Journal, bytes]]:
    def _make(**overrides: Any) -> Tuple[Journal, bytes]:
        fields = dict(
            notary_key_fingerprint=deployment_params["notary_key_fingerprint"],
            method="GET",
            url=EXPECTED_URL + "?account=42",
            timestamp=1_700_000_000,
            queries_hash=deployment_params["queries_hash"],
            balance="123.45",
        )
        fields.update(overrides)
        j = Journal(**fields)
        return j, encode_journal(j)

    return _make

